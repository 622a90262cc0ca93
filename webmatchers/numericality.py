"""The ``validate_numericality_of`` matcher.

Usage::

    matcher = validate_numericality_of("age").only_integer().is_greater_than(18)
    assert matcher.matches(subject), matcher.failure_message()

The matcher is a composite. It always starts with a sub-matcher asserting
that a non-numeric value is rejected, and every qualifier appends another
sub-matcher. Sub-matchers are kept in call order: the description lists
comparisons in that order, and when several sub-matchers fail the message of
the last failing one is the one reported.
"""
from __future__ import annotations

import logging
from typing import Any

from webmatchers.config import get_config
from webmatchers.messages import MessageKey
from webmatchers.protocols import ValidatingSubject
from webmatchers.submatchers import (
    Comparison,
    ComparisonMatcher,
    DisallowValueMatcher,
    MessageArg,
    OnlyIntegerMatcher,
    Parity,
    ParityMatcher,
    ValidationMatcher,
)

logger = logging.getLogger(__name__)


class ValidateNumericalityOfMatcher:
    """Composite matcher over an ordered list of sub-matchers."""

    def __init__(self, attribute: str) -> None:
        self.attribute = attribute
        self._submatchers: list[ValidationMatcher] = []
        self._failing: list[ValidationMatcher] | None = None
        self._add_disallow_value_matcher()

    def __repr__(self) -> str:
        return f"validate_numericality_of({self.attribute!r})"

    @property
    def submatchers(self) -> tuple[ValidationMatcher, ...]:
        return tuple(self._submatchers)

    @property
    def failing_submatchers(self) -> tuple[ValidationMatcher, ...]:
        return tuple(self._failing or ())

    # -- qualifiers ----------------------------------------------------------

    def only_integer(self) -> ValidateNumericalityOfMatcher:
        return self._add_submatcher(OnlyIntegerMatcher(self.attribute))

    def is_greater_than(self, value: Any) -> ValidateNumericalityOfMatcher:
        return self._add_comparison(value, Comparison.GREATER_THAN)

    def is_greater_than_or_equal_to(self, value: Any) -> ValidateNumericalityOfMatcher:
        return self._add_comparison(value, Comparison.GREATER_THAN_OR_EQUAL_TO)

    def is_equal_to(self, value: Any) -> ValidateNumericalityOfMatcher:
        return self._add_comparison(value, Comparison.EQUAL_TO)

    def is_less_than(self, value: Any) -> ValidateNumericalityOfMatcher:
        return self._add_comparison(value, Comparison.LESS_THAN)

    def is_less_than_or_equal_to(self, value: Any) -> ValidateNumericalityOfMatcher:
        return self._add_comparison(value, Comparison.LESS_THAN_OR_EQUAL_TO)

    def odd(self) -> ValidateNumericalityOfMatcher:
        return self._add_submatcher(ParityMatcher(self.attribute, Parity.ODD))

    def even(self) -> ValidateNumericalityOfMatcher:
        return self._add_submatcher(ParityMatcher(self.attribute, Parity.EVEN))

    def with_message(self, message: MessageArg) -> ValidateNumericalityOfMatcher:
        """Expect ``message`` from every sub-matcher registered so far."""
        for submatcher in self._submatchers:
            submatcher.with_message(message)
        return self

    # -- evaluation ----------------------------------------------------------

    def matches(self, subject: ValidatingSubject) -> bool:
        self._failing = [m for m in self._submatchers if not m.matches(subject)]
        if self._failing:
            logger.debug(
                "%r failed %d of %d sub-matchers",
                self, len(self._failing), len(self._submatchers),
            )
        return not self._failing

    def does_not_match(self, subject: ValidatingSubject) -> bool:
        return not self.matches(subject)

    def failure_message(self) -> str | None:
        reporter = self._reporter()
        return reporter.failure_message() if reporter else None

    def failure_message_when_negated(self) -> str | None:
        reporter = self._reporter()
        return reporter.failure_message_when_negated() if reporter else None

    def description(self) -> str:
        description = f"only allow {self._allowed_types()} for {self.attribute}"
        comparisons = [
            m.comparison_description for m in self._submatchers
            if m.comparison_description
        ]
        if comparisons:
            description += " which are " + " and ".join(comparisons)
        return description

    # -- helpers -------------------------------------------------------------

    def _add_disallow_value_matcher(self) -> None:
        disallow = DisallowValueMatcher(get_config().non_numeric_value)
        disallow.for_attribute(self.attribute).with_message(MessageKey.NOT_A_NUMBER)
        self._add_submatcher(disallow)

    def _add_submatcher(self, submatcher: ValidationMatcher) -> ValidateNumericalityOfMatcher:
        self._submatchers.append(submatcher)
        return self

    def _add_comparison(self, value: Any, comparison: Comparison) -> ValidateNumericalityOfMatcher:
        return self._add_submatcher(
            ComparisonMatcher(value, comparison).for_attribute(self.attribute)
        )

    def _reporter(self) -> ValidationMatcher | None:
        if self._failing is None:
            return None
        if self._failing:
            return self._failing[-1]
        return self._submatchers[-1]

    def _allowed_types(self) -> str:
        base = "numbers"
        parity = ""
        for m in self._submatchers:
            if isinstance(m, OnlyIntegerMatcher):
                base = "integers"
            elif isinstance(m, ParityMatcher):
                parity = m.parity.value
        return f"{parity} {base}" if parity else base


def validate_numericality_of(attribute: str) -> ValidateNumericalityOfMatcher:
    """Build a matcher for a numericality validation on ``attribute``."""
    return ValidateNumericalityOfMatcher(attribute)

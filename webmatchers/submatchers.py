"""Sub-matchers for numericality validation.

Each sub-matcher checks one constraint by probing the subject: it sets a
value on the attribute, runs validations, and looks for its expected message
among the attribute's errors. A probe either should be rejected (the message
must appear) or should be accepted (the message must not appear).

Layers
------
Probe / ProbeResult   one value and what the subject did with it
ValidationMatcher     shared evaluate/message machinery
DisallowValueMatcher  one value that must be rejected
AllowValueMatcher     one value that must be accepted
OnlyIntegerMatcher    rejects non-integers
ComparisonMatcher     <, <=, ==, >=, > against a bound
ParityMatcher         odd / even
"""
from __future__ import annotations

import logging
import operator
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from webmatchers.config import get_config
from webmatchers.messages import (
    ExpectedMessage,
    MessageKey,
    describe_errors,
    expected_message,
)
from webmatchers.protocols import ValidatingSubject

logger = logging.getLogger(__name__)

MessageArg = MessageKey | str | re.Pattern[str] | None


# ---------------------------------------------------------------------------
# Probes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Probe:
    value: Any
    should_reject: bool


@dataclass(frozen=True)
class ProbeResult:
    probe: Probe
    errors: tuple[str, ...]
    rejected: bool

    @property
    def passed(self) -> bool:
        return self.rejected == self.probe.should_reject


def run_probe(
    subject: ValidatingSubject,
    attribute: str,
    probe: Probe,
    expected: ExpectedMessage,
) -> ProbeResult:
    """Set ``probe.value`` on the subject and record what it reported."""
    subject.set_attribute(attribute, probe.value)
    subject.run_validations()
    errors = tuple(subject.errors_on(attribute))
    result = ProbeResult(probe=probe, errors=errors, rejected=expected.found_in(errors))
    logger.debug(
        "probe %s=%r should_reject=%s rejected=%s errors=%s",
        attribute, probe.value, probe.should_reject, result.rejected, errors,
    )
    return result


# ---------------------------------------------------------------------------
# Base sub-matcher
# ---------------------------------------------------------------------------

class ValidationMatcher:
    """Shared machinery: probes, expected message, failure messages.

    Subclasses provide ``probes()`` and ``default_message_key``, and may
    override ``message_options()`` and ``comparison_description``.
    """

    default_message_key: MessageKey = MessageKey.NOT_A_NUMBER
    comparison_description: str = ""

    def __init__(self, attribute: str | None = None) -> None:
        self.attribute = attribute
        self._message: MessageArg = None
        self._results: list[ProbeResult] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(attribute={self.attribute!r})"

    def for_attribute(self, attribute: str) -> ValidationMatcher:
        self.attribute = attribute
        return self

    def with_message(self, message: MessageArg) -> ValidationMatcher:
        """Override the expected error text. ``None`` keeps the default."""
        if message is not None:
            self._message = message
        return self

    def probes(self) -> list[Probe]:
        raise NotImplementedError

    def message_options(self) -> dict[str, Any]:
        return {}

    @property
    def expected(self) -> ExpectedMessage:
        return expected_message(
            self._message, self.default_message_key, **self.message_options()
        )

    @property
    def results(self) -> list[ProbeResult]:
        return list(self._results)

    def matches(self, subject: ValidatingSubject) -> bool:
        if self.attribute is None:
            raise ValueError(f"{type(self).__name__} has no attribute; call for_attribute()")
        expected = self.expected
        self._results = [
            run_probe(subject, self.attribute, probe, expected)
            for probe in self.probes()
        ]
        return all(r.passed for r in self._results)

    def description(self) -> str:
        return f"{self.expected.describe()} for {self.attribute}"

    # -- messages ------------------------------------------------------------

    def _result_for(self, probe: Probe) -> ProbeResult | None:
        for r in self._results:
            if r.probe == probe:
                return r
        return None

    def _sentence(self, lead: str, probe: Probe) -> str:
        result = self._result_for(probe)
        errors = describe_errors(result.errors if result else ())
        return (
            f"{lead} errors to {self.expected.describe()} when "
            f"{self.attribute} is set to {probe.value!r}, got {errors}"
        )

    def failure_message(self) -> str:
        failing = [r for r in self._results if not r.passed]
        probe = failing[0].probe if failing else self.probes()[0]
        lead = "Expected" if probe.should_reject else "Did not expect"
        return self._sentence(lead, probe)

    def failure_message_when_negated(self) -> str:
        probes = self.probes()
        rejecting = [p for p in probes if p.should_reject]
        probe = rejecting[0] if rejecting else probes[0]
        lead = "Did not expect" if probe.should_reject else "Expected"
        return self._sentence(lead, probe)


# ---------------------------------------------------------------------------
# Single-value matchers
# ---------------------------------------------------------------------------

class DisallowValueMatcher(ValidationMatcher):
    """The subject must reject ``value`` with the expected message."""

    def __init__(self, value: Any, message_key: MessageKey = MessageKey.NOT_A_NUMBER) -> None:
        super().__init__()
        self.value = value
        self.default_message_key = message_key

    def probes(self) -> list[Probe]:
        return [Probe(self.value, should_reject=True)]


class AllowValueMatcher(ValidationMatcher):
    """The subject must not report the expected message for ``value``."""

    def __init__(self, value: Any, message_key: MessageKey = MessageKey.NOT_A_NUMBER) -> None:
        super().__init__()
        self.value = value
        self.default_message_key = message_key

    def probes(self) -> list[Probe]:
        return [Probe(self.value, should_reject=False)]


# ---------------------------------------------------------------------------
# Numericality option matchers
# ---------------------------------------------------------------------------

class OnlyIntegerMatcher(ValidationMatcher):
    default_message_key = MessageKey.NOT_AN_INTEGER

    def probes(self) -> list[Probe]:
        return [
            Probe(get_config().non_integer_value, should_reject=True),
            Probe(1, should_reject=False),
        ]


class Comparison(str, Enum):
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL_TO = ">="
    EQUAL_TO = "=="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL_TO = "<="

    @property
    def message_key(self) -> MessageKey:
        return MessageKey[self.name]

    @property
    def phrase(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def check(self) -> Callable[[Any, Any], bool]:
        return _OPERATORS[self]


_OPERATORS: dict[Comparison, Callable[[Any, Any], bool]] = {
    Comparison.GREATER_THAN: operator.gt,
    Comparison.GREATER_THAN_OR_EQUAL_TO: operator.ge,
    Comparison.EQUAL_TO: operator.eq,
    Comparison.LESS_THAN: operator.lt,
    Comparison.LESS_THAN_OR_EQUAL_TO: operator.le,
}


class ComparisonMatcher(ValidationMatcher):
    """Probes just below, at and just above ``value``.

    Each probe must be rejected exactly when the comparison is false for it,
    so both the strict and the inclusive side of the boundary are checked.
    """

    def __init__(self, value: Any, comparison: Comparison | str) -> None:
        super().__init__()
        try:
            self.comparison = Comparison(comparison)
        except ValueError:
            raise ValueError(f"Unknown comparison operator: {comparison!r}") from None
        self.value = value

    def __repr__(self) -> str:
        return (
            f"ComparisonMatcher({self.value!r}, {self.comparison.value!r}, "
            f"attribute={self.attribute!r})"
        )

    @property
    def default_message_key(self) -> MessageKey:  # type: ignore[override]
        return self.comparison.message_key

    @property
    def comparison_description(self) -> str:  # type: ignore[override]
        return f"{self.comparison.phrase} {self.value}"

    def message_options(self) -> dict[str, Any]:
        return {"count": self.value}

    def probes(self) -> list[Probe]:
        return [
            Probe(v, should_reject=not self.comparison.check(v, self.value))
            for v in (self.value - 1, self.value, self.value + 1)
        ]


class Parity(str, Enum):
    ODD = "odd"
    EVEN = "even"


class ParityMatcher(ValidationMatcher):
    def __init__(self, attribute: str | None = None, parity: Parity | str = Parity.ODD) -> None:
        super().__init__(attribute)
        self.parity = Parity(parity)

    @property
    def default_message_key(self) -> MessageKey:  # type: ignore[override]
        return MessageKey(self.parity.value)

    def probes(self) -> list[Probe]:
        disallowed, allowed = (2, 1) if self.parity is Parity.ODD else (1, 2)
        return [
            Probe(disallowed, should_reject=True),
            Probe(allowed, should_reject=False),
        ]

"""The ``permit`` matcher for controller parameter whitelisting.

Usage::

    matcher = permit("name", "age").for_action("create").in_context(context)
    assert matcher.matches(), matcher.failure_message()

The matcher sends one simulated request per instance through a
DispatchContext and remembers which parameter names the action permitted.
``matches`` asks whether every requested name was permitted;
``does_not_match`` asks whether any requested name was permitted.
"""
from __future__ import annotations

import logging
from typing import Any

from webmatchers.config import get_config
from webmatchers.errors import (
    ActionNotDefinedError,
    ContextNotDefinedError,
    MatcherAlreadyEvaluatedError,
    VerbNotDefinedError,
)
from webmatchers.messages import to_sentence
from webmatchers.protocols import DispatchContext

logger = logging.getLogger(__name__)


def resolve_verb(action: str, verb: str | None = None) -> str:
    """Return the HTTP verb for ``action``, defaulting RESTful actions."""
    if verb is not None:
        return verb.lower()
    try:
        return get_config().restful_verbs[action]
    except KeyError:
        raise VerbNotDefinedError(action) from None


class StrongParametersMatcher:
    def __init__(self, *attributes: str, context: DispatchContext | None = None) -> None:
        self.attributes: list[str] = [str(a) for a in attributes]
        self.context = context
        self.action: str | None = None
        self.verb: str | None = None
        self._permitted: set[str] | None = None

    def __repr__(self) -> str:
        return f"permit({', '.join(repr(a) for a in self.attributes)})"

    # -- configuration -------------------------------------------------------

    def for_action(self, action: str, verb: str | None = None) -> StrongParametersMatcher:
        self._ensure_not_evaluated("for_action")
        self.action = str(action)
        self.verb = verb.lower() if verb else None
        return self

    def in_context(self, context: DispatchContext) -> StrongParametersMatcher:
        self._ensure_not_evaluated("in_context")
        self.context = context
        return self

    # -- evaluation ----------------------------------------------------------

    @property
    def evaluated(self) -> bool:
        return self._permitted is not None

    @property
    def permitted_attributes(self) -> set[str] | None:
        return set(self._permitted) if self._permitted is not None else None

    @property
    def missing_attributes(self) -> set[str] | None:
        if self._permitted is None:
            return None
        return {a for a in self.attributes if a not in self._permitted}

    @property
    def permitted_requested_attributes(self) -> set[str] | None:
        if self._permitted is None:
            return None
        return {a for a in self.attributes if a in self._permitted}

    def matches(self, subject: Any = None) -> bool:
        """True when every requested attribute was permitted.

        ``subject`` is used as the dispatch context when none was configured.
        """
        self._evaluate(subject)
        return not self.missing_attributes

    def does_not_match(self, subject: Any = None) -> bool:
        """True when at least one requested attribute was permitted."""
        self._evaluate(subject)
        return bool(self.permitted_requested_attributes)

    def failure_message(self) -> str:
        missing = to_sentence(sorted(self.missing_attributes or ()))
        return f"Expected controller to permit {missing}, but it did not."

    def failure_message_when_negated(self) -> str:
        overlap = to_sentence(sorted(self.permitted_requested_attributes or ()))
        return f"Expected controller not to permit {overlap}, but it did."

    def description(self) -> str:
        names = to_sentence(self.attributes)
        if self.action is None:
            return f"permit parameters {names}"
        try:
            verb = resolve_verb(self.action, self.verb).upper()
        except VerbNotDefinedError:
            return f"permit {self.action} to receive parameters {names}"
        return f"permit {verb} {self.action} to receive parameters {names}"

    # -- helpers -------------------------------------------------------------

    def _ensure_not_evaluated(self, operation: str) -> None:
        if self.evaluated:
            raise MatcherAlreadyEvaluatedError(operation)

    def _evaluate(self, subject: Any) -> None:
        if self._permitted is not None:
            return
        if self.action is None:
            raise ActionNotDefinedError()
        verb = resolve_verb(self.action, self.verb)
        context = self.context if self.context is not None else subject
        if context is None:
            raise ContextNotDefinedError()
        self._permitted = {str(name) for name in context.dispatch(verb, self.action)}
        logger.debug(
            "%r %s %s permitted=%s missing=%s",
            self, verb, self.action, sorted(self._permitted),
            sorted(self.missing_attributes or ()),
        )


def permit(*attributes: str, context: DispatchContext | None = None) -> StrongParametersMatcher:
    """Build a matcher asserting a controller action permits ``attributes``."""
    return StrongParametersMatcher(*attributes, context=context)

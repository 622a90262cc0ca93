"""Expected error messages.

Sub-matchers compare the errors a subject reports against an expected
message. The expectation is either the catalog default for a MessageKey, an
exact string, or a regular expression supplied through ``with_message``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Sequence

from webmatchers.config import get_config
from webmatchers.errors import UnknownMessageKeyError


class MessageKey(str, Enum):
    NOT_A_NUMBER = "not_a_number"
    NOT_AN_INTEGER = "not_an_integer"
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL_TO = "greater_than_or_equal_to"
    EQUAL_TO = "equal_to"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL_TO = "less_than_or_equal_to"
    ODD = "odd"
    EVEN = "even"


def default_message(key: MessageKey | str, **options: Any) -> str:
    """Format the catalog entry for ``key`` with ``options`` (e.g. count)."""
    name = key.value if isinstance(key, MessageKey) else key
    try:
        template = get_config().messages[name]
    except KeyError:
        raise UnknownMessageKeyError(name) from None
    return template.format(**options)


@dataclass(frozen=True)
class ExpectedMessage:
    """An exact error text or a pattern searched for in error texts."""

    text: str | None = None
    pattern: re.Pattern[str] | None = None

    def __post_init__(self) -> None:
        if (self.text is None) == (self.pattern is None):
            raise ValueError("ExpectedMessage needs exactly one of text or pattern")

    def found_in(self, errors: Iterable[str]) -> bool:
        if self.pattern is not None:
            return any(self.pattern.search(e) for e in errors)
        return self.text in errors

    def describe(self) -> str:
        if self.pattern is not None:
            return f"match pattern {self.pattern.pattern!r}"
        return f'include "{self.text}"'


def expected_message(
    message: MessageKey | str | re.Pattern[str] | None,
    default_key: MessageKey,
    **options: Any,
) -> ExpectedMessage:
    """Resolve a ``with_message`` argument into an ExpectedMessage.

    ``None`` means "no override" and resolves to the default for
    ``default_key``.
    """
    if message is None:
        return ExpectedMessage(text=default_message(default_key, **options))
    if isinstance(message, MessageKey):
        return ExpectedMessage(text=default_message(message, **options))
    if isinstance(message, str):
        return ExpectedMessage(text=message)
    if isinstance(message, re.Pattern):
        return ExpectedMessage(pattern=message)
    raise TypeError(
        f"Expected message must be a str, MessageKey, compiled pattern or None, "
        f"got {type(message).__name__}"
    )


def to_sentence(words: Iterable[str]) -> str:
    """Join words as 'a', 'a and b' or 'a, b, and c'."""
    items = [str(w) for w in words]
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return ", ".join(items[:-1]) + f", and {items[-1]}"


def describe_errors(errors: Sequence[str]) -> str:
    """Render observed errors for a failure message."""
    if not errors:
        return "no errors"
    if len(errors) == 1:
        return f'error: "{errors[0]}"'
    return "errors: [" + ", ".join(f'"{e}"' for e in errors) + "]"

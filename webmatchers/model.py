"""Pydantic adapter for the ValidatingSubject protocol.

``ModelSubject`` keeps a dict of field data for a pydantic model class. Setting
an attribute updates the dict; running validations calls ``model_validate``
and groups the resulting errors by field name.

Pydantic's built-in numeric errors are translated into the message catalog
(``is not a number``, ``must be greater than 18`` ...) so the matcher defaults
line up with ``Field(gt=...)`` style constraints. ``Field(multiple_of=2)`` reads
as ``must be even``. Errors raised by custom
validators keep the text of the raised exception.

Pydantic stops at the first failing check for a field, so a model with
several numeric constraints on one field reports only one of them per probe.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from webmatchers.messages import MessageKey, default_message

logger = logging.getLogger(__name__)

_NOT_A_NUMBER_TYPES = frozenset({
    "int_parsing",
    "int_type",
    "float_parsing",
    "float_type",
    "decimal_parsing",
    "decimal_type",
    "finite_number",
})

_COMPARISON_TYPES: dict[str, tuple[MessageKey, str]] = {
    "greater_than": (MessageKey.GREATER_THAN, "gt"),
    "greater_than_equal": (MessageKey.GREATER_THAN_OR_EQUAL_TO, "ge"),
    "less_than": (MessageKey.LESS_THAN, "lt"),
    "less_than_equal": (MessageKey.LESS_THAN_OR_EQUAL_TO, "le"),
}


def translate_error(error: Mapping[str, Any]) -> str:
    """Turn one pydantic error dict into the message a matcher expects."""
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}

    if kind in _NOT_A_NUMBER_TYPES:
        return default_message(MessageKey.NOT_A_NUMBER)
    if kind == "int_from_float":
        return default_message(MessageKey.NOT_AN_INTEGER)
    if kind in _COMPARISON_TYPES:
        key, bound = _COMPARISON_TYPES[kind]
        return default_message(key, count=ctx.get(bound))
    if kind == "multiple_of" and ctx.get("multiple_of") == 2:
        return default_message(MessageKey.EVEN)
    if kind in ("value_error", "assertion_error") and "error" in ctx:
        return str(ctx["error"])
    return str(error.get("msg", ""))


class ModelSubject:
    """Probe a pydantic model class through the ValidatingSubject protocol."""

    def __init__(
        self,
        model: type[BaseModel],
        data: Mapping[str, Any] | None = None,
    ) -> None:
        self.model = model
        self.data: dict[str, Any] = dict(data or {})
        self._errors: dict[str, list[str]] = {}

    def __repr__(self) -> str:
        return f"ModelSubject({self.model.__name__})"

    def set_attribute(self, attribute: str, value: Any) -> None:
        self.data[attribute] = value

    def run_validations(self) -> bool:
        try:
            self.model.model_validate(self.data)
        except ValidationError as e:
            self._errors = self._group(e)
            logger.debug("%s invalid: %s", self.model.__name__, self._errors)
            return False
        self._errors = {}
        return True

    def errors_on(self, attribute: str) -> list[str]:
        return list(self._errors.get(attribute, []))

    @staticmethod
    def _group(e: ValidationError) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for error in e.errors():
            loc = error.get("loc") or ("__root__",)
            grouped.setdefault(str(loc[0]), []).append(translate_error(error))
        return grouped

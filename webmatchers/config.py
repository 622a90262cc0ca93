"""Matcher configuration.

Values are resolved in this order:
- Defaults declared on ``MatcherConfig``.
- Environment variables ``WEBMATCHERS_NON_NUMERIC_VALUE`` and
  ``WEBMATCHERS_NON_INTEGER_VALUE``.
- Explicit overrides passed to ``configure()``.

Pydantic validates the result; invalid values surface as ConfigurationError.
"""
from __future__ import annotations

import logging
import os
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from webmatchers.errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "WEBMATCHERS_"

HTTP_VERBS = frozenset({"get", "post", "put", "patch", "delete", "head", "options"})

DEFAULT_MESSAGES: dict[str, str] = {
    "not_a_number": "is not a number",
    "not_an_integer": "must be an integer",
    "greater_than": "must be greater than {count}",
    "greater_than_or_equal_to": "must be greater than or equal to {count}",
    "equal_to": "must be equal to {count}",
    "less_than": "must be less than {count}",
    "less_than_or_equal_to": "must be less than or equal to {count}",
    "odd": "must be odd",
    "even": "must be even",
}

DEFAULT_RESTFUL_VERBS: dict[str, str] = {
    "index": "get",
    "show": "get",
    "new": "get",
    "edit": "get",
    "create": "post",
    "update": "put",
    "destroy": "delete",
}


class MatcherConfig(BaseModel):
    """Probe values, message catalog and verb table used by the matchers."""

    non_numeric_value: str = Field(default="abcd", min_length=1)
    non_integer_value: float = 0.1
    messages: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_MESSAGES))
    restful_verbs: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_RESTFUL_VERBS)
    )

    @field_validator("non_integer_value")
    @classmethod
    def must_not_be_integral(cls, v: float) -> float:
        if float(v).is_integer():
            raise ValueError(f"non_integer_value must have a fractional part, got {v!r}")
        return v

    @field_validator("messages")
    @classmethod
    def merge_with_defaults(cls, v: dict[str, str]) -> dict[str, str]:
        merged = dict(DEFAULT_MESSAGES)
        merged.update(v)
        return merged

    @field_validator("restful_verbs")
    @classmethod
    def verbs_are_http_verbs(cls, v: dict[str, str]) -> dict[str, str]:
        normalized = {}
        for action, verb in v.items():
            if verb.lower() not in HTTP_VERBS:
                raise ValueError(f"Unknown HTTP verb {verb!r} for action {action!r}")
            normalized[action] = verb.lower()
        return normalized


_config: MatcherConfig | None = None


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for field_name in ("non_numeric_value", "non_integer_value"):
        raw = os.environ.get(ENV_PREFIX + field_name.upper())
        if raw is not None:
            overrides[field_name] = raw
    return overrides


def _build(values: dict[str, Any]) -> MatcherConfig:
    try:
        return MatcherConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


def load_config() -> MatcherConfig:
    """Build a config from defaults and environment overrides."""
    overrides = _env_overrides()
    if overrides:
        logger.debug("Loading matcher config with env overrides: %s", sorted(overrides))
    return _build(overrides)


def get_config() -> MatcherConfig:
    """Return the active config, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def configure(**overrides: Any) -> MatcherConfig:
    """Validate and install a config built from the current one plus overrides."""
    global _config
    values = get_config().model_dump()
    values.update(overrides)
    _config = _build(values)
    logger.debug("Matcher config updated: %s", sorted(overrides))
    return _config


def reset_config() -> None:
    """Drop the active config so the next access reloads it."""
    global _config
    _config = None

"""Test doubles shared by the test modules.

NumericRecord     in-memory validation engine with numericality rules
RecordingContext  DispatchContext that returns a fixed permitted list
build_users_app   FastAPI app whose actions use strong parameters
Pydantic models   small models for the ModelSubject adapter tests
"""
from __future__ import annotations

import operator
from typing import Any

from fastapi import Depends, FastAPI
from pydantic import BaseModel, Field, field_validator

from webmatchers import Parameters, install_strong_parameters, strong_parameters


# ---------------------------------------------------------------------------
# Validation engine
# ---------------------------------------------------------------------------

_CHECKS = [
    ("greater_than", operator.gt),
    ("greater_than_or_equal_to", operator.ge),
    ("equal_to", operator.eq),
    ("less_than", operator.lt),
    ("less_than_or_equal_to", operator.le),
]


def _parse_number(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        for cast in (int, float):
            try:
                return cast(value)
            except ValueError:
                pass
    return None


def numericality_errors(value: Any, options: dict[str, Any]) -> list[str]:
    """Every numericality error for ``value``, collected like a web framework would."""
    message = options.get("message")
    number = _parse_number(value)
    if number is None:
        return [message or "is not a number"]
    if options.get("only_integer") and not float(number).is_integer():
        return [message or "must be an integer"]

    errors = []
    for key, check in _CHECKS:
        if key in options and not check(number, options[key]):
            errors.append(message or f"must be {key.replace('_', ' ')} {options[key]}")
    if options.get("odd") and number % 2 != 1:
        errors.append(message or "must be odd")
    if options.get("even") and number % 2 != 0:
        errors.append(message or "must be even")
    return errors


class NumericRecord:
    """A record with numericality validations keyed by attribute name."""

    def __init__(self, validations: dict[str, dict[str, Any]] | None = None) -> None:
        self.validations = validations or {}
        self.values: dict[str, Any] = {}
        self.errors: dict[str, list[str]] = {}
        self.validation_runs = 0

    def set_attribute(self, attribute: str, value: Any) -> None:
        self.values[attribute] = value

    def run_validations(self) -> bool:
        self.validation_runs += 1
        self.errors = {}
        for attribute, options in self.validations.items():
            errors = numericality_errors(self.values.get(attribute), options)
            if errors:
                self.errors[attribute] = errors
        return not self.errors

    def errors_on(self, attribute: str) -> list[str]:
        return list(self.errors.get(attribute, []))


def validating_numericality(**options: Any) -> NumericRecord:
    return NumericRecord({"attr": options})


def not_validating_numericality() -> NumericRecord:
    return NumericRecord()


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class RecordingContext:
    """Returns ``permitted`` for every dispatch and records the calls."""

    def __init__(self, permitted: list[str] | None = None) -> None:
        self.permitted = list(permitted or [])
        self.calls: list[tuple[str, str]] = []

    def dispatch(self, verb: str, action: str) -> list[str]:
        self.calls.append((verb, action))
        return list(self.permitted)


def build_users_app() -> FastAPI:
    app = install_strong_parameters(FastAPI())

    @app.post("/users")
    def create_user(params: Parameters = Depends(strong_parameters)) -> dict:
        return params.require("user").permit("name", "age")

    @app.get("/users/new")
    def new_user() -> dict:
        return {}

    @app.put("/users/{user_id}")
    def update_user(user_id: str, params: Parameters = Depends(strong_parameters)) -> dict:
        return params.require("user").permit("name")

    @app.post("/users/authorize")
    def authorize(params: Parameters = Depends(strong_parameters)) -> dict:
        return params.require("session").permit("token")

    return app


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class Adult(BaseModel):
    name: str = "x"
    age: int = Field(gt=18)


class Student(BaseModel):
    gpa: float


class Untyped(BaseModel):
    attr: Any = None


class Calendar(BaseModel):
    birth_day: int

    @field_validator("birth_day")
    @classmethod
    def must_be_odd(cls, v: int) -> int:
        if v % 2 != 1:
            raise ValueError("must be odd")
        return v


class Weight(BaseModel):
    weight: int = Field(le=150)


class Month(BaseModel):
    birth_month: int = Field(multiple_of=2)


class Batch(BaseModel):
    size: int = Field(multiple_of=5)

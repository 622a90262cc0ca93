"""Capability protocols.

The matchers never reach into a framework object by method name. A subject
under test has to provide the small set of named operations below; the
adapters in ``model.py`` and ``controller.py`` provide them for pydantic
models and FastAPI apps.
"""
from __future__ import annotations

from typing import Any, Iterable, Protocol, runtime_checkable


@runtime_checkable
class ValidatingSubject(Protocol):
    """Something whose attribute validation can be probed."""

    def set_attribute(self, attribute: str, value: Any) -> None: ...

    def run_validations(self) -> bool: ...

    def errors_on(self, attribute: str) -> list[str]: ...


@runtime_checkable
class DispatchContext(Protocol):
    """Something that can send a verb to a controller action."""

    def dispatch(self, verb: str, action: str) -> Iterable[str]:
        """Send the request and return the permitted parameter names."""
        ...


@runtime_checkable
class Matcher(Protocol):
    """What a test-runner integration needs from a matcher."""

    def matches(self, subject: Any) -> bool: ...

    def failure_message(self) -> str | None: ...

    def failure_message_when_negated(self) -> str | None: ...

    def description(self) -> str: ...

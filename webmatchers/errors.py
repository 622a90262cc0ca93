"""Exceptions raised by webmatchers.

Only configuration and usage mistakes raise. A subject that fails a matcher
is reported through ``matches()`` returning False plus the failure message
accessors, never through an exception.
"""
from __future__ import annotations


class MatcherError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(MatcherError):
    """Raised when matcher configuration values are invalid."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid matcher configuration: {detail}")


class UnknownMessageKeyError(MatcherError):
    """Raised when a message key has no entry in the message catalog."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"No default message registered for key: {key}")


# ---------------------------------------------------------------------------
# Strong parameters
# ---------------------------------------------------------------------------

class ActionNotDefinedError(MatcherError):
    """Raised when a permit matcher is evaluated before ``for_action``."""

    def __init__(self) -> None:
        super().__init__(
            "You must specify the controller action using for_action()"
        )


class VerbNotDefinedError(MatcherError):
    """Raised when a non-RESTful action is given without an HTTP verb."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(
            f"You must specify an HTTP verb for non-RESTful action {action!r}, "
            f"e.g. for_action({action!r}, verb='post')"
        )


class ContextNotDefinedError(MatcherError):
    """Raised when there is nothing to dispatch the simulated request to."""

    def __init__(self) -> None:
        super().__init__(
            "No dispatch context: pass context= to permit(), call "
            "in_context(), or pass the context to matches()"
        )


class MatcherAlreadyEvaluatedError(MatcherError):
    """Raised when a matcher is reconfigured after it has been evaluated."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot call {operation}() after the matcher was evaluated")


class ParameterMissingError(MatcherError):
    """Raised by ``Parameters.require`` when the key is absent or empty."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Parameter missing or empty: {key}")


class RouteNotDefinedError(MatcherError):
    """Raised when a dispatch context has no route for an action."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"No route defined for action: {action}")

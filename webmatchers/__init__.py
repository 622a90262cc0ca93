"""webmatchers
===========

Declarative matchers for testing web-application model validations and
controller parameter whitelisting.

Core Components:
- validate_numericality_of: composite matcher over numericality sub-matchers
- permit: strong-parameters matcher for controller actions
- ModelSubject / FastAPIContext: adapters for pydantic models and FastAPI apps

Quick Start:
    from webmatchers import ModelSubject, validate_numericality_of

    matcher = validate_numericality_of("age").only_integer().is_greater_than(18)
    subject = ModelSubject(Person)
    assert matcher.matches(subject), matcher.failure_message()
"""

import logging

__version__ = "0.1.0"

from .config import MatcherConfig, configure, get_config, reset_config
from .controller import (
    FastAPIContext,
    Parameters,
    PermitRecorder,
    install_strong_parameters,
    recording_permits,
    strong_parameters,
)
from .errors import (
    ActionNotDefinedError,
    ConfigurationError,
    ContextNotDefinedError,
    MatcherAlreadyEvaluatedError,
    MatcherError,
    ParameterMissingError,
    RouteNotDefinedError,
    UnknownMessageKeyError,
    VerbNotDefinedError,
)
from .messages import ExpectedMessage, MessageKey, default_message, to_sentence
from .model import ModelSubject
from .numericality import ValidateNumericalityOfMatcher, validate_numericality_of
from .permit import StrongParametersMatcher, permit, resolve_verb
from .protocols import DispatchContext, Matcher, ValidatingSubject
from .submatchers import (
    AllowValueMatcher,
    Comparison,
    ComparisonMatcher,
    DisallowValueMatcher,
    OnlyIntegerMatcher,
    Parity,
    ParityMatcher,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Matchers
    "validate_numericality_of",
    "ValidateNumericalityOfMatcher",
    "permit",
    "StrongParametersMatcher",
    "resolve_verb",
    # Sub-matchers
    "AllowValueMatcher",
    "DisallowValueMatcher",
    "OnlyIntegerMatcher",
    "ComparisonMatcher",
    "Comparison",
    "ParityMatcher",
    "Parity",
    # Messages
    "MessageKey",
    "ExpectedMessage",
    "default_message",
    "to_sentence",
    # Protocols and adapters
    "ValidatingSubject",
    "DispatchContext",
    "Matcher",
    "ModelSubject",
    "FastAPIContext",
    "Parameters",
    "PermitRecorder",
    "install_strong_parameters",
    "recording_permits",
    "strong_parameters",
    # Configuration
    "MatcherConfig",
    "configure",
    "get_config",
    "reset_config",
    # Errors
    "MatcherError",
    "ConfigurationError",
    "UnknownMessageKeyError",
    "ActionNotDefinedError",
    "VerbNotDefinedError",
    "ContextNotDefinedError",
    "MatcherAlreadyEvaluatedError",
    "ParameterMissingError",
    "RouteNotDefinedError",
]

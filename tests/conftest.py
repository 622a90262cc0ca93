"""Shared fixtures for matcher tests."""
from __future__ import annotations

import pytest
from fastapi import FastAPI

from support import RecordingContext, build_users_app
from webmatchers import reset_config


@pytest.fixture(autouse=True)
def fresh_config():
    """Every test starts from the default configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def context() -> RecordingContext:
    """A controller that permits ``name`` and ``age``."""
    return RecordingContext(["name", "age"])


@pytest.fixture
def users_app() -> FastAPI:
    return build_users_app()

"""Strong parameters for FastAPI apps, and a dispatch context to test them.

An endpoint receives its request data as ``Parameters`` and whitelists what
it will use::

    @app.post("/users")
    def create_user(params: Parameters = Depends(strong_parameters)) -> dict:
        return params.require("user").permit("name", "age")

Register the handler so a failed ``require`` answers 400::

    install_strong_parameters(app)

``FastAPIContext`` implements the DispatchContext protocol: it installs a
``PermitRecorder`` on ``app.state``, sends the request through
``TestClient`` and returns the names the endpoint passed to ``permit``.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from webmatchers.config import HTTP_VERBS
from webmatchers.errors import ParameterMissingError, RouteNotDefinedError

logger = logging.getLogger(__name__)

RECORDER_STATE_KEY = "webmatchers_permit_recorder"


class PermitRecorder:
    """Collects the names passed to ``Parameters.permit`` in call order."""

    def __init__(self) -> None:
        self._names: list[str] = []

    def record(self, names: tuple[str, ...]) -> None:
        for name in names:
            if name not in self._names:
                self._names.append(name)

    @property
    def permitted(self) -> list[str]:
        return list(self._names)


class Parameters(Mapping):
    """Read-only request parameters with ``require`` and ``permit``."""

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        recorder: PermitRecorder | None = None,
    ) -> None:
        self._data = dict(data or {})
        self._recorder = recorder

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Parameters({self._data!r})"

    def require(self, key: str) -> Parameters:
        """Return the nested parameters under ``key``.

        While a recorder is attached a missing key yields empty parameters,
        so the action still reaches its ``permit`` call.
        """
        value = self._data.get(key)
        if isinstance(value, Mapping) and value:
            return Parameters(value, self._recorder)
        if self._recorder is not None:
            return Parameters({}, self._recorder)
        raise ParameterMissingError(key)

    def permit(self, *names: str) -> dict[str, Any]:
        """Return only the whitelisted keys that are present."""
        if self._recorder is not None:
            self._recorder.record(names)
        return {name: self._data[name] for name in names if name in self._data}


async def strong_parameters(request: Request) -> Parameters:
    """FastAPI dependency: the JSON body as ``Parameters``."""
    body = await request.body()
    try:
        data = json.loads(body) if body else {}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Malformed JSON body: {e}")
    if not isinstance(data, Mapping):
        data = {}
    recorder = getattr(request.app.state, RECORDER_STATE_KEY, None)
    return Parameters(data, recorder)


async def parameter_missing_handler(request: Request, exc: ParameterMissingError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def install_strong_parameters(app: FastAPI) -> FastAPI:
    """Answer a failed ``require`` with 400 instead of a server error."""
    app.add_exception_handler(ParameterMissingError, parameter_missing_handler)
    return app


@contextmanager
def recording_permits(app: FastAPI) -> Iterator[PermitRecorder]:
    """Install a fresh recorder on ``app.state`` for the duration of the block."""
    recorder = PermitRecorder()
    setattr(app.state, RECORDER_STATE_KEY, recorder)
    try:
        yield recorder
    finally:
        delattr(app.state, RECORDER_STATE_KEY)


# ---------------------------------------------------------------------------
# Dispatch context
# ---------------------------------------------------------------------------

MEMBER_ID = "1"


def default_routes(resource: str) -> dict[str, str]:
    base = resource.rstrip("/")
    member = f"{base}/{MEMBER_ID}"
    return {
        "index": base,
        "create": base,
        "new": f"{base}/new",
        "show": member,
        "update": member,
        "destroy": member,
        "edit": f"{member}/edit",
    }


class FastAPIContext:
    """Dispatch controller actions of a FastAPI app through TestClient."""

    def __init__(
        self,
        app: FastAPI,
        resource: str | None = None,
        routes: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> None:
        self.app = app
        self.resource = resource
        self.routes = default_routes(resource) if resource else {}
        self.routes.update(routes or {})
        self.params = dict(params) if params is not None else None
        self.client = TestClient(app)

    def path_for(self, action: str) -> str:
        if action in self.routes:
            return self.routes[action]
        if self.resource:
            return f"{self.resource.rstrip('/')}/{action}"
        raise RouteNotDefinedError(action)

    def dispatch(self, verb: str, action: str) -> list[str]:
        if verb.lower() not in HTTP_VERBS:
            raise ValueError(f"Unknown HTTP verb: {verb!r}")
        path = self.path_for(action)
        with recording_permits(self.app) as recorder:
            if self.params is None:
                response = self.client.request(verb.upper(), path)
            else:
                response = self.client.request(verb.upper(), path, json=self.params)
        logger.debug(
            "%s %s (%s) -> %s permitted=%s",
            verb.upper(), path, action, response.status_code, recorder.permitted,
        )
        return recorder.permitted

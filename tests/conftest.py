"""Shared test fixtures and a demo envelope API for the test suite."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.testclient import TestClient
from pydantic import BaseModel

from envelope_assertions.config.settings import ResponderSettings, get_settings
from envelope_assertions.middleware.error_handler import (
    ResourceNotFoundError,
    register_error_handlers,
)
from envelope_assertions.responder import Responder


# ---------------------------------------------------------------------------
# Keep cached settings isolated between tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_settings_cache(monkeypatch: pytest.MonkeyPatch):
    """Drop RESPONDER_ env overrides and the cached settings around each test."""
    for key in ("RESPONDER_INCLUDE_STATUS_CODE", "RESPONDER_MAX_DATA_DEPTH", "RESPONDER_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> ResponderSettings:
    return ResponderSettings()


# ---------------------------------------------------------------------------
# Demo API under test
# ---------------------------------------------------------------------------

USERS: dict[int, dict[str, Any]] = {
    1: {"id": 1, "name": "Ada", "roles": ["admin", "editor"], "profile": {"city": "London", "active": True}},
    2: {"id": 2, "name": "Grace", "roles": [], "profile": {"city": "Arlington", "active": False}},
}


class NewUser(BaseModel):
    name: str
    age: int


class EchoRequest(BaseModel):
    data: Any = None
    status: int = 200


class FailRequest(BaseModel):
    code: str
    status: int = 400
    message: str | None = None


def create_demo_app(responder: Responder) -> FastAPI:
    """Build a small envelope-speaking API wired to *responder*."""
    app = FastAPI()
    register_error_handlers(app, responder)

    @app.get("/users")
    async def list_users() -> JSONResponse:
        return responder.success({"users": list(USERS.values())})

    @app.get("/users/{user_id}")
    async def show_user(user_id: int) -> JSONResponse:
        if user_id not in USERS:
            raise ResourceNotFoundError(f"User {user_id} not found")
        return responder.success({"user": USERS[user_id]})

    @app.post("/users")
    async def create_user(payload: NewUser) -> JSONResponse:
        return responder.success({"user": {"id": 3, **payload.model_dump()}}, 201)

    @app.post("/echo")
    async def echo(payload: EchoRequest) -> JSONResponse:
        return responder.success(payload.data, payload.status)

    @app.post("/fail")
    async def fail(payload: FailRequest) -> JSONResponse:
        return responder.error(payload.code, payload.status, payload.message)

    @app.get("/text")
    async def text() -> PlainTextResponse:
        return PlainTextResponse("not json")

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("something unexpected")

    return app


@pytest.fixture
def responder() -> Responder:
    return Responder(include_status_code=True)


@pytest.fixture
def client(responder: Responder) -> TestClient:
    return TestClient(create_demo_app(responder), raise_server_exceptions=False)


"""Tests for app/core/request_logging.py and app/core/logging.py."""

import json
import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.logging import JsonFormatter, RequestIdFilter, env_bool, request_id_ctx
from app.core.request_logging import REQUEST_ID_HEADER, RequestLoggingMiddleware


def _make_app() -> FastAPI:
    test_app = FastAPI()
    test_app.add_middleware(RequestLoggingMiddleware)

    @test_app.get("/ping")
    async def ping():
        return {"ok": True}

    return test_app


def test_request_id_generated():
    client = TestClient(_make_app())

    response = client.get("/ping")

    assert response.status_code == 200
    assert len(response.headers[REQUEST_ID_HEADER]) == 32


def test_request_id_echoed():
    client = TestClient(_make_app())

    response = client.get("/ping", headers={REQUEST_ID_HEADER: "req-123"})

    assert response.headers[REQUEST_ID_HEADER] == "req-123"


def test_request_is_logged(caplog):
    client = TestClient(_make_app())

    with caplog.at_level(logging.INFO, logger="app.request"):
        client.get("/ping", headers={REQUEST_ID_HEADER: "req-123"})

    [record] = [r for r in caplog.records if r.name == "app.request"]
    assert record.request_id == "req-123"
    assert record.status_code == 200
    assert record.path == "/ping"


def _record(msg: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="app.auth.service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_request_id_filter_stamps_records():
    token = request_id_ctx.set("req-abc")
    try:
        record = _record("inside")
        assert RequestIdFilter().filter(record) is True
    finally:
        request_id_ctx.reset(token)

    assert record.request_id == "req-abc"
    assert json.loads(JsonFormatter().format(record))["request_id"] == "req-abc"


def test_request_id_filter_outside_request():
    record = _record("outside")

    RequestIdFilter().filter(record)

    assert not hasattr(record, "request_id")


def test_request_id_context_reset_after_request():
    client = TestClient(_make_app())

    client.get("/ping", headers={REQUEST_ID_HEADER: "req-123"})

    assert request_id_ctx.get() is None


def test_json_formatter_includes_extras():
    record = logging.LogRecord(
        name="app.auth.service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="User logged in",
        args=(),
        exc_info=None,
    )
    record.user_id = 42
    record.session_id = "s-1"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["msg"] == "User logged in"
    assert payload["level"] == "INFO"
    assert payload["user_id"] == "42"
    assert payload["session_id"] == "s-1"
    assert "request_id" not in payload


def test_env_bool(monkeypatch):
    monkeypatch.setenv("FLAG_ON", "Yes")
    monkeypatch.setenv("FLAG_OFF", "0")
    monkeypatch.delenv("FLAG_UNSET", raising=False)

    assert env_bool("FLAG_ON", default=False) is True
    assert env_bool("FLAG_OFF", default=True) is False
    assert env_bool("FLAG_UNSET", default=True) is True

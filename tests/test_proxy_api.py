"""Tests for the `/openai/proxy` endpoint."""

from __future__ import annotations

import json

import httpx
from fastapi.testclient import TestClient

from writeassist.api.app import create_app
from writeassist.config import Settings

SESSION = {"X-Session-Token": "s3cret"}


class _Upstream:
    """Fake OpenAI-compatible server."""

    def __init__(self, outcome: httpx.Response | Exception) -> None:
        self.outcome = outcome
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _client(upstream: _Upstream) -> TestClient:
    settings = Settings(session_tokens=["s3cret"], log_level="WARNING")
    return TestClient(create_app(settings, upstream_transport=httpx.MockTransport(upstream)))


def test_health() -> None:
    """Health endpoint needs no session."""

    client = _client(_Upstream(httpx.Response(200)))
    assert client.get("/health").json() == {"status": "ok"}


def test_proxy_requires_session() -> None:
    """Unauthenticated calls are rejected before anything is forwarded."""

    upstream = _Upstream(httpx.Response(200, json={}))
    client = _client(upstream)

    resp = client.post("/openai/proxy", json={"baseURL": "http://up/v1", "path": "/models"})
    assert resp.status_code == 401
    assert resp.json() == {"error": {"message": "Unauthorized"}}

    resp = client.post(
        "/openai/proxy",
        json={"baseURL": "http://up/v1", "path": "/models"},
        headers={"X-Session-Token": "wrong"},
    )
    assert resp.status_code == 401
    assert upstream.requests == []


def test_proxy_forwards_get_without_body() -> None:
    """GET calls reach upstream with auth and JSON content type but no body."""

    upstream = _Upstream(httpx.Response(200, json={"data": [{"id": "llama"}]}))
    client = _client(upstream)

    resp = client.post(
        "/openai/proxy",
        json={"baseURL": "http://up/v1", "path": "/models", "method": "GET"},
        headers={**SESSION, "Authorization": "Bearer sk-1"},
    )

    assert resp.status_code == 200
    assert resp.json() == {"data": [{"id": "llama"}]}
    sent = upstream.requests[-1]
    assert sent.method == "GET"
    assert str(sent.url) == "http://up/v1/models"
    assert sent.headers["authorization"] == "Bearer sk-1"
    assert sent.headers["content-type"] == "application/json"
    assert sent.content == b""


def test_proxy_forwards_body_with_inferred_post() -> None:
    """A body without a method is sent as POST."""

    upstream = _Upstream(httpx.Response(200, json={"id": "c1"}))
    client = _client(upstream)

    resp = client.post(
        "/openai/proxy",
        json={"baseURL": "http://up/v1", "path": "/chat/completions", "body": {"model": "m", "n": 1}},
        headers={"Cookie": "session=s3cret"},
    )

    assert resp.status_code == 200
    sent = upstream.requests[-1]
    assert sent.method == "POST"
    assert json.loads(sent.content) == {"model": "m", "n": 1}
    assert "authorization" not in sent.headers


def test_proxy_mirrors_upstream_error() -> None:
    """Upstream status and body are returned verbatim."""

    body = {"error": {"message": "bad key"}}
    client = _client(_Upstream(httpx.Response(401, json=body)))

    resp = client.post(
        "/openai/proxy",
        json={"baseURL": "http://up/v1", "path": "/models"},
        headers=SESSION,
    )
    assert resp.status_code == 401
    assert resp.json() == body


def test_proxy_transport_failure_is_generic_500() -> None:
    """Failures without an upstream response become a generic server error."""

    client = _client(_Upstream(httpx.ConnectError("refused")))

    resp = client.post("/openai/proxy", json={"baseURL": "http://up/v1", "path": "/models"}, headers=SESSION)
    assert resp.status_code == 500
    assert resp.json() == {"error": {"message": "Failed to proxy request to OpenAI-compatible API"}}


def test_proxy_empty_upstream_error_gets_error_payload() -> None:
    """An upstream error without a body keeps its status and gains an error message."""

    client = _client(_Upstream(httpx.Response(502)))

    resp = client.post("/openai/proxy", json={"baseURL": "http://up/v1", "path": "/models"}, headers=SESSION)
    assert resp.status_code == 502
    assert resp.json() == {"error": {"message": "Unknown error"}}

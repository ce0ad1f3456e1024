"""Tests for the improve / fix-grammar / change-tone operations."""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import httpx
import openai
import pytest

from writeassist.api.app import create_app
from writeassist.config import AISettings, Settings
from writeassist.errors import MissingCredential, NoCompletionChoices
from writeassist.llm.client import ChatMessage, ModelClient
from writeassist.prompts import MOOD_DESCRIPTIONS
from writeassist.tasks import TaskRunner, change_tone, fix_grammar, improve_writing, list_models


class FakeModelClient:
    """Stands in for ModelClient and records what would have been sent."""

    def __init__(self, *contents: str | None) -> None:
        self.choices = [SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents]
        self.calls: list[tuple[list[ChatMessage], dict[str, Any]]] = []

    async def create_completion(self, messages: list[ChatMessage], **params: Any) -> SimpleNamespace:
        self.calls.append((list(messages), params))
        return SimpleNamespace(choices=self.choices)

    async def list_models(self) -> list[str]:
        return ["gpt-4o-mini", "local-model"]

    async def aclose(self) -> None:
        self.closed = True


SETTINGS = AISettings(api_key="sk-test")


@pytest.mark.asyncio
async def test_improve_writing_returns_rich_text() -> None:
    """Model output is converted back into list markup."""

    client = FakeModelClient("- Led a team of five\n- Shipped the billing service")
    out = await improve_writing("<p>i led team</p>", settings=SETTINGS, client=client)  # type: ignore[arg-type]

    assert out == "<ul><li>Led a team of five</li><li>Shipped the billing service</li></ul>"
    messages, params = client.calls[0]
    assert messages[1].content.endswith("\n\ni led team")
    assert params == {"model": "gpt-3.5-turbo", "max_tokens": 1024, "n": 1}


@pytest.mark.asyncio
async def test_zero_choices_raises_and_keeps_text() -> None:
    """Zero choices is a hard failure and the caller's text is untouched."""

    text = "<p>keep me</p>"
    with pytest.raises(NoCompletionChoices):
        await fix_grammar(text, settings=SETTINGS, client=FakeModelClient())  # type: ignore[arg-type]
    assert text == "<p>keep me</p>"


@pytest.mark.asyncio
async def test_empty_content_falls_back_to_input() -> None:
    """A completion with no usable content returns the original input."""

    out = await improve_writing("<p>original</p>", settings=SETTINGS, client=FakeModelClient("   "))  # type: ignore[arg-type]
    assert out == "<p>original</p>"


@pytest.mark.asyncio
async def test_fix_grammar_sends_explicit_temperature_and_context() -> None:
    """Explicit temperature and the edit context reach the request."""

    settings = AISettings(api_key="sk-test", use_default_temperature=False)
    client = FakeModelClient("Fixed text.")
    out = await fix_grammar(
        "<p>fixd txt</p>",
        settings=settings,
        edit_context={"company": "Acme", "position": "Engineer"},
        client=client,  # type: ignore[arg-type]
    )

    assert out == "<p>Fixed text.</p>"
    messages, params = client.calls[0]
    assert params["temperature"] == 0.3
    assert "Company: Acme\nPosition: Engineer" in messages[1].content


@pytest.mark.asyncio
async def test_change_tone_uses_mood() -> None:
    """The mood drives both the system prompt and the instruction."""

    settings = AISettings(api_key="sk-test", use_default_temperature=False, temperature_change_tone=1.1)
    client = FakeModelClient("Hello there!")
    await change_tone("<p>hi</p>", "friendly", settings=settings, client=client)  # type: ignore[arg-type]

    messages, params = client.calls[0]
    assert MOOD_DESCRIPTIONS["friendly"] in messages[0].content
    assert "to be friendly" in messages[1].content
    assert params["temperature"] == 1.1


@pytest.mark.asyncio
async def test_change_tone_rejects_unknown_mood() -> None:
    """Unknown moods fail before any request."""

    client = FakeModelClient("x")
    with pytest.raises(ValueError):
        await change_tone("<p>hi</p>", "sarcastic", settings=SETTINGS, client=client)  # type: ignore[arg-type]
    assert client.calls == []


@pytest.mark.asyncio
async def test_missing_api_key_fails_before_network() -> None:
    """No API key is reported before any connection is attempted."""

    with pytest.raises(MissingCredential):
        await improve_writing("<p>hi</p>", settings=AISettings())
    with pytest.raises(MissingCredential):
        ModelClient(AISettings(api_key="  "), proxy_url="http://app.local/openai/proxy")


@pytest.mark.asyncio
async def test_list_models_with_injected_client() -> None:
    """Model ids come from the client, which stays open for its owner."""

    client = FakeModelClient()
    assert await list_models(SETTINGS, client=client) == ["gpt-4o-mini", "local-model"]  # type: ignore[arg-type]
    assert not hasattr(client, "closed")


@pytest.mark.asyncio
async def test_list_models_requires_api_key() -> None:
    with pytest.raises(MissingCredential):
        await list_models(AISettings())


def _completion(content: str) -> dict[str, Any]:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "local-model",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    }


class _Upstream:
    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


def _runner(upstream: _Upstream) -> tuple[TaskRunner, httpx.AsyncClient]:
    """Wire SDK -> ProxyTransport -> proxy endpoint (ASGI) -> fake upstream."""

    app = create_app(
        Settings(session_tokens=["s3cret"], log_level="WARNING"),
        upstream_transport=httpx.MockTransport(upstream),
    )
    proxy_client = httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
        headers={"X-Session-Token": "s3cret"},
    )
    settings = AISettings(api_key="sk-test", base_url="http://local/v1", model="local-model")
    runner = TaskRunner(settings, proxy_url="http://testserver/openai/proxy", proxy_client=proxy_client)
    return runner, proxy_client


@pytest.mark.asyncio
async def test_end_to_end_through_proxy() -> None:
    """A custom base URL call travels through the proxy endpoint to upstream and back."""

    upstream = _Upstream(httpx.Response(200, json=_completion("I have led the team.")))
    runner, proxy_client = _runner(upstream)
    try:
        out = await runner.fix_grammar("<p>I has led the team.</p>")
    finally:
        await runner.aclose()
        await proxy_client.aclose()

    assert out == "<p>I have led the team.</p>"
    sent = upstream.requests[-1]
    assert sent.method == "POST"
    assert str(sent.url) == "http://local/v1/chat/completions"
    assert sent.headers["authorization"] == "Bearer sk-test"
    body = json.loads(sent.content)
    assert body["model"] == "local-model"
    assert body["n"] == 1
    assert "temperature" not in body


@pytest.mark.asyncio
async def test_end_to_end_upstream_error_surfaces_in_sdk() -> None:
    """Upstream 401 reaches the SDK with its status, so the SDK raises its own error."""

    upstream = _Upstream(httpx.Response(401, json={"error": {"message": "bad key"}}))
    runner, proxy_client = _runner(upstream)
    try:
        with pytest.raises(openai.AuthenticationError) as excinfo:
            await runner.improve_writing("<p>hello</p>")
    finally:
        await runner.aclose()
        await proxy_client.aclose()

    assert excinfo.value.status_code == 401
    assert "bad key" in str(excinfo.value)


@pytest.mark.asyncio
async def test_list_models_uses_get_through_proxy() -> None:
    """Listing models relays a GET with no body."""

    upstream = _Upstream(
        httpx.Response(200, json={"object": "list", "data": [{"id": "llama-3", "object": "model", "created": 0, "owned_by": "me"}]})
    )
    runner, proxy_client = _runner(upstream)
    try:
        assert await runner.list_models() == ["llama-3"]
    finally:
        await runner.aclose()
        await proxy_client.aclose()

    sent = upstream.requests[-1]
    assert sent.method == "GET"
    assert str(sent.url) == "http://local/v1/models"

"""OpenAI-compatible model client.

This wraps the `openai` Python SDK. Every HTTP call the SDK makes goes through
:class:`~writeassist.llm.transport.ProxyTransport`, which decides whether the call is sent
directly or relayed through the proxy endpoint.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Sequence

import httpx
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from writeassist.config import AISettings
from writeassist.errors import MissingCredential
from writeassist.llm.transport import ProxyTransport
from writeassist.logging import get_logger

logger = get_logger(__name__)

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    """A chat message."""

    role: Role
    content: str


class ModelClient:
    """Chat completions client bound to one set of user settings."""

    def __init__(
        self,
        settings: AISettings,
        *,
        proxy_url: str,
        proxy_client: httpx.AsyncClient | None = None,
        direct_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create a client.

        Args:
            settings: User model settings.
            proxy_url: Absolute URL of the `/openai/proxy` endpoint.
            proxy_client: Client used to reach the proxy (carries the session credentials).
            direct_transport: Transport for calls that are not proxied.

        Raises:
            MissingCredential: No API key is configured.
        """

        self._settings = settings
        if not settings.api_key:
            raise MissingCredential()

        self._transport = ProxyTransport(
            base_url=settings.base_url,
            proxy_url=proxy_url,
            proxy_client=proxy_client,
            direct=direct_transport,
        )
        self._http = httpx.AsyncClient(transport=self._transport)
        self._client = AsyncOpenAI(
            api_key=settings.api_key,
            base_url=settings.base_url,
            http_client=self._http,
            max_retries=0,
        )

    @property
    def settings(self) -> AISettings:
        return self._settings

    async def create_completion(self, messages: Sequence[ChatMessage], **params: Any) -> ChatCompletion:
        """Issue one chat completion request.

        Args:
            messages: Chat messages.
            **params: Extra request parameters (model, max_tokens, n, temperature).

        Returns:
            The raw SDK response.
        """

        payload: list[dict[str, str]] = [{"role": m.role, "content": m.content} for m in messages]
        logger.info("Requesting completion", extra={"model": params.get("model"), "messages": len(payload)})
        return await self._client.chat.completions.create(messages=payload, **params)

    async def list_models(self) -> list[str]:
        """List model ids offered by the endpoint."""

        page = await self._client.models.list()
        return [m.id for m in page.data]

    async def aclose(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> "ModelClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


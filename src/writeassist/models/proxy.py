"""Proxy wire models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProxyRequest(BaseModel):
    """Body of `POST /openai/proxy`."""

    model_config = ConfigDict(populate_by_name=True)

    base_url: str = Field(alias="baseURL", min_length=1)
    path: str = ""
    method: str | None = None
    body: Any | None = None

    def target_url(self) -> str:
        return f"{self.base_url}{self.path}"

    def resolved_method(self) -> str:
        return infer_method(self.method, self.body is not None)


class RoutingDecision(BaseModel):
    """How one outbound model call is dispatched through the proxy."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    path: str
    method: str
    body: Any | None = None
    bearer_token: str | None = None

    def to_proxy_request(self) -> ProxyRequest:
        return ProxyRequest(base_url=self.base_url, path=self.path, method=self.method, body=self.body)


def infer_method(method: str | None, has_body: bool) -> str:
    """Explicit method wins, then POST when a body is present, then GET."""

    if method:
        return method
    return "POST" if has_body else "GET"

"""HTTP transport that relays model API calls through the proxy endpoint.

Browsers send a CORS preflight before any cross-origin request that carries an
`Authorization` header, and several self-hosted OpenAI-compatible servers (LM Studio and
friends) do not answer it. When a custom base URL is configured, calls to it are therefore
sent to this service's `/openai/proxy` endpoint, which performs the upstream call
server-to-server. Calls to any other URL are dispatched unchanged.

Proxied calls never raise: every outcome is returned as an `httpx.Response` so the SDK's
own status handling turns failures into its usual exceptions.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import httpx

from writeassist.errors import ProxyTransportError, UpstreamError, error_payload
from writeassist.logging import current_request_id, get_logger
from writeassist.models.proxy import RoutingDecision, infer_method

logger = get_logger(__name__)

JSON_HEADERS = {"content-type": "application/json"}

Headers = Mapping[str, str] | httpx.Headers


def normalize_url(url: str) -> str:
    """Return `url` the way httpx sends it (lower-case host, default port dropped)."""

    return str(httpx.URL(url))


def _bearer_token(headers: Headers | None) -> str | None:
    if not headers:
        return None
    if not isinstance(headers, httpx.Headers):
        headers = httpx.Headers(dict(headers))
    return headers.get("authorization") or None


def _describe(error: Exception) -> str:
    # Several httpx exceptions (timeouts in particular) carry no message.
    return str(error) or type(error).__name__


def resolve_route(
    url: str,
    base_url: str | None,
    *,
    method: str | None = None,
    body: Any | None = None,
    headers: Headers | None = None,
) -> RoutingDecision | None:
    """Decide how a call to `url` is dispatched.

    Both URLs are compared in normalized form, so `http://Host:80/v1` matches calls to
    `http://host/v1/...`.

    Args:
        url: Absolute target URL of the call.
        base_url: Configured custom base URL, or None for the vendor default.
        method: HTTP method if the caller set one.
        body: Decoded JSON body, if any.
        headers: Outgoing headers; the `Authorization` value is carried as the bearer token.

    Returns:
        None when the call goes out directly, otherwise the proxy routing.

    Raises:
        httpx.InvalidURL: `url` or `base_url` cannot be parsed.
    """

    if not base_url:
        return None
    base_url = normalize_url(base_url)
    url = normalize_url(url)
    if not url.startswith(base_url):
        return None

    return RoutingDecision(
        base_url=base_url,
        path=url[len(base_url) :],
        method=infer_method(method, body is not None),
        body=body,
        bearer_token=_bearer_token(headers),
    )


def _decode_body(content: bytes) -> Any | None:
    if not content:
        return None
    return json.loads(content)


def _request_timeout(request: httpx.Request) -> httpx.Timeout | None:
    timeout = request.extensions.get("timeout")
    if not isinstance(timeout, dict):
        return None
    return httpx.Timeout(**timeout)


class ProxyTransport(httpx.AsyncBaseTransport):
    """Async transport for the model client's `httpx.AsyncClient`."""

    def __init__(
        self,
        *,
        base_url: str | None,
        proxy_url: str,
        proxy_client: httpx.AsyncClient | None = None,
        direct: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create the transport.

        Args:
            base_url: Custom base URL; calls under it are proxied. None disables proxying.
            proxy_url: Absolute URL of the proxy endpoint.
            proxy_client: Client used for the proxy call. It should carry whatever session
                credentials the host application requires. Owned by the caller.
            direct: Transport for calls that are not proxied.
        """

        self._base_url = normalize_url(base_url) if base_url else None
        self._proxy_url = proxy_url
        self._owns_proxy_client = proxy_client is None
        # No client-level timeout: each proxied call carries the timeout of the SDK request.
        self._proxy_client = proxy_client or httpx.AsyncClient(timeout=None)
        self._direct = direct or httpx.AsyncHTTPTransport()

    def _is_proxied(self, url: str) -> bool:
        return self._base_url is not None and url.startswith(self._base_url)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if not self._is_proxied(url):
            return await self._direct.handle_async_request(request)

        try:
            body = _decode_body(await request.aread())
        except ValueError as e:
            logger.warning("Cannot relay non-JSON request body to proxy: %s", e)
            return self._failure_response(ProxyTransportError(str(e)))

        return await self.dispatch(
            url,
            method=request.method,
            body=body,
            headers=request.headers,
            timeout=_request_timeout(request),
        )

    async def dispatch(
        self,
        url: str,
        method: str | None = None,
        body: Any | None = None,
        headers: Headers | None = None,
        *,
        timeout: httpx.Timeout | None = None,
    ) -> httpx.Response:
        """Send one call, through the proxy when `url` is under the custom base URL.

        The method defaults to POST when `body` is given and GET otherwise. Failures come
        back as responses: upstream errors keep their status and body, anything without an
        upstream response becomes a 500 with an error payload.

        Args:
            url: Absolute target URL.
            method: HTTP method, inferred when None.
            body: JSON-serializable request body.
            headers: Outgoing headers, `Authorization` included.
            timeout: Timeout for the outbound call; the proxy client's own when None.

        Returns:
            A fully read response.
        """

        try:
            decision = resolve_route(url, self._base_url, method=method, body=body, headers=headers)
        except httpx.InvalidURL as e:
            return self._failure_response(ProxyTransportError(_describe(e)))
        if decision is None:
            return await self._send_direct(url, method, body, headers, timeout)
        return await self.relay(decision, timeout=timeout)

    async def _send_direct(
        self,
        url: str,
        method: str | None,
        body: Any | None,
        headers: Headers | None,
        timeout: httpx.Timeout | None,
    ) -> httpx.Response:
        try:
            request = httpx.Request(infer_method(method, body is not None), url, json=body, headers=headers)
            if timeout is not None:
                request.extensions["timeout"] = timeout.as_dict()
            response = await self._direct.handle_async_request(request)
            response.request = request
            await response.aread()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._failure_response(ProxyTransportError(_describe(e)))
        return response

    async def relay(self, decision: RoutingDecision, *, timeout: httpx.Timeout | None = None) -> httpx.Response:
        """Send one routed call through the proxy and map the outcome to a response."""

        try:
            payload = await self._call_proxy(decision, timeout)
        except UpstreamError as e:
            return self._upstream_response(e)
        except ProxyTransportError as e:
            return self._failure_response(e)
        except Exception as e:
            logger.exception("Unexpected proxy failure for path=%s", decision.path)
            return self._failure_response(ProxyTransportError(_describe(e)))
        return httpx.Response(200, json=payload)

    async def _call_proxy(self, decision: RoutingDecision, timeout: httpx.Timeout | None) -> Any:
        proxy_body = decision.to_proxy_request().model_dump(by_alias=True, exclude_none=True)
        headers = {"x-request-id": current_request_id()}
        if decision.bearer_token:
            headers["authorization"] = decision.bearer_token

        logger.debug(
            "Relaying through proxy",
            extra={"path": decision.path, "method": decision.method, "has_body": decision.body is not None},
        )
        try:
            resp = await self._proxy_client.post(
                self._proxy_url,
                json=proxy_body,
                headers=headers,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ProxyTransportError(_describe(e)) from e

        if resp.is_error:
            raise UpstreamError(
                resp.status_code,
                resp.content,
                content_type=resp.headers.get("content-type"),
            )

        try:
            return resp.json()
        except ValueError as e:
            raise ProxyTransportError(f"proxy returned a non-JSON body: {e}") from e

    @staticmethod
    def _upstream_response(error: UpstreamError) -> httpx.Response:
        logger.info("Proxied call failed upstream", extra={"status_code": error.status_code})
        if not error.body:
            return httpx.Response(error.status_code, json=error_payload(UpstreamError.empty_body_message))
        headers = {"content-type": error.content_type or JSON_HEADERS["content-type"]}
        return httpx.Response(error.status_code, content=error.body, headers=headers)

    @staticmethod
    def _failure_response(error: ProxyTransportError) -> httpx.Response:
        logger.warning("Proxy call failed: %s", error)
        return httpx.Response(500, json=error_payload(str(error)))

    async def aclose(self) -> None:
        if self._owns_proxy_client:
            await self._proxy_client.aclose()
        await self._direct.aclose()

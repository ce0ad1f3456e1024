"""Server-to-server relay for OpenAI-compatible APIs."""

from __future__ import annotations

import httpx

from writeassist.config import Settings
from writeassist.errors import ProxyTransportError, UpstreamError
from writeassist.logging import get_logger
from writeassist.models.proxy import ProxyRequest

logger = get_logger(__name__)


class ProxyService:
    """Forward proxy requests to the upstream base URL."""

    def __init__(self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.upstream_timeout_s),
            transport=transport,
        )

    async def forward(self, req: ProxyRequest, authorization: str | None = None) -> httpx.Response:
        """Perform the upstream call.

        Args:
            req: Routing instructions from the client.
            authorization: `Authorization` header to forward verbatim.

        Returns:
            The upstream response (2xx/3xx).

        Raises:
            UpstreamError: Upstream answered with an error status.
            ProxyTransportError: No upstream response (network failure, malformed target).
        """

        url = req.target_url()
        method = req.resolved_method()
        headers = {"Content-Type": "application/json"}
        if authorization:
            headers["Authorization"] = authorization

        logger.debug("Proxying request", extra={"url": url, "method": method})
        try:
            if method.upper() == "GET":
                resp = await self._client.request("GET", url, headers=headers)
            elif req.body is None:
                resp = await self._client.request(method, url, headers=headers)
            else:
                resp = await self._client.request(method, url, headers=headers, json=req.body)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Proxy request to %s failed: %s", url, e)
            raise ProxyTransportError() from e

        if resp.is_error:
            logger.info("Upstream returned an error", extra={"url": url, "status_code": resp.status_code})
            raise UpstreamError(resp.status_code, resp.content, content_type=resp.headers.get("content-type"))
        return resp

    async def aclose(self) -> None:
        await self._client.aclose()

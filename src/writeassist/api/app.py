"""FastAPI app exposing the OpenAI proxy endpoint."""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from writeassist.api.auth import require_session
from writeassist.api.proxy import ProxyService
from writeassist.config import Settings, load_settings
from writeassist.errors import ProxyTransportError, UpstreamError, error_payload
from writeassist.logging import configure_logging, get_logger, request_context
from writeassist.models.proxy import ProxyRequest


def create_app(
    settings: Settings | None = None,
    *,
    upstream_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create FastAPI app.

    Args:
        settings: Settings to use; loaded from the environment when omitted.
        upstream_transport: Transport for upstream calls (tests inject a mock).
    """

    settings = settings or load_settings()
    configure_logging(settings.log_level)
    logger = get_logger(__name__)

    proxy = ProxyService(settings, transport=upstream_transport)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await proxy.aclose()

    app = FastAPI(title="WriteAssist", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.proxy = proxy

    @app.middleware("http")
    async def bind_request_id(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        if request_id == "-":
            request_id = uuid.uuid4().hex[:12]
        with request_context(request_id=request_id):
            response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response

    @app.exception_handler(UpstreamError)
    async def upstream_error(_: Request, exc: UpstreamError) -> Response:
        if not exc.body:
            return JSONResponse(status_code=exc.status_code, content=error_payload(UpstreamError.empty_body_message))
        return Response(
            content=exc.body,
            status_code=exc.status_code,
            media_type=exc.content_type or "application/json",
        )

    @app.exception_handler(ProxyTransportError)
    async def proxy_transport_error(_: Request, exc: ProxyTransportError) -> JSONResponse:
        return JSONResponse(status_code=500, content=error_payload(ProxyTransportError.default_message))

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_payload(str(exc.detail)))

    @app.exception_handler(RequestValidationError)
    async def validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content=error_payload(f"Invalid proxy request: {exc.errors()}"))

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/openai/proxy", dependencies=[Depends(require_session)])
    async def openai_proxy(
        req: ProxyRequest,
        authorization: str | None = Header(default=None),
    ) -> Response:
        """Relay a call to an OpenAI-compatible API that cannot be reached cross-origin."""

        logger.info("Proxy requested", extra={"base_url": req.base_url, "path": req.path})
        upstream = await proxy.forward(req, authorization)
        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            media_type=upstream.headers.get("content-type", "application/json"),
        )

    return app

"""Session guard for same-origin endpoints.

The `Authorization` header on proxy calls belongs to the upstream model API, so the
caller's own session travels in `X-Session-Token` or the `session` cookie instead.
"""

from __future__ import annotations

import secrets

from fastapi import Cookie, Header, HTTPException, Request, status

from writeassist.config import Settings
from writeassist.logging import get_logger

logger = get_logger(__name__)


def is_valid_session(token: str | None, settings: Settings) -> bool:
    if not token:
        return False
    return any(secrets.compare_digest(token, accepted) for accepted in settings.session_tokens)


def require_session(
    request: Request,
    x_session_token: str | None = Header(default=None),
    session: str | None = Cookie(default=None),
) -> str:
    """FastAPI dependency rejecting calls without an accepted session token."""

    settings: Settings = request.app.state.settings
    token = x_session_token or session
    if not is_valid_session(token, settings):
        logger.info("Rejected unauthenticated call", extra={"endpoint": request.url.path})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return token  # type: ignore[return-value]

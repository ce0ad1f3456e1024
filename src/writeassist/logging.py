"""Logging setup.

Every record carries the id of the request it belongs to and, inside a task operation, the
task name. The proxy endpoint binds the id from the incoming `x-request-id` header and the
transport sends the bound id along with each proxied call, so one id follows a call across
the client and the endpoint logs.
"""

from __future__ import annotations

import contextlib
import contextvars
import logging
from collections.abc import Iterator

from rich.logging import RichHandler

_request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("writeassist_request_id", default="-")
_task_var: contextvars.ContextVar[str] = contextvars.ContextVar("writeassist_task", default="-")

LOG_FORMAT = "req=%(request_id)s task=%(task)s %(name)s: %(message)s"

# Chatty per-request loggers of the HTTP stack; they only show at DEBUG.
_QUIET_LOGGERS = ("httpx", "httpcore", "openai")


class _ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.request_id = _request_id_var.get()  # type: ignore[attr-defined]
        record.task = _task_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def request_context(*, request_id: str, task: str | None = None) -> Iterator[None]:
    """Bind a request id, and optionally a task name, for the duration of the block."""

    token_request = _request_id_var.set(request_id)
    token_task = _task_var.set(task or _task_var.get())
    try:
        yield
    finally:
        _request_id_var.reset(token_request)
        _task_var.reset(token_task)


def current_request_id() -> str:
    return _request_id_var.get()


def _rich_handler(root: logging.Logger) -> RichHandler:
    for handler in root.handlers:
        if isinstance(handler, RichHandler):
            return handler
    handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True, show_path=False)
    root.addHandler(handler)
    return handler


def configure_logging(level: str = "INFO") -> None:
    """Route logging through a single rich handler at `level`.

    Safe to call repeatedly (the CLI and every `create_app` call it): the handler and its
    context filter are installed once and only the level is updated afterwards.
    """

    root = logging.getLogger()
    root.setLevel(level)

    handler = _rich_handler(root)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if not any(isinstance(f, _ContextFilter) for f in handler.filters):
        handler.addFilter(_ContextFilter())

    quiet_level = logging.DEBUG if root.getEffectiveLevel() <= logging.DEBUG else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

"""Error types raised by the text transformation pipeline."""

from __future__ import annotations


class WriteAssistError(RuntimeError):
    pass


class MissingCredential(WriteAssistError):
    """No API key is configured; raised before any network call."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "Your OpenAI API key has not been set yet. "
            "Set WRITEASSIST_OPENAI_API_KEY or configure it in your account settings."
        )


class NoCompletionChoices(WriteAssistError):
    """The model answered with zero completion choices."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "OpenAI did not return any choices for your text.")


class UpstreamError(WriteAssistError):
    """A proxied call failed with an upstream status and body.

    Attributes:
        status_code: HTTP status returned by the upstream service.
        body: Raw upstream body bytes.
    """

    # Message reported in place of an empty upstream body.
    empty_body_message = "Unknown error"

    def __init__(self, status_code: int, body: bytes, *, content_type: str | None = None) -> None:
        super().__init__(f"upstream returned status={status_code}")
        self.status_code = status_code
        self.body = body
        self.content_type = content_type


class ProxyTransportError(WriteAssistError):
    """A proxied call failed without a structured upstream response."""

    default_message = "Failed to proxy request to OpenAI-compatible API"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


def error_payload(message: str) -> dict[str, dict[str, str]]:
    """Build the minimal `{"error": {"message": ...}}` payload."""

    return {"error": {"message": message}}

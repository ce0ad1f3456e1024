"""CLI entrypoints for WriteAssist."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import httpx
import openai
import typer

from writeassist.config import load_settings
from writeassist.errors import WriteAssistError
from writeassist.logging import configure_logging, get_logger
from writeassist.models.document import ResumeDocument
from writeassist.prompts import MOOD_DESCRIPTIONS
from writeassist.tasks import TaskRunner

app = typer.Typer(add_completion=False, help="AI-assisted resume text transformations")
logger = get_logger(__name__)

TextArg = typer.Argument("", help="Text or HTML to transform. Omit to use --text-file.", show_default=False)
TextFileOpt = typer.Option(None, "--text-file", help="UTF-8 file containing the text to transform")
DocumentOpt = typer.Option(None, "--document", "-d", help="Resume JSON used as context")
ContextOpt = typer.Option(
    None,
    "--context",
    "-c",
    help="Field of the item being edited, as key=value (repeatable), e.g. -c company=Acme",
)
SessionOpt = typer.Option(
    None,
    "--session-token",
    envvar="WRITEASSIST_SESSION_TOKEN",
    help="Session token for the proxy endpoint",
)


def _read_text(text: str, text_file: Path | None) -> str:
    if text:
        return text
    if text_file is None:
        raise typer.BadParameter("You must provide either a positional TEXT or --text-file.")
    content = text_file.read_text(encoding="utf-8").strip()
    if not content:
        raise typer.BadParameter("The text file is empty.")
    return content


def _read_document(path: Path | None) -> ResumeDocument | None:
    if path is None:
        return None
    return ResumeDocument.model_validate(json.loads(path.read_text(encoding="utf-8")))


def _parse_context(pairs: list[str] | None) -> dict[str, str] | None:
    if not pairs:
        return None
    out: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got {pair!r}")
        out[key.strip()] = value.strip()
    return out


def _run(session_token: str | None, call: Callable[[TaskRunner], Awaitable[Any]]) -> Any:
    settings = load_settings()
    configure_logging(settings.log_level)

    async def go() -> Any:
        headers = {"X-Session-Token": session_token} if session_token else None
        # Each proxied call carries the SDK request timeout; no client-level limit.
        async with httpx.AsyncClient(headers=headers, timeout=None) as proxy_client:
            runner = TaskRunner(settings.ai_settings(), proxy_url=settings.proxy_url, proxy_client=proxy_client)
            try:
                return await call(runner)
            finally:
                await runner.aclose()

    try:
        return asyncio.run(go())
    except (WriteAssistError, openai.APIError) as e:
        logger.debug("CLI task failed", exc_info=True)
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def improve(
    text: str = TextArg,
    text_file: Path | None = TextFileOpt,
    document: Path | None = DocumentOpt,
    context: list[str] | None = ContextOpt,
    session_token: str | None = SessionOpt,
) -> None:
    """Improve the wording of a paragraph."""

    subject = _read_text(text, text_file)
    doc, edit = _read_document(document), _parse_context(context)
    typer.echo(_run(session_token, lambda r: r.improve_writing(subject, document=doc, edit_context=edit)))


@app.command("fix-grammar")
def fix_grammar(
    text: str = TextArg,
    text_file: Path | None = TextFileOpt,
    document: Path | None = DocumentOpt,
    context: list[str] | None = ContextOpt,
    session_token: str | None = SessionOpt,
) -> None:
    """Fix spelling and grammar."""

    subject = _read_text(text, text_file)
    doc, edit = _read_document(document), _parse_context(context)
    typer.echo(_run(session_token, lambda r: r.fix_grammar(subject, document=doc, edit_context=edit)))


@app.command("change-tone")
def change_tone(
    text: str = TextArg,
    mood: str = typer.Option(..., "--mood", "-m", help=f"One of: {', '.join(MOOD_DESCRIPTIONS)}"),
    text_file: Path | None = TextFileOpt,
    document: Path | None = DocumentOpt,
    context: list[str] | None = ContextOpt,
    session_token: str | None = SessionOpt,
) -> None:
    """Rewrite a paragraph in another tone."""

    if mood not in MOOD_DESCRIPTIONS:
        raise typer.BadParameter(f"mood must be one of: {', '.join(MOOD_DESCRIPTIONS)}")
    subject = _read_text(text, text_file)
    doc, edit = _read_document(document), _parse_context(context)
    typer.echo(
        _run(session_token, lambda r: r.change_tone(subject, mood, document=doc, edit_context=edit))  # type: ignore[arg-type]
    )


@app.command()
def models(session_token: str | None = SessionOpt) -> None:
    """List the models offered by the configured endpoint."""

    for model_id in _run(session_token, lambda r: r.list_models()):
        typer.echo(model_id)


if __name__ == "__main__":
    app()

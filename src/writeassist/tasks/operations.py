"""Improve, fix-grammar and change-tone operations.

Each operation issues exactly one chat completion. On any failure the caller's text is left
untouched; the operation either returns new markup or raises.
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx

from writeassist.codec import to_rich_text
from writeassist.config import DEFAULT_PROXY_URL, AISettings
from writeassist.llm.assembler import PromptAssembler, completion_params, extract_completion
from writeassist.llm.client import ModelClient
from writeassist.logging import get_logger, request_context
from writeassist.models.document import ResumeDocument
from writeassist.models.edit_context import EditContext
from writeassist.prompts import (
    FIX_GRAMMAR_INSTRUCTION,
    FIX_GRAMMAR_SYSTEM_PROMPT,
    IMPROVE_INSTRUCTION,
    IMPROVE_SYSTEM_PROMPT,
    MOOD_DESCRIPTIONS,
    Mood,
    change_tone_instruction,
    change_tone_system_prompt,
)

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class TaskSpec:
    """What differs between the transformation tasks."""

    name: str
    system_prompt: str
    instruction: str
    temperature: float


@dataclass
class TaskRunner:
    """Run transformation tasks against one model client.

    Attributes:
        settings: User model settings.
        client: Model client; built from `settings` when omitted.
        proxy_url: Proxy endpoint used when a client has to be built.
        proxy_client: Client carrying session credentials for the proxy.
    """

    settings: AISettings
    client: ModelClient | None = None
    proxy_url: str = DEFAULT_PROXY_URL
    proxy_client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        self._assembler = PromptAssembler()

    def _client(self) -> ModelClient:
        if self.client is None:
            # Raises MissingCredential before any network call.
            self.client = ModelClient(self.settings, proxy_url=self.proxy_url, proxy_client=self.proxy_client)
        return self.client

    async def run(
        self,
        task: TaskSpec,
        text: str,
        *,
        document: ResumeDocument | None = None,
        edit_context: EditContext | Mapping[str, Any] | None = None,
    ) -> str:
        """Run one task and return the transformed markup.

        Returns:
            HTML built from the model output, or `text` unchanged when the model returned
            nothing usable.

        Raises:
            MissingCredential: No API key is configured.
            NoCompletionChoices: The model returned zero choices.
            openai.APIError: The SDK surfaced an upstream or transport failure.
        """

        client = self._client()
        with request_context(request_id=uuid.uuid4().hex[:12], task=task.name):
            messages = self._assembler.build(
                system_prompt=task.system_prompt,
                instruction=task.instruction,
                text=text,
                settings=self.settings,
                document=document,
                edit_context=edit_context,
            )
            response = await client.create_completion(
                messages, **completion_params(self.settings, temperature=task.temperature)
            )
            content = extract_completion(response)
            if not content:
                logger.warning("Model returned empty content; keeping original text")
                return text
            logger.info("Task completed", extra={"chars_in": len(text), "chars_out": len(content)})
            return to_rich_text(content)

    async def improve_writing(self, text: str, **context: Any) -> str:
        return await self.run(improve_task(self.settings), text, **context)

    async def fix_grammar(self, text: str, **context: Any) -> str:
        return await self.run(fix_grammar_task(self.settings), text, **context)

    async def change_tone(self, text: str, mood: Mood, **context: Any) -> str:
        return await self.run(change_tone_task(self.settings, mood), text, **context)

    async def list_models(self) -> list[str]:
        return await self._client().list_models()

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()


def improve_task(settings: AISettings) -> TaskSpec:
    return TaskSpec(
        name="improve",
        system_prompt=IMPROVE_SYSTEM_PROMPT,
        instruction=IMPROVE_INSTRUCTION,
        temperature=settings.temperature_improve,
    )


def fix_grammar_task(settings: AISettings) -> TaskSpec:
    return TaskSpec(
        name="fix-grammar",
        system_prompt=FIX_GRAMMAR_SYSTEM_PROMPT,
        instruction=FIX_GRAMMAR_INSTRUCTION,
        temperature=settings.temperature_fix,
    )


def change_tone_task(settings: AISettings, mood: Mood) -> TaskSpec:
    if mood not in MOOD_DESCRIPTIONS:
        raise ValueError(f"unknown mood: {mood!r} (expected one of {', '.join(MOOD_DESCRIPTIONS)})")
    return TaskSpec(
        name="change-tone",
        system_prompt=change_tone_system_prompt(mood),
        instruction=change_tone_instruction(mood),
        temperature=settings.temperature_change_tone,
    )


async def _run_once(
    settings: AISettings,
    client: ModelClient | None,
    proxy_url: str,
    call: Callable[[TaskRunner], Awaitable[T]],
) -> T:
    runner = TaskRunner(settings, client=client, proxy_url=proxy_url)
    try:
        return await call(runner)
    finally:
        # Only close what was built here; injected clients belong to the caller.
        if client is None:
            await runner.aclose()


async def improve_writing(
    text: str,
    *,
    settings: AISettings,
    document: ResumeDocument | None = None,
    edit_context: EditContext | Mapping[str, Any] | None = None,
    client: ModelClient | None = None,
    proxy_url: str = DEFAULT_PROXY_URL,
) -> str:
    """Improve the wording of `text`."""

    return await _run_once(
        settings,
        client,
        proxy_url,
        lambda runner: runner.improve_writing(text, document=document, edit_context=edit_context),
    )


async def fix_grammar(
    text: str,
    *,
    settings: AISettings,
    document: ResumeDocument | None = None,
    edit_context: EditContext | Mapping[str, Any] | None = None,
    client: ModelClient | None = None,
    proxy_url: str = DEFAULT_PROXY_URL,
) -> str:
    """Fix spelling and grammar in `text`."""

    return await _run_once(
        settings,
        client,
        proxy_url,
        lambda runner: runner.fix_grammar(text, document=document, edit_context=edit_context),
    )


async def change_tone(
    text: str,
    mood: Mood,
    *,
    settings: AISettings,
    document: ResumeDocument | None = None,
    edit_context: EditContext | Mapping[str, Any] | None = None,
    client: ModelClient | None = None,
    proxy_url: str = DEFAULT_PROXY_URL,
) -> str:
    """Rewrite `text` in the given tone."""

    return await _run_once(
        settings,
        client,
        proxy_url,
        lambda runner: runner.change_tone(text, mood, document=document, edit_context=edit_context),
    )


async def list_models(
    settings: AISettings,
    *,
    client: ModelClient | None = None,
    proxy_url: str = DEFAULT_PROXY_URL,
) -> list[str]:
    """List the model ids offered by the configured endpoint."""

    return await _run_once(settings, client, proxy_url, lambda runner: runner.list_models())

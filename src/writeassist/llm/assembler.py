"""Prompt assembly.

Builds the two-message sequence sent to the model from layered context sources. Blocks are
appended in a fixed order and each context block ends with its own separator.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from writeassist.codec import to_plain_structured
from writeassist.config import AISettings
from writeassist.errors import NoCompletionChoices
from writeassist.formatting import format_document, format_edit_context
from writeassist.llm.client import ChatMessage
from writeassist.logging import get_logger
from writeassist.models.document import ResumeDocument
from writeassist.models.edit_context import EditContext, parse_edit_context

logger = get_logger(__name__)

BLOCK_SEPARATOR = "\n\n---\n\n"
DOCUMENT_CONTEXT_PREFIX = "Here is the complete resume for context:\n\n"
EDIT_CONTEXT_PREFIX = "Here is the context for the current item being edited:\n\n"


class PromptAssembler:
    """Combine document context, edit context and a task instruction into messages.

    The assembler is task-agnostic: the system prompt and instruction come from the caller.
    """

    def build(
        self,
        *,
        system_prompt: str,
        instruction: str,
        text: str,
        settings: AISettings,
        document: ResumeDocument | None = None,
        edit_context: EditContext | Mapping[str, Any] | None = None,
    ) -> list[ChatMessage]:
        """Assemble the system and user messages.

        Args:
            system_prompt: Task-specific system prompt.
            instruction: Task instruction sentence placed before the subject text.
            text: Subject text as editor markup.
            settings: Model settings; only `include_document_context` is read here.
            document: Optional full document for context.
            edit_context: Optional in-progress item, either already parsed or a raw mapping.

        Returns:
            `[system, user]` messages.
        """

        return [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(
                role="user",
                content=self.user_message(
                    instruction=instruction,
                    text=text,
                    settings=settings,
                    document=document,
                    edit_context=edit_context,
                ),
            ),
        ]

    def user_message(
        self,
        *,
        instruction: str,
        text: str,
        settings: AISettings,
        document: ResumeDocument | None = None,
        edit_context: EditContext | Mapping[str, Any] | None = None,
    ) -> str:
        parts: list[str] = []

        if settings.include_document_context and document is not None:
            formatted = format_document(document)
            if formatted:
                parts.append(f"{DOCUMENT_CONTEXT_PREFIX}{formatted}{BLOCK_SEPARATOR}")

        if edit_context is not None:
            if isinstance(edit_context, Mapping):
                edit_context = parse_edit_context(edit_context)
            formatted = format_edit_context(edit_context)
            if formatted:
                parts.append(f"{EDIT_CONTEXT_PREFIX}{formatted}{BLOCK_SEPARATOR}")

        parts.append(f"{instruction}\n\n{to_plain_structured(text)}")

        logger.debug(
            "Prompt assembled",
            extra={"context_blocks": len(parts) - 1, "chars": sum(len(p) for p in parts)},
        )
        return "".join(parts)


def completion_params(settings: AISettings, *, temperature: float) -> dict[str, Any]:
    """Request parameters for a single-completion chat call.

    `temperature` is only sent when the user opted out of the endpoint default.
    """

    params: dict[str, Any] = {
        "model": settings.model,
        "max_tokens": settings.max_tokens,
        "n": 1,
    }
    if not settings.use_default_temperature:
        params["temperature"] = temperature
    return params


def extract_completion(response: Any) -> str:
    """Return the trimmed content of the first choice.

    Raises:
        NoCompletionChoices: The response carries zero choices.
    """

    choices = getattr(response, "choices", None) or []
    if len(choices) == 0:
        raise NoCompletionChoices()
    message = choices[0].message
    content = message.content if message is not None else None
    return (content or "").strip()

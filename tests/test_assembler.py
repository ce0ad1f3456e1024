"""Tests for prompt assembly."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from writeassist.config import AISettings
from writeassist.errors import NoCompletionChoices
from writeassist.formatting import format_document
from writeassist.llm.assembler import (
    BLOCK_SEPARATOR,
    DOCUMENT_CONTEXT_PREFIX,
    EDIT_CONTEXT_PREFIX,
    PromptAssembler,
    completion_params,
    extract_completion,
)
from writeassist.models import ResumeDocument


def _doc() -> ResumeDocument:
    return ResumeDocument.model_validate({"basics": {"name": "Jane Doe"}})


def test_build_without_context() -> None:
    """Only the instruction and the converted subject text are sent."""

    messages = PromptAssembler().build(
        system_prompt="SYS",
        instruction="Do it:",
        text="<ul><li>one</li></ul>",
        settings=AISettings(),
    )
    assert [m.role for m in messages] == ["system", "user"]
    assert messages[0].content == "SYS"
    assert messages[1].content == "Do it:\n\n- one"


def test_build_layers_context_in_fixed_order() -> None:
    """Document context comes first, then the edit context, then the instruction."""

    messages = PromptAssembler().build(
        system_prompt="SYS",
        instruction="Do it:",
        text="<p>hi</p>",
        settings=AISettings(),
        document=_doc(),
        edit_context={"company": "Acme"},
    )
    assert messages[1].content == (
        f"{DOCUMENT_CONTEXT_PREFIX}{format_document(_doc())}{BLOCK_SEPARATOR}"
        f"{EDIT_CONTEXT_PREFIX}Company: Acme{BLOCK_SEPARATOR}"
        "Do it:\n\nhi"
    )


def test_build_respects_document_context_flag() -> None:
    """The document is left out when the user disabled full context."""

    content = PromptAssembler().user_message(
        instruction="Do it:",
        text="hi",
        settings=AISettings(include_document_context=False),
        document=_doc(),
    )
    assert content == "Do it:\n\nhi"


def test_build_skips_empty_edit_context() -> None:
    """An edit context with no known keys adds no block."""

    content = PromptAssembler().user_message(
        instruction="Do it:",
        text="hi",
        settings=AISettings(),
        edit_context={"unrelated": "x"},
    )
    assert content == "Do it:\n\nhi"


def test_completion_params_temperature_toggle() -> None:
    """Temperature is only sent when explicit temperatures are enabled."""

    assert completion_params(AISettings(), temperature=0.3) == {
        "model": "gpt-3.5-turbo",
        "max_tokens": 1024,
        "n": 1,
    }
    params = completion_params(AISettings(use_default_temperature=False, model="local"), temperature=0.3)
    assert params == {"model": "local", "max_tokens": 1024, "n": 1, "temperature": 0.3}


def test_extract_completion() -> None:
    """Content is trimmed; zero choices is a hard failure."""

    def response(*contents: str | None) -> SimpleNamespace:
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents])

    assert extract_completion(response("  - a\n- b \n")) == "- a\n- b"
    assert extract_completion(response(None)) == ""
    with pytest.raises(NoCompletionChoices):
        extract_completion(response())


def test_ai_settings_validation() -> None:
    """Blank base URLs mean unset and malformed ones are rejected."""

    assert AISettings(base_url="  ").base_url is None
    assert AISettings(base_url="http://localhost:1234/v1").base_url == "http://localhost:1234/v1"
    with pytest.raises(ValueError):
        AISettings(base_url="localhost:1234")
    with pytest.raises(ValueError):
        AISettings(temperature_fix=2.5)

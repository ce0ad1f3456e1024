"""Tests for the CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from writeassist.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("WRITEASSIST_ENV_FILE", raising=False)
    monkeypatch.delenv("WRITEASSIST_OPENAI_API_KEY", raising=False)


def test_improve_without_api_key_exits_with_message() -> None:
    """A missing key is reported as a short error and a non-zero exit."""

    result = runner.invoke(app, ["improve", "<p>hello</p>"])
    assert result.exit_code == 1
    assert "API key has not been set" in result.output


def test_context_must_be_key_value() -> None:
    """Malformed --context values are rejected as bad parameters."""

    result = runner.invoke(app, ["fix-grammar", "hello", "--context", "company"])
    assert result.exit_code != 0


def test_change_tone_rejects_unknown_mood() -> None:
    """Only the supported moods are accepted."""

    result = runner.invoke(app, ["change-tone", "hello", "--mood", "sarcastic"])
    assert result.exit_code != 0


def test_text_or_file_required(tmp_path: Path) -> None:
    """An empty text file is refused."""

    empty = tmp_path / "empty.txt"
    empty.write_text("  \n", encoding="utf-8")
    result = runner.invoke(app, ["improve", "--text-file", str(empty)])
    assert result.exit_code != 0

"""Text transformation tasks."""

from __future__ import annotations

from writeassist.tasks.operations import (
    TaskRunner,
    TaskSpec,
    change_tone,
    change_tone_task,
    fix_grammar,
    fix_grammar_task,
    improve_task,
    improve_writing,
    list_models,
)

__all__ = [
    "TaskRunner",
    "TaskSpec",
    "change_tone",
    "change_tone_task",
    "fix_grammar",
    "fix_grammar_task",
    "improve_task",
    "improve_writing",
    "list_models",
]

from __future__ import annotations

from writeassist.prompts.tasks import (
    FIX_GRAMMAR_INSTRUCTION,
    FIX_GRAMMAR_SYSTEM_PROMPT,
    IMPROVE_INSTRUCTION,
    IMPROVE_SYSTEM_PROMPT,
    MOOD_DESCRIPTIONS,
    Mood,
    change_tone_instruction,
    change_tone_system_prompt,
)

__all__ = [
    "IMPROVE_SYSTEM_PROMPT",
    "IMPROVE_INSTRUCTION",
    "FIX_GRAMMAR_SYSTEM_PROMPT",
    "FIX_GRAMMAR_INSTRUCTION",
    "MOOD_DESCRIPTIONS",
    "Mood",
    "change_tone_system_prompt",
    "change_tone_instruction",
]

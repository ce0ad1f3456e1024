"""Prompt context formatting."""

from __future__ import annotations

from writeassist.formatting.document import format_document
from writeassist.formatting.edit_context import format_edit_context

__all__ = [
    "format_document",
    "format_edit_context",
]

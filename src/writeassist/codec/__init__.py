"""Content conversion between editor markup and model-friendly text."""

from __future__ import annotations

from writeassist.codec.html import BULLET_RE, normalize_text, to_plain_structured, to_rich_text

__all__ = [
    "BULLET_RE",
    "normalize_text",
    "to_plain_structured",
    "to_rich_text",
]

"""Render a resume document as plain text for prompt context.

Output is deterministic: section order and per-item field order are fixed, so the same
document always produces the same prompt.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from writeassist.models.document import Item, ResumeDocument


def _value(item: Any, attr: str) -> str:
    value = getattr(item, attr, "")
    if attr == "url" and value is not None and not isinstance(value, str):
        value = getattr(value, "href", "")
    if value is None:
        return ""
    return str(value).strip()


def _keywords(keywords: Iterable[str] | None) -> str:
    return ", ".join(k for k in (keywords or []) if k)


def field_lines(item: Any, fields: Sequence[tuple[str, str]]) -> list[str]:
    """Emit `Label: value` for every populated field, in the given order."""

    lines: list[str] = []
    for attr, label in fields:
        value = _value(item, attr)
        if value:
            lines.append(f"{label}: {value}")
    return lines


@dataclass(frozen=True)
class SectionLayout:
    """How one section's items are rendered.

    `heading` returns the level-3 heading for an item (empty for no heading). When `compact`
    is set, each item becomes one `- ...` line instead of a heading plus field lines.
    """

    key: str
    title: str
    heading: Callable[[Any], str] | None = None
    fields: tuple[tuple[str, str], ...] = ()
    keywords_label: str | None = None
    compact: Callable[[Any], str] | None = None


def _experience_heading(item: Any) -> str:
    position, company = _value(item, "position"), _value(item, "company")
    if position and company:
        return f"{position} at {company}"
    return position or company


def _skill_line(item: Any) -> str:
    keywords = _keywords(item.keywords)
    line = f"- {item.name}"
    if keywords:
        line += f": {keywords}"
    if item.description:
        line += f" - {item.description}"
    return line


def _language_line(item: Any) -> str:
    return f"- {item.name} ({item.description})" if item.description else f"- {item.name}"


def _interest_line(item: Any) -> str:
    keywords = _keywords(item.keywords)
    return f"- {item.name}: {keywords}" if keywords else f"- {item.name}"


SECTION_LAYOUTS: tuple[SectionLayout, ...] = (
    SectionLayout(
        key="experience",
        title="Experience",
        heading=_experience_heading,
        fields=(
            ("location", "Location"),
            ("date", "Date"),
            ("summary", "Description"),
            ("company_description", "Company"),
        ),
    ),
    SectionLayout(
        key="education",
        title="Education",
        heading=lambda item: _value(item, "institution"),
        fields=(
            ("study_type", "Study Type"),
            ("area", "Area"),
            ("date", "Date"),
            ("score", "Score"),
            ("summary", "Description"),
        ),
    ),
    SectionLayout(
        key="projects",
        title="Projects",
        heading=lambda item: _value(item, "name"),
        fields=(
            ("description", "Description"),
            ("summary", "Summary"),
            ("date", "Date"),
            ("url", "URL"),
        ),
        keywords_label="Keywords",
    ),
    SectionLayout(key="skills", title="Skills", compact=_skill_line),
    SectionLayout(
        key="certifications",
        title="Certifications",
        heading=lambda item: _value(item, "name"),
        fields=(("issuer", "Issuer"), ("date", "Date"), ("summary", "Description")),
    ),
    SectionLayout(
        key="awards",
        title="Awards",
        heading=lambda item: _value(item, "title"),
        fields=(("awarder", "Awarder"), ("date", "Date"), ("summary", "Description")),
    ),
    SectionLayout(
        key="publications",
        title="Publications",
        heading=lambda item: _value(item, "name"),
        fields=(("publisher", "Publisher"), ("date", "Date"), ("summary", "Description")),
    ),
    SectionLayout(
        key="volunteer",
        title="Volunteer Experience",
        heading=lambda item: _value(item, "organization"),
        fields=(("position", "Position"), ("date", "Date"), ("summary", "Description")),
    ),
    SectionLayout(key="languages", title="Languages", compact=_language_line),
    SectionLayout(key="interests", title="Interests", compact=_interest_line),
    SectionLayout(
        key="references",
        title="References",
        heading=lambda item: _value(item, "name"),
        fields=(("description", "Description"), ("summary", "Reference"), ("url", "URL")),
    ),
)

CUSTOM_LAYOUT = SectionLayout(
    key="custom",
    title="",
    heading=lambda item: _value(item, "name"),
    fields=(
        ("description", "Description"),
        ("summary", "Summary"),
        ("date", "Date"),
        ("location", "Location"),
        ("url", "URL"),
    ),
    keywords_label="Keywords",
)

BASICS_FIELDS: tuple[tuple[str, str], ...] = (
    ("name", "Name"),
    ("headline", "Headline"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("location", "Location"),
    ("url", "Website"),
)


def _render_items(layout: SectionLayout, items: Sequence[Item]) -> list[str]:
    parts: list[str] = []
    for item in items:
        if not item.visible:
            continue
        if layout.compact is not None:
            parts.append(layout.compact(item))
            continue
        heading = layout.heading(item) if layout.heading else ""
        if heading:
            parts.append(f"\n### {heading}")
        parts.extend(field_lines(item, layout.fields))
        if layout.keywords_label:
            keywords = _keywords(getattr(item, "keywords", None))
            if keywords:
                parts.append(f"{layout.keywords_label}: {keywords}")
    return parts


def _render_section(title: str, layout: SectionLayout, section: Any) -> list[str]:
    if section is None or not section.visible or not section.items:
        return []
    body = _render_items(layout, section.items)
    if not body:
        return []
    return [f"\n## {title}", *body]


def format_document(doc: ResumeDocument) -> str:
    """Render visible sections and items as descriptive text.

    Args:
        doc: Resume document.

    Returns:
        Text with `## Section` and `### Item` headings and `Label: value` lines. Empty fields
        produce no line; hidden sections and items are omitted.
    """

    parts: list[str] = field_lines(doc.basics, BASICS_FIELDS)
    sections = doc.sections

    summary = sections.summary
    if summary is not None and summary.visible and summary.content.strip():
        parts.append(f"\n## Summary\n{summary.content.strip()}")

    for layout in SECTION_LAYOUTS:
        parts.extend(_render_section(layout.title, layout, getattr(sections, layout.key)))

    for section in sections.custom.values():
        parts.extend(_render_section(section.name or "Custom", CUSTOM_LAYOUT, section))

    return "\n".join(parts).strip()

"""Render the context of an item that is still being edited."""

from __future__ import annotations

from writeassist.formatting.document import field_lines
from writeassist.models.edit_context import EditContext, EducationContext, EmploymentContext

EMPLOYMENT_FIELDS: tuple[tuple[str, str], ...] = (
    ("company", "Company"),
    ("position", "Position"),
    ("location", "Location"),
    ("date", "Date"),
    ("url", "Website"),
    ("summary", "Description"),
)

EDUCATION_FIELDS: tuple[tuple[str, str], ...] = (
    ("institution", "Institution"),
    ("study_type", "Study Type"),
    ("area", "Area"),
    ("score", "Score"),
    ("location", "Location"),
    ("date", "Date"),
    ("url", "Website"),
    ("summary", "Description"),
)


def format_edit_context(context: EditContext | None) -> str:
    """Render the populated fields of an edit context.

    Returns an empty string for NoContext or when nothing is populated; callers skip the
    block in that case.
    """

    if isinstance(context, EmploymentContext):
        return "\n".join(field_lines(context, EMPLOYMENT_FIELDS))
    if isinstance(context, EducationContext):
        return "\n".join(field_lines(context, EDUCATION_FIELDS))
    return ""

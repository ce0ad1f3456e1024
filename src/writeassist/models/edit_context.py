"""Context for an item that is being edited but not yet saved.

The editor sends a loose mapping of field values. The shape is decided once in
:func:`parse_edit_context` and carried as a tagged variant afterwards.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


class _Context(BaseModel):
    model_config = ConfigDict(frozen=True)


class EmploymentContext(_Context):
    kind: Literal["employment"] = "employment"

    company: str = ""
    position: str = ""
    location: str = ""
    date: str = ""
    url: str = ""
    summary: str = ""


class EducationContext(_Context):
    kind: Literal["education"] = "education"

    institution: str = ""
    study_type: str = ""
    area: str = ""
    score: str = ""
    location: str = ""
    date: str = ""
    url: str = ""
    summary: str = ""


class NoContext(_Context):
    kind: Literal["none"] = "none"


EditContext = Union[EmploymentContext, EducationContext, NoContext]

EDUCATION_ONLY_KEYS = ("institution", "study_type", "area", "score")
EMPLOYMENT_KEYS = ("company", "position", "location", "date", "url", "summary")


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _scalar(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, Mapping):
        # Url objects arrive as {"label": ..., "href": ...}
        return _scalar(value.get("href"))
    if isinstance(value, (str, int, float)):
        return str(value).strip()
    return ""


def parse_edit_context(fields: Mapping[str, Any] | None) -> EditContext:
    """Decide the shape of an in-progress item.

    Args:
        fields: Field name -> value, camelCase or snake_case. Unknown keys are ignored.

    Returns:
        EducationContext when any education-only key is populated, EmploymentContext when any
        employment key is populated, NoContext otherwise.
    """

    if not fields:
        return NoContext()

    values = {_snake(str(k)): _scalar(v) for k, v in fields.items()}
    populated = {k: v for k, v in values.items() if v}

    if any(k in populated for k in EDUCATION_ONLY_KEYS):
        known = set(EducationContext.model_fields) - {"kind"}
        return EducationContext(**{k: v for k, v in populated.items() if k in known})
    if any(k in populated for k in EMPLOYMENT_KEYS):
        return EmploymentContext(**{k: v for k, v in populated.items() if k in EMPLOYMENT_KEYS})
    return NoContext()

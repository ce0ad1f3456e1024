"""Pydantic models used across the project."""

from __future__ import annotations

from writeassist.models.document import Basics, ResumeDocument, Sections, Url
from writeassist.models.edit_context import (
    EditContext,
    EducationContext,
    EmploymentContext,
    NoContext,
    parse_edit_context,
)
from writeassist.models.proxy import ProxyRequest, RoutingDecision, infer_method

__all__ = [
    "Basics",
    "EditContext",
    "EducationContext",
    "EmploymentContext",
    "NoContext",
    "ProxyRequest",
    "ResumeDocument",
    "RoutingDecision",
    "Sections",
    "Url",
    "infer_method",
    "parse_edit_context",
]

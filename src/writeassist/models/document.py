"""Resume document models.

The document is owned by the host application and only read here. Field names follow the
camelCase JSON the editor sends; attributes are snake_case.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Url(_Model):
    label: str = ""
    href: str = ""


class Basics(_Model):
    name: str = ""
    headline: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    url: Url = Field(default_factory=Url)


class Item(_Model):
    """Base for every section item."""

    id: str = ""
    visible: bool = True


class ExperienceItem(Item):
    company: str = ""
    position: str = ""
    location: str = ""
    date: str = ""
    summary: str = ""
    company_description: str = ""
    url: Url = Field(default_factory=Url)


class EducationItem(Item):
    institution: str = ""
    study_type: str = ""
    area: str = ""
    score: str = ""
    date: str = ""
    summary: str = ""
    url: Url = Field(default_factory=Url)


class ProjectItem(Item):
    name: str = ""
    description: str = ""
    date: str = ""
    summary: str = ""
    keywords: list[str] = Field(default_factory=list)
    url: Url = Field(default_factory=Url)


class SkillItem(Item):
    name: str = ""
    description: str = ""
    level: int = 0
    keywords: list[str] = Field(default_factory=list)


class CertificationItem(Item):
    name: str = ""
    issuer: str = ""
    date: str = ""
    summary: str = ""
    url: Url = Field(default_factory=Url)


class AwardItem(Item):
    title: str = ""
    awarder: str = ""
    date: str = ""
    summary: str = ""
    url: Url = Field(default_factory=Url)


class PublicationItem(Item):
    name: str = ""
    publisher: str = ""
    date: str = ""
    summary: str = ""
    url: Url = Field(default_factory=Url)


class VolunteerItem(Item):
    organization: str = ""
    position: str = ""
    location: str = ""
    date: str = ""
    summary: str = ""
    url: Url = Field(default_factory=Url)


class LanguageItem(Item):
    name: str = ""
    description: str = ""
    level: int = 0


class InterestItem(Item):
    name: str = ""
    keywords: list[str] = Field(default_factory=list)


class ReferenceItem(Item):
    name: str = ""
    description: str = ""
    summary: str = ""
    url: Url = Field(default_factory=Url)


class CustomItem(Item):
    name: str = ""
    description: str = ""
    date: str = ""
    location: str = ""
    summary: str = ""
    keywords: list[str] = Field(default_factory=list)
    url: Url = Field(default_factory=Url)


class SummarySection(_Model):
    name: str = "Summary"
    visible: bool = True
    content: str = ""


class ExperienceSection(_Model):
    name: str = "Experience"
    visible: bool = True
    items: list[ExperienceItem] = Field(default_factory=list)


class EducationSection(_Model):
    name: str = "Education"
    visible: bool = True
    items: list[EducationItem] = Field(default_factory=list)


class ProjectSection(_Model):
    name: str = "Projects"
    visible: bool = True
    items: list[ProjectItem] = Field(default_factory=list)


class SkillSection(_Model):
    name: str = "Skills"
    visible: bool = True
    items: list[SkillItem] = Field(default_factory=list)


class CertificationSection(_Model):
    name: str = "Certifications"
    visible: bool = True
    items: list[CertificationItem] = Field(default_factory=list)


class AwardSection(_Model):
    name: str = "Awards"
    visible: bool = True
    items: list[AwardItem] = Field(default_factory=list)


class PublicationSection(_Model):
    name: str = "Publications"
    visible: bool = True
    items: list[PublicationItem] = Field(default_factory=list)


class VolunteerSection(_Model):
    name: str = "Volunteering"
    visible: bool = True
    items: list[VolunteerItem] = Field(default_factory=list)


class LanguageSection(_Model):
    name: str = "Languages"
    visible: bool = True
    items: list[LanguageItem] = Field(default_factory=list)


class InterestSection(_Model):
    name: str = "Interests"
    visible: bool = True
    items: list[InterestItem] = Field(default_factory=list)


class ReferenceSection(_Model):
    name: str = "References"
    visible: bool = True
    items: list[ReferenceItem] = Field(default_factory=list)


class CustomSection(_Model):
    name: str = ""
    visible: bool = True
    items: list[CustomItem] = Field(default_factory=list)


class Sections(_Model):
    summary: SummarySection | None = None
    experience: ExperienceSection | None = None
    education: EducationSection | None = None
    projects: ProjectSection | None = None
    skills: SkillSection | None = None
    certifications: CertificationSection | None = None
    awards: AwardSection | None = None
    publications: PublicationSection | None = None
    volunteer: VolunteerSection | None = None
    languages: LanguageSection | None = None
    interests: InterestSection | None = None
    references: ReferenceSection | None = None
    custom: dict[str, CustomSection] = Field(default_factory=dict)


class ResumeDocument(_Model):
    """A resume as edited by the user."""

    basics: Basics = Field(default_factory=Basics)
    sections: Sections = Field(default_factory=Sections)

from datetime import date
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from portfolio.text import normalize_list, parse_partial_date


# ── Stored records ────────────────────────────────────────────────────────────
# Field names are camelCase to match the persisted JSON document and the
# public content document.

class Hero(BaseModel):
    name: str = ""
    title: str = ""
    tagline: str = ""


class SkillCategory(BaseModel):
    id: str        # slug derived from title e.g. "cloud-devops"
    title: str


class Skill(BaseModel):
    id: str
    categoryId: str
    name: str


class Project(BaseModel):
    id: str
    title: str
    description: str = ""
    link: str = ""
    tools: list[str] = []
    image: Optional[str] = None    # upload reference, None when absent


class Experience(BaseModel):
    id: str
    company: str
    designation: str
    fromDate: Optional[date] = None
    toDate: Optional[date] = None   # None = ongoing
    responsibilities: list[str] = []
    logo: Optional[str] = None


class Education(BaseModel):
    id: str
    institute: str
    degree: str
    year: str = ""
    description: str = ""
    image: Optional[str] = None


class ContentSnapshot(BaseModel):
    """Every collection, read at one point in time."""

    hero: Optional[Hero] = None
    skillCategories: list[SkillCategory] = []
    skills: list[Skill] = []
    projects: list[Project] = []
    experience: list[Experience] = []
    education: list[Education] = []


# ── Public content document ───────────────────────────────────────────────────

class SkillItem(BaseModel):
    id: str
    name: str


class CategoryView(BaseModel):
    id: str
    title: str
    items: list[SkillItem] = []


class ContentView(BaseModel):
    hero: Hero
    skillCategories: list[CategoryView]
    projects: list[Project]
    experience: list[Experience]
    education: list[Education]


# ── Requests ──────────────────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    identifier: str = Field(validation_alias=AliasChoices("identifier", "email"))
    secret: str = Field(validation_alias=AliasChoices("secret", "password"))


class TokenResponse(BaseModel):
    token: str


class HeroUpdate(BaseModel):
    name: str
    title: str
    tagline: str


class CategoryCreate(BaseModel):
    title: str


class SkillCreate(BaseModel):
    categoryRef: str = Field(
        validation_alias=AliasChoices("categoryRef", "category_id", "categoryId", "category")
    )
    name: str


class ExperienceUpdate(BaseModel):
    """Partial patch: only fields present in the request body are applied."""

    company: Optional[str] = None
    designation: Optional[str] = None
    fromDate: Optional[date] = Field(
        default=None, validation_alias=AliasChoices("fromDate", "from")
    )
    toDate: Optional[date] = Field(
        default=None, validation_alias=AliasChoices("toDate", "to")
    )
    responsibilities: Optional[list[str]] = None

    @field_validator("fromDate", "toDate", mode="before")
    @classmethod
    def _partial_date(cls, value):
        return parse_partial_date(value)

    @field_validator("responsibilities", mode="before")
    @classmethod
    def _lines(cls, value):
        if value is None:
            return None
        return normalize_list(value)

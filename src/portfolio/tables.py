"""Relational schema: one table per content collection."""

from datetime import date
from typing import Optional

from sqlalchemy import JSON, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class HeroRow(Base):
    __tablename__ = "hero"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, default="")
    title: Mapped[str] = mapped_column(Text, default="")
    tagline: Mapped[str] = mapped_column(Text, default="")


class SkillCategoryRow(Base):
    __tablename__ = "skill_categories"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)  # slug
    title: Mapped[str] = mapped_column(Text)
    position: Mapped[int] = mapped_column(Integer, default=0)  # insertion order


class SkillRow(Base):
    __tablename__ = "skills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # No ON DELETE CASCADE: a category cannot be removed while skills use it.
    category_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("skill_categories.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text)


class ProjectRow(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(Text)
    description: Mapped[str] = mapped_column(Text, default="")
    link: Mapped[str] = mapped_column(Text, default="")
    tools: Mapped[list] = mapped_column(JSON, default=list)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class ExperienceRow(Base):
    __tablename__ = "experience"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company: Mapped[str] = mapped_column(Text)
    designation: Mapped[str] = mapped_column(Text)
    from_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    to_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    responsibilities: Mapped[list] = mapped_column(JSON, default=list)
    logo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class EducationRow(Base):
    __tablename__ = "education"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    institute: Mapped[str] = mapped_column(Text)
    degree: Mapped[str] = mapped_column(Text)
    year: Mapped[str] = mapped_column(Text, default="")
    description: Mapped[str] = mapped_column(Text, default="")
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

"""Relational content backend (SQLAlchemy)."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portfolio.db import make_session_factory
from portfolio.errors import Conflict, NotFound, StorageUnavailable, ValidationFailure
from portfolio.models import (
    ContentSnapshot,
    Education,
    Experience,
    Hero,
    Project,
    Skill,
    SkillCategory,
)
from portfolio.store import ContentStore, resolve_category
from portfolio.tables import (
    Base,
    EducationRow,
    ExperienceRow,
    HeroRow,
    ProjectRow,
    SkillCategoryRow,
    SkillRow,
)
from portfolio.uploads import UploadStore

logger = logging.getLogger(__name__)

_ROWS = {
    "projects": ProjectRow,
    "experience": ExperienceRow,
    "education": EducationRow,
}

# Model field → column name, where they differ.
_COLUMN_NAMES = {"fromDate": "from_date", "toDate": "to_date"}


def _columns(data: dict) -> dict:
    return {_COLUMN_NAMES.get(key, key): value for key, value in data.items()}


def _row_id(record_id: str) -> Optional[int]:
    try:
        return int(record_id)
    except (TypeError, ValueError):
        return None


def _project(row: ProjectRow) -> Project:
    return Project(
        id=str(row.id),
        title=row.title,
        description=row.description or "",
        link=row.link or "",
        tools=list(row.tools or []),
        image=row.image,
    )


def _experience(row: ExperienceRow) -> Experience:
    return Experience(
        id=str(row.id),
        company=row.company,
        designation=row.designation,
        fromDate=row.from_date,
        toDate=row.to_date,
        responsibilities=list(row.responsibilities or []),
        logo=row.logo,
    )


def _education(row: EducationRow) -> Education:
    return Education(
        id=str(row.id),
        institute=row.institute,
        degree=row.degree,
        year=row.year or "",
        description=row.description or "",
        image=row.image,
    )


class SqlContentStore(ContentStore):
    def __init__(self, engine: Engine, uploads: UploadStore, create_tables: bool = True):
        super().__init__(uploads)
        self.engine = engine
        self._sessions = make_session_factory(engine)
        if create_tables:
            Base.metadata.create_all(engine)

    @contextmanager
    def _transaction(self, operation: str, target: object = None) -> Iterator[Session]:
        """One transaction per operation; engine errors become StorageUnavailable."""
        session = self._sessions()
        try:
            with session.begin():
                yield session
        except SQLAlchemyError as exc:
            logger.exception("Storage failure during %s (target=%s)", operation, target)
            raise StorageUnavailable(operation) from exc
        finally:
            session.close()

    # ── Reads ─────────────────────────────────────────────────────────────────

    def get_all(self) -> ContentSnapshot:
        with self._transaction("get_all") as session:
            hero_row = session.scalars(select(HeroRow).order_by(HeroRow.id.desc())).first()
            categories = session.scalars(
                select(SkillCategoryRow).order_by(SkillCategoryRow.position)
            ).all()
            skills = session.scalars(select(SkillRow).order_by(SkillRow.id)).all()
            projects = session.scalars(select(ProjectRow).order_by(ProjectRow.id)).all()
            experience = session.scalars(select(ExperienceRow).order_by(ExperienceRow.id)).all()
            education = session.scalars(select(EducationRow).order_by(EducationRow.id)).all()

            return ContentSnapshot(
                hero=(
                    Hero(name=hero_row.name, title=hero_row.title, tagline=hero_row.tagline)
                    if hero_row
                    else None
                ),
                skillCategories=[SkillCategory(id=c.id, title=c.title) for c in categories],
                skills=[
                    Skill(id=str(s.id), categoryId=s.category_id, name=s.name) for s in skills
                ],
                projects=[_project(row) for row in projects],
                experience=[_experience(row) for row in experience],
                education=[_education(row) for row in education],
            )

    # ── Writes ────────────────────────────────────────────────────────────────

    def _write_hero(self, hero: Hero) -> None:
        with self._transaction("replace_hero") as session:
            session.execute(delete(HeroRow))
            session.add(HeroRow(name=hero.name, title=hero.title, tagline=hero.tagline))

    def _insert_category(self, category: SkillCategory) -> None:
        with self._transaction("add_skill_category", category.id) as session:
            if session.get(SkillCategoryRow, category.id) is not None:
                raise Conflict(f"Category '{category.id}' already exists")
            last = session.scalar(select(func.max(SkillCategoryRow.position)))
            session.add(
                SkillCategoryRow(
                    id=category.id,
                    title=category.title,
                    position=(last or 0) + 1,
                )
            )

    def delete_skill_category(self, category_id: str) -> None:
        with self._transaction("delete_skill_category", category_id) as session:
            row = session.get(SkillCategoryRow, category_id)
            if row is None:
                raise NotFound("Category not found")
            in_use = session.scalar(
                select(func.count()).select_from(SkillRow).where(SkillRow.category_id == category_id)
            )
            if in_use:
                raise Conflict("Category still has skills; delete them first")
            session.delete(row)

    def _insert_skill(self, category_ref: str, name: str) -> str:
        with self._transaction("add_skill", category_ref) as session:
            rows = session.scalars(
                select(SkillCategoryRow).order_by(SkillCategoryRow.position)
            ).all()
            category = resolve_category(
                [SkillCategory(id=r.id, title=r.title) for r in rows], category_ref
            )
            if category is None:
                raise ValidationFailure("Category not found")
            row = SkillRow(category_id=category.id, name=name)
            session.add(row)
            session.flush()
            return str(row.id)

    def delete_skill(self, skill_id: str) -> None:
        self._delete_row(SkillRow, skill_id, "delete_skill", "Skill not found")

    def _insert_record(self, collection: str, data: dict) -> str:
        row_cls = _ROWS[collection]
        with self._transaction(f"add_{collection}") as session:
            row = row_cls(**_columns(data))
            session.add(row)
            session.flush()
            return str(row.id)

    def _patch_record(self, collection: str, record_id: str, changes: dict) -> None:
        row_cls = _ROWS[collection]
        with self._transaction(f"update_{collection}", record_id) as session:
            pk = _row_id(record_id)
            row = session.get(row_cls, pk) if pk is not None else None
            if row is None:
                raise NotFound(f"{collection.capitalize()} not found")
            for column, value in _columns(changes).items():
                setattr(row, column, value)

    def _delete_record(self, collection: str, record_id: str) -> None:
        self._delete_row(
            _ROWS[collection], record_id, f"delete_{collection}",
            f"{collection.rstrip('s').capitalize()} not found",
        )

    def _delete_row(self, row_cls, record_id: str, operation: str, missing: str) -> None:
        pk = _row_id(record_id)
        if pk is None:
            raise NotFound(missing)
        with self._transaction(operation, record_id) as session:
            result = session.execute(delete(row_cls).where(row_cls.id == pk))
            if result.rowcount == 0:
                raise NotFound(missing)

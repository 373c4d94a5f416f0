"""
Content store: operations over the six portfolio collections.

ContentStore holds the logic every backend shares (validation, id derivation,
upload ordering, list-field normalization). Backends implement the primitive
reads and writes against their engine:

    JsonContentStore  one JSON document rewritten on every mutation
    SqlContentStore   one table per collection via SQLAlchemy

Update semantics differ on purpose: Hero is always replaced wholesale, while
Experience accepts a partial patch. Clients depend on both behaviours.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from portfolio.errors import ValidationFailure
from portfolio.models import ContentSnapshot, Hero, SkillCategory
from portfolio.text import normalize_list, parse_partial_date, slugify
from portfolio.uploads import UploadedFile, UploadStore

logger = logging.getLogger(__name__)

# collection name → (upload kind, required fields)
_RECORD_RULES = {
    "projects": ("projects", ("title",)),
    "experience": ("experience", ("company", "designation")),
    "education": ("education", ("institute", "degree")),
}

_EXPERIENCE_FIELDS = {"company", "designation", "fromDate", "toDate", "responsibilities"}


def resolve_category(
    categories: list[SkillCategory], ref: str
) -> Optional[SkillCategory]:
    """Match by exact id first, then by case-insensitive title."""
    for category in categories:
        if category.id == ref:
            return category
    wanted = ref.strip().lower()
    for category in categories:
        if category.title.strip().lower() == wanted:
            return category
    return None


def _text(fields: dict, name: str) -> str:
    value = fields.get(name)
    return value.strip() if isinstance(value, str) else ""


def _require(fields: dict, names: tuple[str, ...]) -> None:
    missing = [name for name in names if not _text(fields, name)]
    if missing:
        raise ValidationFailure(f"Missing required field(s): {', '.join(missing)}")


def _list(fields: dict, name: str, separator: Optional[str] = None) -> list[str]:
    try:
        return normalize_list(fields.get(name), separator=separator)
    except ValueError as exc:
        raise ValidationFailure(f"Invalid list for '{name}': {exc}")


def _date(fields: dict, name: str):
    try:
        return parse_partial_date(fields.get(name))
    except ValueError:
        raise ValidationFailure(f"Invalid date for '{name}': {fields.get(name)!r}")


class ContentStore(ABC):
    def __init__(self, uploads: UploadStore):
        self.uploads = uploads

    # ── Backend primitives ────────────────────────────────────────────────────

    @abstractmethod
    def get_all(self) -> ContentSnapshot:
        ...

    @abstractmethod
    def _write_hero(self, hero: Hero) -> None:
        ...

    @abstractmethod
    def _insert_category(self, category: SkillCategory) -> None:
        ...

    @abstractmethod
    def delete_skill_category(self, category_id: str) -> None:
        ...

    @abstractmethod
    def _insert_skill(self, category_ref: str, name: str) -> str:
        ...

    @abstractmethod
    def delete_skill(self, skill_id: str) -> None:
        ...

    @abstractmethod
    def _insert_record(self, collection: str, data: dict) -> str:
        ...

    @abstractmethod
    def _patch_record(self, collection: str, record_id: str, changes: dict) -> None:
        ...

    @abstractmethod
    def _delete_record(self, collection: str, record_id: str) -> None:
        ...

    # ── Hero ──────────────────────────────────────────────────────────────────

    def replace_hero(self, name: str, title: str, tagline: str) -> None:
        self._write_hero(Hero(name=name, title=title, tagline=tagline))
        logger.info("Hero replaced")

    # ── Skills ────────────────────────────────────────────────────────────────

    def add_skill_category(self, title: str) -> str:
        category_id = slugify(title or "")
        if not category_id:
            raise ValidationFailure("Category title must contain letters or digits")
        self._insert_category(SkillCategory(id=category_id, title=title.strip()))
        logger.info("Added skill category %s", category_id)
        return category_id

    def add_skill(self, category_ref: str, name: str) -> str:
        if not (name or "").strip():
            raise ValidationFailure("Skill name is required")
        if not (category_ref or "").strip():
            raise ValidationFailure("Category not found")
        skill_id = self._insert_skill(category_ref.strip(), name.strip())
        logger.info("Added skill %s to category %s", skill_id, category_ref)
        return skill_id

    # ── Projects / Experience / Education ─────────────────────────────────────

    def _add_with_upload(
        self,
        collection: str,
        fields: dict,
        upload: Optional[UploadedFile],
        ref_field: str,
    ) -> str:
        kind, required = _RECORD_RULES[collection]
        _require(fields, required)

        data = dict(fields)
        data[ref_field] = None
        if upload is not None:
            # Upload first, record second: a persisted record never points at
            # bytes that were not stored.
            data[ref_field] = self.uploads.save(kind, upload)

        try:
            record_id = self._insert_record(collection, data)
        except Exception:
            if data[ref_field]:
                self.uploads.discard(data[ref_field])
            raise
        logger.info("Added %s record %s", collection, record_id)
        return record_id

    def add_project(self, fields: dict, upload: Optional[UploadedFile] = None) -> str:
        data = {
            "title": _text(fields, "title"),
            "description": _text(fields, "description"),
            "link": _text(fields, "link"),
            "tools": _list(fields, "tools", separator=","),
        }
        return self._add_with_upload("projects", data, upload, "image")

    def add_experience(self, fields: dict, upload: Optional[UploadedFile] = None) -> str:
        _require(fields, _RECORD_RULES["experience"][1])
        data = {
            "company": _text(fields, "company"),
            "designation": _text(fields, "designation"),
            "fromDate": _date(fields, "fromDate"),
            "toDate": _date(fields, "toDate"),
            "responsibilities": _list(fields, "responsibilities"),
        }
        return self._add_with_upload("experience", data, upload, "logo")

    def add_education(self, fields: dict, upload: Optional[UploadedFile] = None) -> str:
        data = {
            "institute": _text(fields, "institute"),
            "degree": _text(fields, "degree"),
            "year": _text(fields, "year"),
            "description": _text(fields, "description"),
        }
        return self._add_with_upload("education", data, upload, "image")

    def update_experience(self, experience_id: str, changes: dict) -> None:
        changes = {k: v for k, v in changes.items() if k in _EXPERIENCE_FIELDS}
        if not changes:
            raise ValidationFailure("No fields to update")
        for name in ("company", "designation"):
            if name in changes:
                if not _text(changes, name):
                    raise ValidationFailure(f"'{name}' cannot be blank")
                changes[name] = _text(changes, name)
        if "responsibilities" in changes:
            changes["responsibilities"] = _list(changes, "responsibilities")
        for name in ("fromDate", "toDate"):
            if name in changes:
                changes[name] = _date(changes, name)
        self._patch_record("experience", experience_id, changes)
        logger.info("Updated experience %s (%s)", experience_id, ", ".join(sorted(changes)))

    def delete_project(self, project_id: str) -> None:
        self._delete_record("projects", project_id)
        logger.info("Deleted project %s", project_id)

    def delete_experience(self, experience_id: str) -> None:
        self._delete_record("experience", experience_id)
        logger.info("Deleted experience %s", experience_id)

    def delete_education(self, education_id: str) -> None:
        self._delete_record("education", education_id)
        logger.info("Deleted education %s", education_id)

"""
Flat JSON-file content backend.

The whole content document lives in one file and is rewritten on every
mutation:

    {"hero": {...} | null, "skillCategories": [...], "skills": [...],
     "projects": [...], "experience": [...], "education": [...]}

Files in the older layout (skill names nested under each category, experience
dates under from/to) are read transparently and rewritten in this layout on
the next mutation.

Read-modify-write cycles are serialized inside the process; several processes
writing the same file are not supported.
"""

import json
import logging
import os
import tempfile
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError

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
from portfolio.text import normalize_list, parse_partial_date
from portfolio.uploads import UploadStore

logger = logging.getLogger(__name__)

# collection → (id prefix, record model)
_COLLECTIONS = {
    "projects": ("project", Project),
    "experience": ("exp", Experience),
    "education": ("edu", Education),
}

_REF_FIELDS = {"projects": "image", "experience": "logo", "education": "image"}


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _empty_document() -> dict:
    return ContentSnapshot().model_dump(mode="json")


def _legacy_date(value):
    try:
        parsed = parse_partial_date(value)
    except ValueError:
        logger.warning("Dropping unreadable legacy date %r", value)
        return None
    return parsed.isoformat() if parsed else None


def _upgrade_legacy(raw):
    """Rewrite the older document layout into the current one.

    The older layout keeps skill names as plain strings under
    skillCategories[].items, experience dates under from/to and "" for a
    missing image or logo. Skills lifted out of a category get ids derived
    from their position, so they stay stable until the next write persists
    them.
    """
    if not isinstance(raw, dict):
        return raw
    document = dict(raw)

    skills = list(document.get("skills") or [])
    categories = []
    for category in document.get("skillCategories") or []:
        if isinstance(category, dict) and "items" in category:
            category = dict(category)
            for index, item in enumerate(category.pop("items") or []):
                name = item.get("name") if isinstance(item, dict) else item
                if name is None or not str(name).strip():
                    continue
                skill_id = item.get("id") if isinstance(item, dict) else None
                skills.append({
                    "id": skill_id or f"skill-{category.get('id')}-{index}",
                    "categoryId": category.get("id"),
                    "name": str(name).strip(),
                })
        categories.append(category)
    if "skillCategories" in document:
        document["skillCategories"] = categories
        document["skills"] = skills

    for collection, ref_field in _REF_FIELDS.items():
        records = []
        for record in document.get(collection) or []:
            if isinstance(record, dict):
                record = dict(record)
                if record.get(ref_field) == "":
                    record[ref_field] = None
                if collection == "experience":
                    for old, new in (("from", "fromDate"), ("to", "toDate")):
                        if old in record:
                            value = record.pop(old)
                            record.setdefault(new, _legacy_date(value))
                    if isinstance(record.get("responsibilities"), str):
                        record["responsibilities"] = normalize_list(record["responsibilities"])
                elif collection == "projects" and isinstance(record.get("tools"), str):
                    record["tools"] = normalize_list(record["tools"], separator=",")
                elif collection == "education" and isinstance(record.get("year"), int):
                    record["year"] = str(record["year"])
            records.append(record)
        if collection in document:
            document[collection] = records
    return document


class JsonContentStore(ContentStore):
    def __init__(self, path: str | Path, uploads: UploadStore):
        super().__init__(uploads)
        self.path = Path(path)
        self._lock = threading.Lock()

    # ── File I/O ──────────────────────────────────────────────────────────────

    def _read(self, operation: str) -> dict:
        if not self.path.exists():
            return _empty_document()
        try:
            with open(self.path, encoding="utf-8") as fh:
                raw = json.load(fh)
            # Round-trip through the snapshot model to fill missing collections.
            snapshot = ContentSnapshot.model_validate(_upgrade_legacy(raw))
            return snapshot.model_dump(mode="json")
        except (OSError, ValueError, ValidationError) as exc:
            logger.exception("Could not read content file %s during %s", self.path, operation)
            raise StorageUnavailable(operation) from exc

    def _write(self, document: dict, operation: str) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".content-")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.exception("Could not write content file %s during %s", self.path, operation)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageUnavailable(operation) from exc

    @contextmanager
    def _mutate(self, operation: str) -> Iterator[dict]:
        """Yield the document for in-place edits; persist it only on success."""
        with self._lock:
            document = self._read(operation)
            yield document
            self._write(document, operation)

    # ── Reads ─────────────────────────────────────────────────────────────────

    def get_all(self) -> ContentSnapshot:
        with self._lock:
            return ContentSnapshot.model_validate(self._read("get_all"))

    # ── Writes ────────────────────────────────────────────────────────────────

    def _write_hero(self, hero: Hero) -> None:
        with self._mutate("replace_hero") as doc:
            doc["hero"] = hero.model_dump()

    def _insert_category(self, category: SkillCategory) -> None:
        with self._mutate("add_skill_category") as doc:
            if any(c["id"] == category.id for c in doc["skillCategories"]):
                raise Conflict(f"Category '{category.id}' already exists")
            doc["skillCategories"].append(category.model_dump())

    def delete_skill_category(self, category_id: str) -> None:
        with self._mutate("delete_skill_category") as doc:
            if not any(c["id"] == category_id for c in doc["skillCategories"]):
                raise NotFound("Category not found")
            if any(s["categoryId"] == category_id for s in doc["skills"]):
                raise Conflict("Category still has skills; delete them first")
            doc["skillCategories"] = [
                c for c in doc["skillCategories"] if c["id"] != category_id
            ]

    def _insert_skill(self, category_ref: str, name: str) -> str:
        with self._mutate("add_skill") as doc:
            categories = [SkillCategory.model_validate(c) for c in doc["skillCategories"]]
            category = resolve_category(categories, category_ref)
            if category is None:
                raise ValidationFailure("Category not found")
            skill = Skill(id=_new_id("skill"), categoryId=category.id, name=name)
            doc["skills"].append(skill.model_dump())
        return skill.id

    def delete_skill(self, skill_id: str) -> None:
        with self._mutate("delete_skill") as doc:
            remaining = [s for s in doc["skills"] if s["id"] != skill_id]
            if len(remaining) == len(doc["skills"]):
                raise NotFound("Skill not found")
            doc["skills"] = remaining

    def _insert_record(self, collection: str, data: dict) -> str:
        prefix, model = _COLLECTIONS[collection]
        record = model(id=_new_id(prefix), **data)
        with self._mutate(f"add_{collection}") as doc:
            doc[collection].append(record.model_dump(mode="json"))
        return record.id

    def _patch_record(self, collection: str, record_id: str, changes: dict) -> None:
        _, model = _COLLECTIONS[collection]
        with self._mutate(f"update_{collection}") as doc:
            for index, existing in enumerate(doc[collection]):
                if existing["id"] == record_id:
                    merged = model.model_validate({**existing, **changes})
                    doc[collection][index] = merged.model_dump(mode="json")
                    return
            raise NotFound(f"{model.__name__} not found")

    def _delete_record(self, collection: str, record_id: str) -> None:
        _, model = _COLLECTIONS[collection]
        with self._mutate(f"delete_{collection}") as doc:
            remaining = [r for r in doc[collection] if r["id"] != record_id]
            if len(remaining) == len(doc[collection]):
                raise NotFound(f"{model.__name__} not found")
            doc[collection] = remaining

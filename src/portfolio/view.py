"""Builds the public content document from a snapshot."""

import logging

from portfolio.models import CategoryView, ContentSnapshot, ContentView, Hero, SkillItem
from portfolio.uploads import UploadStore

logger = logging.getLogger(__name__)


def build_content_view(snapshot: ContentSnapshot, uploads: UploadStore) -> ContentView:
    """
    Join skills onto their categories and keep only servable image references.

    Categories keep their stored order and skills keep insertion order within a
    category. A skill whose category is gone is left out. Image and logo
    references go through uploads.resolve, which suppresses missing local files.
    """
    items: dict[str, list[SkillItem]] = {c.id: [] for c in snapshot.skillCategories}
    for skill in snapshot.skills:
        bucket = items.get(skill.categoryId)
        if bucket is None:
            logger.debug("Skipping skill %s: category %s missing", skill.id, skill.categoryId)
            continue
        bucket.append(SkillItem(id=skill.id, name=skill.name))

    return ContentView(
        hero=snapshot.hero or Hero(),
        skillCategories=[
            CategoryView(id=c.id, title=c.title, items=items[c.id])
            for c in snapshot.skillCategories
        ],
        projects=[
            p.model_copy(update={"image": uploads.resolve(p.image)}) for p in snapshot.projects
        ],
        experience=[
            e.model_copy(update={"logo": uploads.resolve(e.logo)}) for e in snapshot.experience
        ],
        education=[
            e.model_copy(update={"image": uploads.resolve(e.image)}) for e in snapshot.education
        ],
    )

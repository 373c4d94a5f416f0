"""Admin routes for skill categories and skills.

Category ids are slugs of their titles. POST /skills accepts either the id or
the title as categoryRef: an exact id match wins, then a case-insensitive title
match.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from cms.dependencies import get_store
from portfolio.auth import get_settings, verify_admin_token
from portfolio.config import Settings
from portfolio.models import CategoryCreate, SkillCreate
from portfolio.store import ContentStore

router = APIRouter()


# ── Categories ─────────────────────────────────────────────────────────────────

@router.post("/skill-categories")
def create_category(
    body: CategoryCreate,
    settings: Settings = Depends(get_settings),
    store: ContentStore = Depends(get_store),
    _: str = Depends(verify_admin_token),
):
    if not settings.allow_category_creation:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Skill categories are fixed on this deployment",
        )
    category_id = store.add_skill_category(body.title)
    return {"message": "Category added", "id": category_id}


@router.delete("/skill-categories/{category_id}")
def delete_category(
    category_id: str,
    store: ContentStore = Depends(get_store),
    _: str = Depends(verify_admin_token),
):
    store.delete_skill_category(category_id)
    return {"message": "Category deleted"}


# ── Skills ─────────────────────────────────────────────────────────────────────

@router.post("/skills", status_code=status.HTTP_201_CREATED)
def create_skill(
    body: SkillCreate,
    store: ContentStore = Depends(get_store),
    _: str = Depends(verify_admin_token),
):
    skill_id = store.add_skill(body.categoryRef, body.name)
    return {"message": "Skill added", "id": skill_id}


@router.delete("/skills/{skill_id}")
def delete_skill(
    skill_id: str,
    store: ContentStore = Depends(get_store),
    _: str = Depends(verify_admin_token),
):
    store.delete_skill(skill_id)
    return {"message": "Skill removed"}

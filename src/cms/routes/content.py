"""Public content document — GET /content; hero replace — PUT /hero."""

from fastapi import APIRouter, Depends

from cms.dependencies import get_store, get_uploads
from portfolio.auth import verify_admin_token
from portfolio.models import ContentView, HeroUpdate
from portfolio.store import ContentStore
from portfolio.uploads import UploadStore
from portfolio.view import build_content_view

router = APIRouter()


@router.get("/content", response_model=ContentView)
def get_content(
    store: ContentStore = Depends(get_store),
    uploads: UploadStore = Depends(get_uploads),
):
    return build_content_view(store.get_all(), uploads)


@router.put("/hero")
def replace_hero(
    hero: HeroUpdate,
    store: ContentStore = Depends(get_store),
    _: str = Depends(verify_admin_token),
):
    store.replace_hero(hero.name, hero.title, hero.tagline)
    return {"message": "Hero section updated"}

"""Admin routes for education — POST / DELETE /education (multipart, optional image)."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from cms.dependencies import get_store, read_upload
from portfolio.auth import verify_admin_token
from portfolio.store import ContentStore

router = APIRouter()


@router.post("/education")
def create_education(
    institute: Optional[str] = Form(None),
    degree: Optional[str] = Form(None),
    year: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    store: ContentStore = Depends(get_store),
    _: str = Depends(verify_admin_token),
):
    education_id = store.add_education(
        {"institute": institute, "degree": degree, "year": year, "description": description},
        read_upload(image),
    )
    return {"message": "Education added", "id": education_id}


@router.delete("/education/{education_id}")
def delete_education(
    education_id: str,
    store: ContentStore = Depends(get_store),
    _: str = Depends(verify_admin_token),
):
    store.delete_education(education_id)
    return {"message": "Education deleted"}

"""Admin routes for experience — POST / PUT / DELETE /experience.

POST is multipart with an optional "logo" file. PUT takes a JSON body and
merges only the fields it contains into the stored record.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from cms.dependencies import get_store, read_upload
from portfolio.auth import verify_admin_token
from portfolio.models import ExperienceUpdate
from portfolio.store import ContentStore

router = APIRouter()


@router.post("/experience")
def create_experience(
    company: Optional[str] = Form(None),
    designation: Optional[str] = Form(None),
    from_date: Optional[str] = Form(None, alias="from"),
    to_date: Optional[str] = Form(None, alias="to"),
    responsibilities: Optional[list[str]] = Form(None),  # newline text, repeated, or JSON array
    logo: Optional[UploadFile] = File(None),
    store: ContentStore = Depends(get_store),
    _: str = Depends(verify_admin_token),
):
    experience_id = store.add_experience(
        {
            "company": company,
            "designation": designation,
            "fromDate": from_date,
            "toDate": to_date,
            "responsibilities": responsibilities,
        },
        read_upload(logo),
    )
    return {"message": "Experience added", "id": experience_id}


@router.put("/experience/{experience_id}")
def update_experience(
    experience_id: str,
    update: ExperienceUpdate,
    store: ContentStore = Depends(get_store),
    _: str = Depends(verify_admin_token),
):
    store.update_experience(experience_id, update.model_dump(exclude_unset=True))
    return {"message": "Experience updated"}


@router.delete("/experience/{experience_id}")
def delete_experience(
    experience_id: str,
    store: ContentStore = Depends(get_store),
    _: str = Depends(verify_admin_token),
):
    store.delete_experience(experience_id)
    return {"message": "Experience deleted"}

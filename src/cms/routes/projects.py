"""Admin routes for projects — POST / DELETE /projects (multipart, optional image)."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from cms.dependencies import get_store, read_upload
from portfolio.auth import verify_admin_token
from portfolio.store import ContentStore

router = APIRouter()


@router.post("/projects")
def create_project(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    link: Optional[str] = Form(None),
    tools: Optional[list[str]] = Form(None),   # comma-separated, repeated, or JSON array
    image: Optional[UploadFile] = File(None),
    store: ContentStore = Depends(get_store),
    _: str = Depends(verify_admin_token),
):
    project_id = store.add_project(
        {"title": title, "description": description, "link": link, "tools": tools},
        read_upload(image),
    )
    return {"message": "Project added", "id": project_id}


@router.delete("/projects/{project_id}")
def delete_project(
    project_id: str,
    store: ContentStore = Depends(get_store),
    _: str = Depends(verify_admin_token),
):
    store.delete_project(project_id)
    return {"message": "Project deleted"}

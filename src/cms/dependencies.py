"""Request-scoped accessors for the backends created once in create_app()."""

from typing import Optional

from fastapi import Request, UploadFile

from portfolio.store import ContentStore
from portfolio.uploads import UploadedFile, UploadStore


def get_store(request: Request) -> ContentStore:
    return request.app.state.store


def get_uploads(request: Request) -> UploadStore:
    return request.app.state.uploads


def read_upload(file: Optional[UploadFile]) -> Optional[UploadedFile]:
    """Convert a multipart file part to UploadedFile. An empty part means no file."""
    if file is None or not file.filename:
        return None
    return UploadedFile(
        filename=file.filename,
        content_type=file.content_type or "application/octet-stream",
        data=file.file.read(),
    )

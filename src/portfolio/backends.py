"""Select the content and upload backends once, from Settings."""

from portfolio.config import Settings
from portfolio.db import make_engine
from portfolio.json_store import JsonContentStore
from portfolio.s3 import S3UploadStore
from portfolio.sql_store import SqlContentStore
from portfolio.store import ContentStore
from portfolio.uploads import LocalUploadStore, UploadStore


def build_upload_store(settings: Settings) -> UploadStore:
    if settings.upload_backend == "local":
        return LocalUploadStore(
            root=settings.upload_dir,
            url_prefix=settings.upload_url_prefix,
            allowed_types=settings.allowed_upload_types,
        )
    if settings.upload_backend == "s3":
        if not settings.s3_bucket:
            raise ValueError("S3_BUCKET must be set when UPLOAD_BACKEND=s3")
        return S3UploadStore(
            bucket=settings.s3_bucket,
            region=settings.aws_region,
            allowed_types=settings.allowed_upload_types,
            public_base_url=settings.s3_public_base_url,
            client_kwargs=settings.s3_kwargs,
        )
    raise ValueError(
        f"Unknown UPLOAD_BACKEND: {settings.upload_backend!r}. Must be 'local' or 's3'."
    )


def build_content_store(settings: Settings, uploads: UploadStore) -> ContentStore:
    if settings.content_backend == "json":
        return JsonContentStore(settings.content_file, uploads)
    if settings.content_backend == "sql":
        engine = make_engine(settings.database_url, echo=settings.env == "local")
        return SqlContentStore(engine, uploads)
    raise ValueError(
        f"Unknown CONTENT_BACKEND: {settings.content_backend!r}. Must be 'json' or 'sql'."
    )

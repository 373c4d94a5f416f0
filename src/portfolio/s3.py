"""S3 (or S3-compatible) upload backend.

Objects are written server-side with put_object; the stored reference is the
absolute public URL of the object, so the content document never needs to
know which backend produced it.
"""

import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from portfolio.errors import UploadFailure
from portfolio.uploads import UploadedFile, UploadStore

logger = logging.getLogger(__name__)


class S3UploadStore(UploadStore):
    def __init__(
        self,
        bucket: str,
        region: str,
        allowed_types: frozenset[str] = frozenset(),
        public_base_url: str | None = None,
        client_kwargs: dict | None = None,
        key_prefix: str = "uploads",
    ):
        super().__init__(allowed_types)
        self.bucket = bucket
        self.region = region
        self.key_prefix = key_prefix.strip("/")
        self.public_base_url = (
            public_base_url or f"https://{bucket}.s3.{region}.amazonaws.com"
        ).rstrip("/")
        self._client_kwargs = client_kwargs or {}

    def _s3(self):
        return boto3.client("s3", region_name=self.region, **self._client_kwargs)

    def object_key(self, key: str) -> str:
        return f"{self.key_prefix}/{key}" if self.key_prefix else key

    def public_url(self, s3_key: str) -> str:
        return f"{self.public_base_url}/{s3_key}"

    def _persist(self, key: str, upload: UploadedFile) -> str:
        s3_key = self.object_key(key)
        try:
            self._s3().put_object(
                Bucket=self.bucket,
                Key=s3_key,
                Body=upload.data,
                ContentType=upload.content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.exception("S3 upload failed for s3://%s/%s", self.bucket, s3_key)
            raise UploadFailure(s3_key) from exc
        return self.public_url(s3_key)

    def resolve(self, ref: Optional[str]) -> Optional[str]:
        # A stored object-store reference is only ever written after a
        # completed put_object, so it is trusted as-is.
        return ref or None

    def discard(self, ref: str) -> None:
        prefix = self.public_base_url + "/"
        if not ref.startswith(prefix):
            return
        try:
            self._s3().delete_object(Bucket=self.bucket, Key=ref[len(prefix):])
        except (BotoCoreError, ClientError):
            logger.warning("Could not remove orphaned object %s", ref, exc_info=True)

"""Upload sidecar: media-type allow-list, storage key synthesis, local disk backend.

Key layout (shared by every backend):
    <kind>/<slug of original stem>-<nanosecond timestamp><ext>
    e.g. projects/my-app-screenshot-1760890000123456789.png

kind is one of "projects", "experience", "education". ext always follows the
declared media type, never the client filename, so static serving returns the
same type the allow-list checked.
"""

import logging
import mimetypes
import os
import tempfile
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional

from portfolio.errors import UnsupportedMediaType, UploadFailure
from portfolio.text import slugify

logger = logging.getLogger(__name__)

UPLOAD_KINDS = {"projects", "experience", "education"}

_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
}


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content_type: str
    data: bytes


def _extension_for(content_type: str) -> str:
    ext = _EXTENSIONS.get(content_type)
    if ext is None:
        ext = mimetypes.guess_extension(content_type.split(";")[0].strip()) or ""
    return ext


def build_upload_key(kind: str, upload: UploadedFile) -> str:
    if kind not in UPLOAD_KINDS:
        raise ValueError(f"Unknown upload kind: {kind!r}. Must be one of {sorted(UPLOAD_KINDS)}.")

    original = PurePosixPath(upload.filename.replace("\\", "/")).name
    stem = os.path.splitext(original)[0]
    name = slugify(stem) or kind
    return f"{kind}/{name}-{time.time_ns()}{_extension_for(upload.content_type)}"


class UploadStore(ABC):
    """Base class for upload backends. Subclasses implement _persist/resolve/discard."""

    def __init__(self, allowed_types: frozenset[str] = frozenset()):
        self.allowed_types = allowed_types

    def check(self, upload: UploadedFile) -> None:
        """Reject disallowed media types. An empty allow-list accepts anything."""
        if self.allowed_types and upload.content_type not in self.allowed_types:
            allowed = ", ".join(sorted(self.allowed_types))
            raise UnsupportedMediaType(
                f"Unsupported media type '{upload.content_type}'. Allowed: {allowed}"
            )

    def save(self, kind: str, upload: UploadedFile) -> str:
        """Validate, persist and return the reference string for the stored file."""
        self.check(upload)
        key = build_upload_key(kind, upload)
        ref = self._persist(key, upload)
        logger.info("Stored upload %s (%d bytes)", key, len(upload.data))
        return ref

    @abstractmethod
    def _persist(self, key: str, upload: UploadedFile) -> str:
        ...

    @abstractmethod
    def resolve(self, ref: Optional[str]) -> Optional[str]:
        """Return a client-resolvable reference, or None if it cannot be served."""

    @abstractmethod
    def discard(self, ref: str) -> None:
        """Best-effort removal of a stored upload. Never raises."""


class LocalUploadStore(UploadStore):
    """Writes uploads under a directory served as static files at url_prefix."""

    def __init__(
        self,
        root: str | Path,
        url_prefix: str = "/assets/uploads",
        allowed_types: frozenset[str] = frozenset(),
    ):
        super().__init__(allowed_types)
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def _persist(self, key: str, upload: UploadedFile) -> str:
        target = self.root / key
        tmp_name = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file so a failed write never leaves a
            # partial file at the final path.
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".upload-")
            with os.fdopen(fd, "wb") as fh:
                fh.write(upload.data)
            os.replace(tmp_name, target)
        except OSError as exc:
            logger.exception("Local upload failed for %s", key)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise UploadFailure(key) from exc
        return f"{self.url_prefix}/{key}"

    def _path_for(self, ref: str) -> Optional[Path]:
        prefix = self.url_prefix + "/"
        if not ref.startswith(prefix):
            return None
        root = self.root.resolve()
        path = (root / ref[len(prefix):]).resolve()
        if root not in path.parents:
            return None
        return path

    def resolve(self, ref: Optional[str]) -> Optional[str]:
        if not ref:
            return None
        path = self._path_for(ref)
        if path is None or not path.is_file():
            return None
        return ref

    def discard(self, ref: str) -> None:
        path = self._path_for(ref)
        if path is None:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not remove orphaned upload %s", ref, exc_info=True)

"""
Shared pytest fixtures.

Environment variables are set at module level — before any src/ imports —
so the module-level app in cms.handler is built against throwaway paths.
"""

import os
import tempfile

_SCRATCH = tempfile.mkdtemp(prefix="portfolio-cms-tests-")

# Must be set before any cms.* imports.
# Use setdefault so externally-passed env vars (integration tests) take precedence.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-32-chars-exactly-ok!")
os.environ.setdefault("ADMIN_EMAIL", "admin@example.com")
os.environ.setdefault("CONTENT_BACKEND", "json")
os.environ.setdefault("CONTENT_FILE", os.path.join(_SCRATCH, "content.json"))
os.environ.setdefault("UPLOAD_BACKEND", "local")
os.environ.setdefault("UPLOAD_DIR", os.path.join(_SCRATCH, "uploads"))
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("AWS_REGION", "us-west-2")

from datetime import datetime, timedelta, timezone

import boto3
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from moto import mock_aws
from passlib.hash import pbkdf2_sha256

from portfolio.config import Settings

SECRET = "test-secret-32-chars-exactly-ok!"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct horse battery staple"
ADMIN_PASSWORD_HASH = pbkdf2_sha256.hash(ADMIN_PASSWORD)
BUCKET = "portfolio-test-uploads"

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"
)


# ── Token helper ────────────────────────────────────────────────────────────────

def make_token(
    subject: str = ADMIN_EMAIL,
    secret: str = SECRET,
    expired: bool = False,
) -> str:
    exp = datetime.now(timezone.utc) + (
        timedelta(seconds=-1) if expired else timedelta(hours=1)
    )
    return jwt.encode({"sub": subject, "exp": exp}, secret, algorithm="HS256")


def auth_headers(subject: str = ADMIN_EMAIL) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(subject)}"}


# ── Settings / app fixtures ─────────────────────────────────────────────────────

def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        env="test",
        jwt_secret=SECRET,
        admin_email=ADMIN_EMAIL,
        admin_password_hash=ADMIN_PASSWORD_HASH,
        content_backend="json",
        content_file=str(tmp_path / "content.json"),
        database_url=f"sqlite:///{tmp_path / 'portfolio.db'}",
        upload_backend="local",
        upload_dir=str(tmp_path / "uploads"),
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(params=["json", "sql"])
def backend(request) -> str:
    """Every API test runs against both content backends."""
    return request.param


@pytest.fixture()
def settings(tmp_path, backend) -> Settings:
    return make_settings(tmp_path, content_backend=backend)


@pytest.fixture()
def app(settings):
    """Import inside the fixture so the app is always built from test settings."""
    from cms.handler import create_app  # noqa: PLC0415

    return create_app(settings)


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=True)


# ── AWS fixtures ────────────────────────────────────────────────────────────────

@pytest.fixture()
def aws_env():
    """Start moto mock, create the upload bucket, yield, teardown."""
    with mock_aws():
        s3 = boto3.client("s3", region_name="us-west-2")
        s3.create_bucket(
            Bucket=BUCKET,
            CreateBucketConfiguration={"LocationConstraint": "us-west-2"},
        )
        yield s3


@pytest.fixture()
def s3_client(tmp_path, aws_env) -> TestClient:
    """JSON content backend with uploads going to the mocked bucket."""
    from cms.handler import create_app  # noqa: PLC0415

    app = create_app(
        make_settings(
            tmp_path,
            upload_backend="s3",
            s3_bucket=BUCKET,
            aws_region="us-west-2",
        )
    )
    return TestClient(app, raise_server_exceptions=True)

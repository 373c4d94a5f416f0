import os
from dataclasses import dataclass, field


def _flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _csv(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    env: str = "production"
    log_level: str = "INFO"

    # Auth
    jwt_secret: str = ""
    token_ttl_minutes: int = 120
    admin_email: str = ""
    admin_password_hash: str = ""
    users_file: str | None = None

    # Content storage: "json" | "sql"
    content_backend: str = "json"
    content_file: str = "data/content.json"
    database_url: str = "sqlite:///./portfolio.db"

    # Uploads: "local" | "s3"
    upload_backend: str = "local"
    upload_dir: str = "assets/uploads"
    upload_url_prefix: str = "/assets/uploads"
    allowed_upload_types: frozenset[str] = field(
        default_factory=lambda: frozenset({"image/png", "image/jpeg", "image/jpg"})
    )

    s3_bucket: str = ""
    aws_region: str = "us-west-2"
    s3_endpoint_url: str | None = None     # S3-compatible stores (MinIO, R2, ...)
    s3_public_base_url: str | None = None  # CDN / public bucket domain

    allow_category_creation: bool = True
    cors_origins: tuple[str, ...] = ("*",)

    @property
    def s3_kwargs(self) -> dict:
        """Extra kwargs injected into boto3 client construction."""
        kwargs: dict = {}
        if self.s3_endpoint_url:
            kwargs["endpoint_url"] = self.s3_endpoint_url
        return kwargs


def load_settings() -> Settings:
    """Read the process environment once into an immutable Settings."""
    return Settings(
        env=os.getenv("ENV", "production"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        jwt_secret=os.getenv("JWT_SECRET", ""),
        token_ttl_minutes=int(os.getenv("TOKEN_TTL_MINUTES", "120")),
        admin_email=os.getenv("ADMIN_EMAIL", ""),
        admin_password_hash=os.getenv("ADMIN_PASSWORD_HASH", ""),
        users_file=os.getenv("USERS_FILE") or None,
        content_backend=os.getenv("CONTENT_BACKEND", "json").lower(),
        content_file=os.getenv("CONTENT_FILE", "data/content.json"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./portfolio.db"),
        upload_backend=os.getenv("UPLOAD_BACKEND", "local").lower(),
        upload_dir=os.getenv("UPLOAD_DIR", "assets/uploads"),
        upload_url_prefix=os.getenv("UPLOAD_URL_PREFIX", "/assets/uploads").rstrip("/"),
        allowed_upload_types=frozenset(
            _csv("UPLOAD_ALLOWED_TYPES", "image/png,image/jpeg,image/jpg")
        ),
        s3_bucket=os.getenv("S3_BUCKET", ""),
        aws_region=os.getenv("AWS_REGION", "us-west-2"),
        s3_endpoint_url=os.getenv("S3_ENDPOINT_URL") or None,
        s3_public_base_url=os.getenv("S3_PUBLIC_BASE_URL") or None,
        allow_category_creation=_flag("ALLOW_CATEGORY_CREATION", True),
        cors_origins=_csv("CORS_ORIGINS", "*"),
    )

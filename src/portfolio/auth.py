"""
Admin login and JWT validation for admin routes.

POST /login checks an identifier + secret against the configured admin account
and returns an HS256-signed token. Every admin route then requires it:

    Authorization: Bearer <token>

A missing, malformed, expired or wrongly signed token is rejected with 403.

Accounts come from USERS_FILE (a JSON list of {"id", "email", "password"} where
password is a passlib hash) when set, otherwise from ADMIN_EMAIL +
ADMIN_PASSWORD_HASH.
"""

import json
import logging
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from portfolio.config import Settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

_security = HTTPBearer(auto_error=False)
_pwd_context = CryptContext(schemes=["bcrypt", "pbkdf2_sha256"], deprecated="auto")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _require_secret(settings: Settings) -> str:
    if not settings.jwt_secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="JWT_SECRET not configured",
        )
    return settings.jwt_secret


def _accounts(settings: Settings) -> list[dict]:
    if settings.users_file:
        with open(settings.users_file, encoding="utf-8") as fh:
            return json.load(fh)
    if settings.admin_email and settings.admin_password_hash:
        return [
            {"id": "admin", "email": settings.admin_email, "password": settings.admin_password_hash}
        ]
    return []


def verify_secret(secret: str, hashed: str) -> bool:
    try:
        return _pwd_context.verify(secret, hashed)
    except ValueError:
        # Unrecognised or malformed hash in the account record.
        logger.warning("Stored password hash could not be parsed")
        return False


def authenticate(identifier: str, secret: str, settings: Settings) -> dict | None:
    """Return the matching account record, or None on any mismatch."""
    wanted = identifier.strip().lower()
    for account in _accounts(settings):
        if str(account.get("email", "")).lower() == wanted:
            if verify_secret(secret, str(account.get("password", ""))):
                return account
            return None
    return None


def issue_token(account: dict, settings: Settings) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=settings.token_ttl_minutes)
    claims = {"sub": str(account["email"]), "id": str(account.get("id", "")), "exp": exp}
    return jwt.encode(claims, _require_secret(settings), algorithm=ALGORITHM)


def login(identifier: str, secret: str, settings: Settings) -> str:
    _require_secret(settings)
    account = authenticate(identifier, secret, settings)
    if account is None:
        logger.info("Rejected login for %s", identifier)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    logger.info("Admin login for %s", account["email"])
    return issue_token(account, settings)


def verify_admin_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
    settings: Settings = Depends(get_settings),
) -> str:
    """Dependency injected into every admin route. Returns the token subject."""
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authenticated")

    secret = _require_secret(settings)
    try:
        payload = jwt.decode(credentials.credentials, secret, algorithms=[ALGORITHM])
    except JWTError:
        # Covers ExpiredSignatureError as well.
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")

    subject: str | None = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")
    return subject

"""Admin login — POST /login."""

from fastapi import APIRouter, Depends

from portfolio.auth import get_settings, login
from portfolio.config import Settings
from portfolio.models import LoginRequest, TokenResponse

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
def admin_login(req: LoginRequest, settings: Settings = Depends(get_settings)):
    return TokenResponse(token=login(req.identifier, req.secret, settings))

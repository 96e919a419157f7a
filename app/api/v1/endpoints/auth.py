"""Admin login endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Request

from app.auth import get_current_admin, login_admin, logout_admin
from app.core.security import verify_admin_credentials
from app.schemas.auth import AdminMeResponse, LoginRequest, OkResponse

logger = logging.getLogger(__name__)

router: APIRouter = APIRouter()


@router.post("/login", response_model=OkResponse)
def login(payload: LoginRequest, request: Request) -> OkResponse:
    """Open an admin session for valid credentials."""
    if not verify_admin_credentials(payload.username, payload.password):
        logger.warning("[AUTH] Rejected admin login for %r", payload.username)
        raise HTTPException(status_code=401, detail="INVALID_CREDENTIALS")
    login_admin(request, payload.username.strip())
    return OkResponse()


@router.post("/logout", response_model=OkResponse)
def logout(request: Request) -> OkResponse:
    logout_admin(request)
    return OkResponse()


@router.get("/me", response_model=AdminMeResponse)
def me(request: Request) -> AdminMeResponse:
    current = get_current_admin(request)
    if current is None:
        return AdminMeResponse(authenticated=False)
    return AdminMeResponse(authenticated=True, username=current["username"])

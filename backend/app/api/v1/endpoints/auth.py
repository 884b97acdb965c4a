from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status

from app.core.auth import AccessGate
from app.core.config import settings
from app.core.dependencies import get_access_gate, get_current_admin
from app.models.auth import AdminIdentity, LoginRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "samesite": "lax",
        "secure": settings.COOKIE_SECURE,
        "path": "/",
    }


@router.post("/login", response_model=AdminIdentity)
async def login(
    credentials: LoginRequest,
    response: Response,
    gate: AccessGate = Depends(get_access_gate),  # noqa: B008
):
    token = gate.login(credentials.email, credentials.password)
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        token,
        max_age=gate.max_age_seconds,
        **_cookie_options(),
    )
    logger.info("Admin logged in")
    return AdminIdentity(email=gate.admin.email)


@router.get("/me", response_model=AdminIdentity)
async def me(admin: AdminIdentity = Depends(get_current_admin)):  # noqa: B008
    return admin


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout():
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(settings.AUTH_COOKIE_NAME, **_cookie_options())
    return response

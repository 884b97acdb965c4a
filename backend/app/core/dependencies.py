from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, status

from app.core.auth import AccessGate
from app.core.config import settings
from app.models.auth import AdminIdentity
from app.services.employee_service import EmployeeService, employee_service
from app.services.item_service import ItemService, item_service

logger = logging.getLogger(__name__)


def get_access_gate() -> AccessGate:
    try:
        return AccessGate.from_settings(settings)
    except ValueError as e:
        logger.error("Admin authentication misconfigured: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Missing admin authentication configuration",
        ) from e


async def get_current_admin(
    request: Request,
    gate: AccessGate = Depends(get_access_gate),  # noqa: B008
) -> AdminIdentity:
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    return gate.verify(token)


def get_employee_service() -> EmployeeService:
    return employee_service


def get_item_service() -> ItemService:
    return item_service

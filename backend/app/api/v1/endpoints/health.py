from __future__ import annotations

import time

from fastapi import APIRouter

from app.core.config import settings
from app.services.database import cosmos_database

router = APIRouter(prefix="/health", tags=["health"])

_STARTED_AT = time.monotonic()


@router.get("")
async def health_check():
    services: dict[str, str] = {}

    try:
        if cosmos_database.initialized:
            ok = await cosmos_database.check_connection()
            services["cosmos_db"] = "ok" if ok else "error"
        else:
            services["cosmos_db"] = "not_configured"
    except Exception:
        services["cosmos_db"] = "error"

    return {
        "status": "ok" if all(v in ("ok", "not_configured") for v in services.values()) else "degraded",
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "timestamp": int(time.time() * 1000),
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.services.database import cosmos_database
from app.services.employee_service import employee_service
from app.services.item_service import item_service

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.LOG_LEVEL)
    try:
        await cosmos_database.initialize(settings)
    except Exception:
        logger.exception("Failed to connect to Cosmos DB — continuing without DB")
    try:
        await employee_service.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize EmployeeService — continuing without employees")
    try:
        await item_service.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize ItemService — continuing without items")
    yield
    await item_service.close()
    await employee_service.close()
    await cosmos_database.close()


app = FastAPI(
    title="EmpireHR API",
    description="Employee management: records, org chart and admin session",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s %d %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "EmpireHR API"}

"""Application exceptions and the FastAPI handlers that render them."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)

    def to_body(self) -> dict[str, Any]:
        return {"detail": self.detail}


class ValidationError(AppError):
    """400: missing or malformed input, or an employee managing itself."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str, errors: dict[str, list[str]] | None = None) -> None:
        super().__init__(detail)
        self.errors = errors or {}

    @classmethod
    def for_field(cls, field: str, message: str) -> ValidationError:
        return cls(message, {field: [message]})

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        if self.errors:
            body["errors"] = self.errors
        return body


class AuthenticationError(AppError):
    """401: never says which credential was wrong."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(detail)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


_CONFLICT_MESSAGES = {
    "email": "Email already exists",
    "employeeNumber": "Employee number already exists",
}


class ConflictError(AppError):
    """409: a unique field is already taken by another record."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, field: str) -> None:
        super().__init__(_CONFLICT_MESSAGES.get(field, f"{field} already exists"))
        self.field = field

    def to_body(self) -> dict[str, Any]:
        return {"detail": self.detail, "field": self.field}


class ServiceUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


async def _handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc", ())
        name = ".".join(str(p) for p in loc[1:]) if len(loc) > 1 else (str(loc[0]) if loc else "body")
        field_errors.setdefault(name, []).append(err.get("msg", "Invalid value"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation error", "errors": field_errors},
    )


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _handle_app_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_request_validation)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _handle_unexpected)

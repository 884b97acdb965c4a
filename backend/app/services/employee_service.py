"""Employee CRUD: canonicalization, integrity checks and listing."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any

from app.core.config import Settings
from app.core.exceptions import ConflictError, NotFoundError, ServiceUnavailableError, ValidationError
from app.models.employee import Employee, EmployeeCreate, EmployeePage, EmployeeUpdate, OrgEmployee
from app.services.cosmos_store import utc_now
from app.services.database import cosmos_database
from app.services.employee_store import (
    PARTITION_KEY_PATH,
    UNIQUE_KEY_PATHS,
    DuplicateKeyError,
    EmployeeStore,
    SelfManagerError,
)
from app.services.query import clamp_limit, clamp_page, sanitize_sort

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("firstName", "surname", "email", "employeeNumber", "role")


def clean_text(value: Any) -> str:
    return str(value if value is not None else "").strip()


def canonical_email(value: Any) -> str:
    return clean_text(value).lower()


def canonical_employee_number(value: Any) -> str:
    return clean_text(value).upper()


def _manager_ref(value: Any) -> str | None:
    ref = clean_text(value)
    return ref or None


_NORMALIZERS = {
    "firstName": clean_text,
    "surname": clean_text,
    "role": clean_text,
    "email": canonical_email,
    "employeeNumber": canonical_employee_number,
    "manager": _manager_ref,
}


def normalize_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Canonicalize the given camelCase fields; absent fields stay absent."""
    normalized: dict[str, Any] = {}
    for field, value in fields.items():
        if field in _NORMALIZERS:
            normalized[field] = _NORMALIZERS[field](value)
        elif field == "birthDate":
            normalized[field] = value.isoformat() if value else None
        elif field == "isActive":
            normalized[field] = bool(value)
        else:
            normalized[field] = value

    missing = [field for field in REQUIRED_FIELDS if field in normalized and not normalized[field]]
    if missing:
        raise ValidationError(
            f"{', '.join(missing)} {'is' if len(missing) == 1 else 'are'} required",
            {field: ["This field is required"] for field in missing},
        )
    return normalized


class EmployeeService:
    def __init__(self, store: EmployeeStore | None = None) -> None:
        self.store = store

    @property
    def initialized(self) -> bool:
        return self.store is not None

    async def initialize(self, settings: Settings) -> None:
        if self.store is not None:
            return

        container = await cosmos_database.container(
            settings.COSMOS_DB_EMPLOYEES_CONTAINER,
            PARTITION_KEY_PATH,
            UNIQUE_KEY_PATHS,
        )
        if container is None:
            logger.warning("No Cosmos DB database — EmployeeService not initialized")
            return

        self.store = EmployeeStore(container)
        logger.info("EmployeeService initialized (container=%s)", settings.COSMOS_DB_EMPLOYEES_CONTAINER)

    async def close(self) -> None:
        self.store = None

    def _require_store(self) -> EmployeeStore:
        if self.store is None:
            raise ServiceUnavailableError("Employee store is not configured")
        return self.store

    async def create(self, data: EmployeeCreate) -> Employee:
        store = self._require_store()
        fields = normalize_fields(data.model_dump(by_alias=True))
        fields.setdefault("isActive", True)

        await self._ensure_unique(store, fields)

        now = utc_now()
        doc = {"id": uuid.uuid4().hex, **fields, "createdAt": now, "updatedAt": now}
        try:
            created = await store.insert(doc)
        except DuplicateKeyError as e:
            raise ConflictError(e.field) from e

        logger.info("Created employee %s (%s)", created["id"], created["employeeNumber"])
        return Employee.model_validate(created)

    async def update(self, employee_id: str, data: EmployeeUpdate) -> Employee:
        store = self._require_store()
        supplied = data.model_dump(by_alias=True, exclude_unset=True)
        fields = normalize_fields(supplied)

        if "manager" in fields and fields["manager"] == employee_id:
            raise SelfManagerError()

        await self._ensure_unique(store, fields, exclude_id=employee_id)

        fields["updatedAt"] = utc_now()
        try:
            updated = await store.update(employee_id, fields)
        except DuplicateKeyError as e:
            raise ConflictError(e.field) from e

        if updated is None:
            raise NotFoundError("Employee", employee_id)

        logger.info("Updated employee %s (fields=%s)", employee_id, ",".join(sorted(supplied)))
        return Employee.model_validate(updated)

    async def delete(self, employee_id: str) -> None:
        store = self._require_store()
        if not await store.delete(employee_id):
            raise NotFoundError("Employee", employee_id)
        logger.info("Deleted employee %s", employee_id)

    async def find_by_id(self, employee_id: str) -> Employee:
        doc = await self._require_store().get(employee_id)
        if doc is None:
            raise NotFoundError("Employee", employee_id)
        return Employee.model_validate(doc)

    async def find_id_by_employee_number(self, employee_number: str) -> str | None:
        number = canonical_employee_number(employee_number)
        if not number:
            return None
        return await self._require_store().find_id_by("employeeNumber", number)

    async def list(
        self,
        q: str | None = None,
        sort: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> EmployeePage:
        store = self._require_store()
        page = clamp_page(page)
        limit = clamp_limit(limit)
        term = (q or "").strip()

        docs, total = await store.search(term or None, sanitize_sort(sort), (page - 1) * limit, limit)
        return EmployeePage(
            data=[Employee.model_validate(doc) for doc in docs],
            total=total,
            page=page,
            limit=limit,
        )

    async def list_all(self) -> list[Employee]:
        docs = await self._require_store().list_all()
        return [Employee.model_validate(doc) for doc in docs]

    async def list_for_org(self) -> list[OrgEmployee]:
        rows = await self._require_store().list_org()
        rows.sort(key=lambda r: (r.get("role") or "", r.get("createdAt") or ""))

        result: list[OrgEmployee] = []
        for row in rows:
            manager = row.get("manager") or None
            if manager == row["id"]:
                manager = None
            result.append(
                OrgEmployee(
                    id=row["id"],
                    name=row.get("firstName") or "",
                    surname=row.get("surname") or "",
                    email=row.get("email") or "",
                    role=row.get("role") or "",
                    employee_number=row.get("employeeNumber") or "",
                    manager=manager,
                    created_at=row.get("createdAt"),
                )
            )
        return result

    async def _ensure_unique(
        self,
        store: EmployeeStore,
        fields: dict[str, Any],
        exclude_id: str | None = None,
    ) -> None:
        # Advisory only: a concurrent writer can still slip past, and the
        # container's unique keys reject it at insert/update time.
        checks = [field for field in ("email", "employeeNumber") if fields.get(field)]
        if not checks:
            return

        found = await asyncio.gather(
            *(store.find_id_by(field, fields[field], exclude_id=exclude_id) for field in checks)
        )
        for field, existing_id in zip(checks, found):
            if existing_id:
                raise ConflictError(field)


employee_service = EmployeeService()

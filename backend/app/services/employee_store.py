"""Cosmos DB persistence for employee documents.

All employees share one logical partition so the container's unique key
policy on ``/email`` and ``/employeeNumber`` covers every record. That
policy, not the service's pre-checks, is what decides a duplicate.
"""

from __future__ import annotations

import logging
from typing import Any

from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceExistsError

from app.core.exceptions import ValidationError
from app.services.cosmos_store import CosmosStore
from app.services.query import order_by_clause

logger = logging.getLogger(__name__)

EMPLOYEE_TYPE = "employee"
PARTITION_KEY_PATH = "/type"
UNIQUE_FIELDS = ("email", "employeeNumber")
UNIQUE_KEY_PATHS = tuple(f"/{field}" for field in UNIQUE_FIELDS)

_ORG_FIELDS = "c.id, c.firstName, c.surname, c.email, c.role, c.employeeNumber, c.manager, c.createdAt"

_SEARCH_CLAUSE = (
    "(CONTAINS(c.firstName, @q, true)"
    " OR CONTAINS(c.surname, @q, true)"
    " OR CONTAINS(c.email, @q, true)"
    " OR CONTAINS(c.role, @q, true)"
    " OR CONTAINS(c.employeeNumber, @q, true)"
    " OR CONTAINS(CONCAT(c.firstName, ' ', c.surname), @q, true))"
)


class DuplicateKeyError(Exception):
    def __init__(self, field: str) -> None:
        super().__init__(f"Duplicate value for unique field {field}")
        self.field = field


class SelfManagerError(ValidationError):
    def __init__(self) -> None:
        message = "Employee cannot be their own manager."
        super().__init__(message, {"manager": [message]})


def _is_conflict(error: CosmosHttpResponseError) -> bool:
    return isinstance(error, CosmosResourceExistsError) or error.status_code == 409


class EmployeeStore(CosmosStore):
    def __init__(self, container: Any) -> None:
        super().__init__(container, partition_value=EMPLOYEE_TYPE)

    async def insert(self, doc: dict[str, Any]) -> dict[str, Any]:
        if doc.get("manager") and doc.get("manager") == doc.get("id"):
            raise SelfManagerError()

        body = {**doc, "type": EMPLOYEE_TYPE}
        try:
            created = await self.container.create_item(body=body)
        except CosmosHttpResponseError as e:
            if not _is_conflict(e):
                raise
            field = await self._conflicting_field(body, exclude_id=body.get("id"))
            raise DuplicateKeyError(field) from e
        return self._clean(created)

    async def get(self, employee_id: str) -> dict[str, Any] | None:
        doc = await self._read(employee_id)
        return self._clean(doc) if doc else None

    async def find_id_by(self, field: str, value: str, exclude_id: str | None = None) -> str | None:
        if field not in UNIQUE_FIELDS:
            raise ValueError(f"Not a unique field: {field}")

        query = f"SELECT TOP 1 c.id FROM c WHERE c.{field} = @value"
        params: list[dict[str, Any]] = [{"name": "@value", "value": value}]
        if exclude_id:
            query += " AND c.id != @exclude"
            params.append({"name": "@exclude", "value": exclude_id})

        rows = await self._query(query, params)
        return rows[0]["id"] if rows else None

    async def update(self, employee_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        """Apply a partial update atomically; ``None`` when the id is unknown.

        Refuses a ``manager`` equal to the target id on its own, whatever
        the caller checked before.
        """
        if "manager" in changes and changes["manager"] and changes["manager"] == employee_id:
            raise SelfManagerError()

        try:
            updated = await self._patch(employee_id, changes)
        except CosmosHttpResponseError as e:
            if not _is_conflict(e):
                raise
            field = await self._conflicting_field(changes, exclude_id=employee_id)
            raise DuplicateKeyError(field) from e
        return self._clean(updated) if updated else None

    async def delete(self, employee_id: str) -> bool:
        return await self._delete(employee_id)

    async def search(
        self,
        q: str | None,
        sort: str,
        offset: int,
        limit: int,
    ) -> tuple[list[dict[str, Any]], int]:
        where = "WHERE c.type = @type"
        params: list[dict[str, Any]] = [{"name": "@type", "value": EMPLOYEE_TYPE}]
        if q:
            where += f" AND {_SEARCH_CLAUSE}"
            params.append({"name": "@q", "value": q})

        total = await self._scalar(f"SELECT VALUE COUNT(1) FROM c {where}", params)
        page_params = [*params, {"name": "@offset", "value": offset}, {"name": "@limit", "value": limit}]
        docs = await self._query(
            f"SELECT * FROM c {where} {order_by_clause(sort)} OFFSET @offset LIMIT @limit",
            page_params,
        )
        return [self._clean(doc) for doc in docs], int(total or 0)

    async def list_all(self) -> list[dict[str, Any]]:
        docs = await self._query("SELECT * FROM c WHERE c.type = @type", [{"name": "@type", "value": EMPLOYEE_TYPE}])
        return [self._clean(doc) for doc in docs]

    async def list_org(self) -> list[dict[str, Any]]:
        return await self._query(
            f"SELECT {_ORG_FIELDS} FROM c WHERE c.type = @type",
            [{"name": "@type", "value": EMPLOYEE_TYPE}],
        )

    async def _conflicting_field(self, doc: dict[str, Any], exclude_id: str | None) -> str:
        for field in UNIQUE_FIELDS:
            value = doc.get(field)
            if value and await self.find_id_by(field, value, exclude_id=exclude_id):
                return field
        # the other writer may have since gone; report the first unique field written
        return next((field for field in UNIQUE_FIELDS if field in doc), UNIQUE_FIELDS[0])

    @staticmethod
    def _clean(doc: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in doc.items() if k != "type" and not k.startswith("_")}

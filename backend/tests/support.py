"""Shared test helpers and in-memory stand-ins for the Cosmos-backed stores.

They keep the contract the services rely on: unique email and employee
number enforced at write time (raising ``DuplicateKeyError``), ``None`` for
unknown ids, and the self-manager guard on update.
"""

from __future__ import annotations

import asyncio
import copy
import time
from typing import Any

from jose import jwt

from app.services.employee_store import UNIQUE_FIELDS, DuplicateKeyError, SelfManagerError
from app.services.query import parse_sort

_SEARCH_FIELDS = ("firstName", "surname", "email", "role", "employeeNumber")


def _sort_key(field: str):
    def key(doc: dict[str, Any]):
        value: Any = doc
        for part in field.split("."):
            value = value.get(part) if isinstance(value, dict) else None
        return (value is not None, value if value is not None else "")

    return key


class InMemoryEmployeeStore:
    def __init__(self) -> None:
        self.docs: dict[str, dict[str, Any]] = {}
        self.insert_attempts = 0

    def _check_unique(self, doc: dict[str, Any], exclude_id: str | None) -> None:
        for field in UNIQUE_FIELDS:
            if field not in doc:
                continue
            for other_id, other in self.docs.items():
                if other_id != exclude_id and other.get(field) == doc[field]:
                    raise DuplicateKeyError(field)

    async def insert(self, doc: dict[str, Any]) -> dict[str, Any]:
        self.insert_attempts += 1
        if doc.get("manager") and doc["manager"] == doc["id"]:
            raise SelfManagerError()
        self._check_unique(doc, exclude_id=None)
        self.docs[doc["id"]] = copy.deepcopy(doc)
        return copy.deepcopy(doc)

    async def get(self, employee_id: str) -> dict[str, Any] | None:
        doc = self.docs.get(employee_id)
        return copy.deepcopy(doc) if doc else None

    async def find_id_by(self, field: str, value: str, exclude_id: str | None = None) -> str | None:
        await asyncio.sleep(0)
        for doc_id, doc in self.docs.items():
            if doc_id != exclude_id and doc.get(field) == value:
                return doc_id
        return None

    async def update(self, employee_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        if changes.get("manager") and changes["manager"] == employee_id:
            raise SelfManagerError()
        if employee_id not in self.docs:
            return None
        self._check_unique(changes, exclude_id=employee_id)
        self.docs[employee_id].update(copy.deepcopy(changes))
        return copy.deepcopy(self.docs[employee_id])

    async def delete(self, employee_id: str) -> bool:
        return self.docs.pop(employee_id, None) is not None

    async def search(self, q: str | None, sort: str, offset: int, limit: int) -> tuple[list[dict[str, Any]], int]:
        docs = list(self.docs.values())
        if q:
            term = q.lower()
            docs = [
                doc
                for doc in docs
                if any(term in str(doc.get(f, "")).lower() for f in _SEARCH_FIELDS)
                or term in f"{doc.get('firstName', '')} {doc.get('surname', '')}".lower()
            ]
        field, descending = parse_sort(sort)
        docs.sort(key=_sort_key(field), reverse=descending)
        return copy.deepcopy(docs[offset : offset + limit]), len(docs)

    async def list_all(self) -> list[dict[str, Any]]:
        return copy.deepcopy(list(self.docs.values()))

    async def list_org(self) -> list[dict[str, Any]]:
        keys = ("id", "firstName", "surname", "email", "role", "employeeNumber", "manager", "createdAt")
        return [{k: doc.get(k) for k in keys} for doc in self.docs.values()]


class InMemoryItemStore:
    def __init__(self) -> None:
        self.docs: dict[str, dict[str, Any]] = {}

    async def insert(self, doc: dict[str, Any]) -> dict[str, Any]:
        self.docs[doc["id"]] = copy.deepcopy(doc)
        return copy.deepcopy(doc)

    async def get(self, item_id: str) -> dict[str, Any] | None:
        doc = self.docs.get(item_id)
        return copy.deepcopy(doc) if doc else None

    async def update(self, item_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        if item_id not in self.docs:
            return None
        self.docs[item_id].update(copy.deepcopy(changes))
        return copy.deepcopy(self.docs[item_id])

    async def delete(self, item_id: str) -> bool:
        return self.docs.pop(item_id, None) is not None

    async def search(self, q: str | None, offset: int, limit: int) -> tuple[list[dict[str, Any]], int]:
        docs = list(self.docs.values())
        if q:
            term = q.lower()
            docs = [d for d in docs if term in d["name"].lower() or term in d.get("description", "").lower()]
        docs.sort(key=lambda d: d["createdAt"], reverse=True)
        return copy.deepcopy(docs[offset : offset + limit]), len(docs)


TEST_ADMIN_EMAIL = "admin@empirehr.test"
TEST_ADMIN_PASSWORD = "correct-horse-battery-staple"
TEST_JWT_SECRET = "test-secret-0123456789abcdef"


def make_token(
    *,
    sub: str = TEST_ADMIN_EMAIL,
    secret: str = TEST_JWT_SECRET,
    expired: bool = False,
) -> str:
    now = int(time.time())
    claims = {
        "sub": sub,
        "iat": now - 60,
        "exp": now - 3600 if expired else now + 3600,
    }
    return jwt.encode(claims, secret, algorithm="HS256")


def employee_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "firstName": "John",
        "surname": "Smith",
        "email": "john.smith@empirehr.test",
        "employeeNumber": "emp1",
        "role": "Software Engineer",
        "salary": 50000,
    }
    payload.update(overrides)
    return payload

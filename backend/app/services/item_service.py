"""Catalog items stored one document per partition in their own container."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from app.core.config import Settings
from app.core.exceptions import NotFoundError, ServiceUnavailableError, ValidationError
from app.models.item import Item, ItemCreate, ItemPage, ItemUpdate
from app.services.cosmos_store import CosmosStore, strip_system_fields, utc_now
from app.services.database import cosmos_database
from app.services.query import clamp_limit, clamp_page, order_by_clause

logger = logging.getLogger(__name__)

ITEM_PARTITION_KEY_PATH = "/id"


class ItemStore(CosmosStore):
    async def insert(self, doc: dict[str, Any]) -> dict[str, Any]:
        return strip_system_fields(await self.container.create_item(body=doc))

    async def get(self, item_id: str) -> dict[str, Any] | None:
        return await self._read(item_id)

    async def update(self, item_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        return await self._patch(item_id, changes)

    async def delete(self, item_id: str) -> bool:
        return await self._delete(item_id)

    async def search(self, q: str | None, offset: int, limit: int) -> tuple[list[dict[str, Any]], int]:
        where = ""
        params: list[dict[str, Any]] = []
        if q:
            where = "WHERE (CONTAINS(c.name, @q, true) OR CONTAINS(c.description, @q, true))"
            params.append({"name": "@q", "value": q})

        total = await self._scalar(f"SELECT VALUE COUNT(1) FROM c {where}", params)
        docs = await self._query(
            f"SELECT * FROM c {where} {order_by_clause('-createdAt')} OFFSET @offset LIMIT @limit",
            [*params, {"name": "@offset", "value": offset}, {"name": "@limit", "value": limit}],
        )
        return docs, int(total or 0)


class ItemService:
    def __init__(self, store: ItemStore | None = None) -> None:
        self.store = store

    @property
    def initialized(self) -> bool:
        return self.store is not None

    async def initialize(self, settings: Settings) -> None:
        if self.store is not None:
            return

        container = await cosmos_database.container(settings.COSMOS_DB_ITEMS_CONTAINER, ITEM_PARTITION_KEY_PATH)
        if container is None:
            logger.warning("No Cosmos DB database — ItemService not initialized")
            return
        self.store = ItemStore(container)

    async def close(self) -> None:
        self.store = None

    def _require_store(self) -> ItemStore:
        if self.store is None:
            raise ServiceUnavailableError("Item store is not configured")
        return self.store

    async def create(self, data: ItemCreate) -> Item:
        store = self._require_store()
        fields = data.model_dump()
        fields["name"] = fields["name"].strip()
        if not fields["name"]:
            raise ValidationError.for_field("name", "name is required")

        now = utc_now()
        created = await store.insert({"id": uuid.uuid4().hex, **fields, "createdAt": now, "updatedAt": now})
        return Item.model_validate(created)

    async def get(self, item_id: str) -> Item:
        doc = await self._require_store().get(item_id)
        if doc is None:
            raise NotFoundError("Item", item_id)
        return Item.model_validate(doc)

    async def update(self, item_id: str, data: ItemUpdate) -> Item:
        store = self._require_store()
        changes = data.model_dump(exclude_unset=True)
        if "name" in changes:
            changes["name"] = (changes["name"] or "").strip()
            if not changes["name"]:
                raise ValidationError.for_field("name", "name is required")
        for field, default in (("description", ""), ("price", 0), ("tags", [])):
            if field in changes and changes[field] is None:
                changes[field] = default

        changes["updatedAt"] = utc_now()
        updated = await store.update(item_id, changes)
        if updated is None:
            raise NotFoundError("Item", item_id)
        return Item.model_validate(updated)

    async def delete(self, item_id: str) -> None:
        if not await self._require_store().delete(item_id):
            raise NotFoundError("Item", item_id)

    async def list(self, q: str | None = None, page: int | None = None, limit: int | None = None) -> ItemPage:
        store = self._require_store()
        page = clamp_page(page)
        limit = clamp_limit(limit)
        docs, total = await store.search((q or "").strip() or None, (page - 1) * limit, limit)
        return ItemPage(data=[Item.model_validate(doc) for doc in docs], total=total, page=page, limit=limit)


item_service = ItemService()

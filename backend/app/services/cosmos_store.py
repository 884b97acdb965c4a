"""Thin async helpers over a Cosmos DB container."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from azure.cosmos.exceptions import CosmosResourceNotFoundError

logger = logging.getLogger(__name__)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def strip_system_fields(doc: dict[str, Any]) -> dict[str, Any]:
    """Drop Cosmos bookkeeping properties (_rid, _etag, _ts, ...)."""
    return {k: v for k, v in doc.items() if not k.startswith("_")}


class CosmosStore:
    """Base for stores bound to one container.

    ``partition_value`` is set when every document lives in one logical
    partition (queries then stay in that partition); otherwise the
    document id is its own partition key.
    """

    def __init__(self, container: Any, partition_value: str | None = None) -> None:
        self.container = container
        self.partition_value = partition_value

    def _partition_for(self, doc_id: str) -> str:
        return self.partition_value if self.partition_value is not None else doc_id

    def _query_kwargs(self) -> dict[str, Any]:
        if self.partition_value is not None:
            return {"partition_key": self.partition_value}
        return {"enable_cross_partition_query": True}

    async def _query(self, query: str, parameters: list[dict[str, Any]] | None = None) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        async for item in self.container.query_items(
            query=query,
            parameters=parameters or [],
            **self._query_kwargs(),
        ):
            items.append(strip_system_fields(item) if isinstance(item, dict) else item)
        return items

    async def _scalar(self, query: str, parameters: list[dict[str, Any]] | None = None) -> Any:
        async for value in self.container.query_items(
            query=query,
            parameters=parameters or [],
            **self._query_kwargs(),
        ):
            return value
        return None

    async def _read(self, doc_id: str) -> dict[str, Any] | None:
        try:
            item = await self.container.read_item(item=doc_id, partition_key=self._partition_for(doc_id))
        except CosmosResourceNotFoundError:
            return None
        return strip_system_fields(item)

    async def _delete(self, doc_id: str) -> bool:
        try:
            await self.container.delete_item(item=doc_id, partition_key=self._partition_for(doc_id))
        except CosmosResourceNotFoundError:
            return False
        return True

    async def _patch(self, doc_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        operations = [{"op": "set", "path": f"/{field}", "value": value} for field, value in changes.items()]
        try:
            item = await self.container.patch_item(
                item=doc_id,
                partition_key=self._partition_for(doc_id),
                patch_operations=operations,
            )
        except CosmosResourceNotFoundError:
            return None
        return strip_system_fields(item)

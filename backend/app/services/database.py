"""Cosmos DB client lifecycle and container provisioning."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from azure.cosmos import PartitionKey
from azure.cosmos.aio import CosmosClient

from app.core.config import Settings

logger = logging.getLogger(__name__)


class CosmosDatabase:
    def __init__(self) -> None:
        self.client: CosmosClient | None = None
        self.database: Any = None
        self.initialized: bool = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.COSMOS_DB_ENDPOINT or not settings.COSMOS_DB_KEY:
            logger.warning("Cosmos DB credentials missing — database not initialized")
            return

        self.client = CosmosClient(settings.COSMOS_DB_ENDPOINT, settings.COSMOS_DB_KEY)
        self.database = await self.client.create_database_if_not_exists(id=settings.COSMOS_DB_DATABASE)
        self.initialized = True
        logger.info("Connected to Cosmos DB (database=%s)", settings.COSMOS_DB_DATABASE)

    async def container(
        self,
        name: str,
        partition_key_path: str,
        unique_key_paths: Sequence[str] = (),
    ) -> Any:
        """Return the named container, creating it with the given keys if missing.

        Unique keys only apply when the container is created; an existing
        container keeps whatever policy it was created with.
        """
        if not self.database:
            return None

        kwargs: dict[str, Any] = {}
        if unique_key_paths:
            kwargs["unique_key_policy"] = {"uniqueKeys": [{"paths": [path]} for path in unique_key_paths]}

        container = await self.database.create_container_if_not_exists(
            id=name,
            partition_key=PartitionKey(path=partition_key_path),
            **kwargs,
        )
        logger.info("Container ready: %s (partition=%s)", name, partition_key_path)
        return container

    async def check_connection(self) -> bool:
        if not self.database:
            return False
        try:
            await self.database.read()
            return True
        except Exception:
            logger.exception("Cosmos DB connection check failed")
            return False

    async def close(self) -> None:
        if self.client:
            await self.client.close()
            self.client = None
            self.database = None
            self.initialized = False


cosmos_database = CosmosDatabase()

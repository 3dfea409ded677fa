from __future__ import annotations

from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from household_ledger.configs.settings import Settings
from household_ledger.configs.logging_config import get_logger
from household_ledger.repositories.scoping import owner_filter

log = get_logger(__name__)


class CatalogRepository:
    """Categories and vendors share one shape: owned, typed, ordered, soft-disabled."""

    def __init__(self, db: AsyncIOMotorDatabase, settings: Settings, collection: str):
        self._db = db
        self._settings = settings
        self._name = collection
        self._col = db[collection]

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("user_id", 1), ("is_active", 1), ("sort_order", 1)])

    async def list_active(self, *, owner_id: str, type_: str | None = None) -> list[dict[str, Any]]:
        q: dict[str, Any] = {**owner_filter({owner_id}), "is_active": True}
        if type_:
            q["type"] = type_
        log.info("repo.%s.list_active owner=%s type=%s", self._name, owner_id, type_)
        cursor = self._col.find(q).sort([("sort_order", 1)])
        return await cursor.to_list(length=None)

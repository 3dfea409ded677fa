from __future__ import annotations

from typing import AbstractSet, Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from household_ledger.configs.settings import Settings
from household_ledger.configs.logging_config import get_logger
from household_ledger.errors import NotFoundError
from household_ledger.repositories.scoping import id_clause, owner_filter

log = get_logger(__name__)


class TransactionRepository:
    def __init__(self, db: AsyncIOMotorDatabase, settings: Settings):
        self._db = db
        self._settings = settings
        self._col = db["transactions"]

    async def ensure_indexes(self) -> None:
        log.info("repo.transaction.ensure_indexes start")
        await self._col.create_index([("user_id", 1), ("transaction_date", -1)])
        await self._col.create_index([("user_id", 1), ("type", 1), ("transaction_date", -1)])
        await self._col.create_index([("user_id", 1), ("category_id", 1)])
        log.info("repo.transaction.ensure_indexes done")

    async def insert(self, doc: dict[str, Any]) -> str:
        log.info(
            "repo.transaction.insert user_id=%s type=%s",
            doc.get("user_id"),
            doc.get("type"),
        )
        res = await self._col.insert_one(doc)
        return str(res.inserted_id)

    async def list(
        self,
        *,
        owner_ids: AbstractSet[str],
        query: dict[str, Any],
        skip: int,
        limit: int,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List live transactions.

        `owner_ids` must come from the permission layer; an empty set lists
        every member's transactions (see `owner_filter`).
        """
        q = {**query, **owner_filter(owner_ids), "deleted_at": None}
        log.info(
            "repo.transaction.list owners=%s skip=%s limit=%s query_keys=%s",
            sorted(owner_ids) or "*",
            skip,
            limit,
            sorted(list(query.keys())),
        )
        cursor = self._col.find(q).sort([("transaction_date", -1)]).skip(skip).limit(limit)
        items = await cursor.to_list(length=limit)
        total = await self._col.count_documents(q)
        return items, total

    def _owned(self, owner_id: str, transaction_id: str) -> dict[str, Any]:
        return {**id_clause(transaction_id), **owner_filter({owner_id}), "deleted_at": None}

    async def get_owned(self, *, owner_id: str, transaction_id: str) -> dict[str, Any]:
        log.info("repo.transaction.get_owned owner=%s id=%s", owner_id, transaction_id)
        doc = await self._col.find_one(self._owned(owner_id, transaction_id))
        if not doc:
            log.info("repo.transaction.get_owned not_found owner=%s id=%s", owner_id, transaction_id)
            raise NotFoundError("transaction not found")
        return doc

    async def update_owned(
        self,
        *,
        owner_id: str,
        transaction_id: str,
        updates: dict[str, Any],
    ) -> dict[str, Any]:
        log.info(
            "repo.transaction.update_owned owner=%s id=%s keys=%s",
            owner_id,
            transaction_id,
            sorted(list(updates.keys())),
        )
        doc = await self._col.find_one_and_update(
            self._owned(owner_id, transaction_id),
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            log.info("repo.transaction.update_owned not_found owner=%s id=%s", owner_id, transaction_id)
            raise NotFoundError("transaction not found")
        return doc

from __future__ import annotations

from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from household_ledger.configs.settings import Settings
from household_ledger.configs.logging_config import get_logger
from household_ledger.repositories.scoping import id_clause
from household_ledger.utils.time_utils import utc_now

log = get_logger(__name__)


class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase, settings: Settings):
        self._db = db
        self._settings = settings
        self._col = db["users"]

    async def list_members(self) -> list[dict[str, Any]]:
        log.info("repo.user.list_members")
        cursor = self._col.find({}, projection={"_id": 1, "name": 1, "email": 1}).sort([("name", 1)])
        return await cursor.to_list(length=None)

    async def touch_last_login(self, user_id: str) -> bool:
        log.info("repo.user.touch_last_login user_id=%s", user_id)
        res = await self._col.update_one(id_clause(user_id), {"$set": {"last_login": utc_now()}})
        if res.matched_count == 0:
            log.warning("repo.user.touch_last_login not_found user_id=%s", user_id)
            return False
        return True

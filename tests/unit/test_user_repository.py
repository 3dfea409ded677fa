from __future__ import annotations

import asyncio
import logging
from types import SimpleNamespace

from bson import ObjectId

from household_ledger.configs.settings import Settings
from household_ledger.repositories.scoping import id_clause
from household_ledger.repositories.user_repository import UserRepository


class FakeUsersCollection:
    def __init__(self, matched: int):
        self.matched = matched
        self.calls: list[tuple[dict, dict]] = []

    async def update_one(self, flt, update):
        self.calls.append((flt, update))
        return SimpleNamespace(matched_count=self.matched)


def test_id_clause_matches_both_representations_of_object_ids() -> None:
    oid = ObjectId()
    assert id_clause(str(oid)) == {"_id": {"$in": [oid, str(oid)]}}
    assert id_clause("clx-user-1") == {"_id": "clx-user-1"}


def test_touch_last_login_uses_id_clause() -> None:
    col = FakeUsersCollection(matched=1)
    repo = UserRepository({"users": col}, Settings())
    oid = ObjectId()

    assert asyncio.run(repo.touch_last_login(str(oid))) is True
    flt, update = col.calls[0]
    assert flt == id_clause(str(oid))
    assert "last_login" in update["$set"]


def test_touch_last_login_reports_unknown_user(caplog) -> None:
    repo = UserRepository({"users": FakeUsersCollection(matched=0)}, Settings())
    with caplog.at_level(logging.WARNING):
        assert asyncio.run(repo.touch_last_login("ghost")) is False
    assert "not_found" in caplog.text

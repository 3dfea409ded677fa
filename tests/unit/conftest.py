from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from household_ledger.auth.dependencies import get_principal
from household_ledger.auth.models import Principal
from household_ledger.errors import NotFoundError
from household_ledger.main import create_app
from household_ledger.repositories.scoping import owner_filter


class FakeTransactionRepo:
    def __init__(self, docs: list[dict[str, Any]] | None = None):
        self.docs = list(docs or [])
        self.list_calls: list[frozenset[str]] = []
        self.inserted: list[dict[str, Any]] = []

    async def list(self, *, owner_ids, query, skip, limit):
        self.list_calls.append(frozenset(owner_ids))
        clause = owner_filter(owner_ids)
        wanted = clause.get("user_id")
        if isinstance(wanted, dict):
            wanted = set(wanted["$in"])
        elif wanted is not None:
            wanted = {wanted}
        rows = [
            dict(d)
            for d in self.docs
            if d.get("deleted_at") is None and (wanted is None or d["user_id"] in wanted)
        ]
        if "type" in query:
            rows = [r for r in rows if r["type"] == query["type"]]
        return rows[skip : skip + limit], len(rows)

    async def insert(self, doc):
        self.inserted.append(doc)
        return f"tx-{len(self.inserted)}"

    def _find(self, owner_id, transaction_id):
        for d in self.docs:
            if d["id"] == transaction_id and d["user_id"] == owner_id and d.get("deleted_at") is None:
                return d
        raise NotFoundError("transaction not found")

    async def get_owned(self, *, owner_id, transaction_id):
        return dict(self._find(owner_id, transaction_id))

    async def update_owned(self, *, owner_id, transaction_id, updates):
        doc = self._find(owner_id, transaction_id)
        doc.update(updates)
        return dict(doc)


class FakeCatalogRepo:
    def __init__(self, docs: list[dict[str, Any]] | None = None):
        self.docs = list(docs or [])
        self.owner_ids: list[str] = []

    async def list_active(self, *, owner_id, type_=None):
        self.owner_ids.append(owner_id)
        return [
            dict(d)
            for d in self.docs
            if d["user_id"] == owner_id and d.get("is_active", True) and (not type_ or d["type"] == type_)
        ]


class FakeUserRepo:
    def __init__(self, docs):
        self.docs = docs
        self.touched: list[str] = []

    async def list_members(self):
        return sorted(self.docs, key=lambda d: d.get("name") or "")

    async def touch_last_login(self, user_id):
        self.touched.append(user_id)
        return True


class FakeAudit:
    def __init__(self):
        self.events: list[dict[str, Any]] = []

    def record(self, **event):
        self.events.append(event)


def _tx(tx_id: str, user_id: str, type_: str = "EXPENSE", deleted: bool = False) -> dict[str, Any]:
    when = datetime(2024, 5, 1, tzinfo=timezone.utc)
    return {
        "id": tx_id,
        "user_id": user_id,
        "type": type_,
        "amount": 1200.0,
        "category_id": "cat-food",
        "transaction_date": when,
        "created_at": when,
        "updated_at": when,
        "deleted_at": when if deleted else None,
    }




@pytest.fixture
def repos():
    return {
        "transaction_repo": FakeTransactionRepo(
            [
                _tx("t1", "u1"),
                _tx("t2", "u2"),
                _tx("t3", "u2", type_="INCOME"),
                _tx("t4", "u2", deleted=True),
            ]
        ),
        "category_repo": FakeCatalogRepo(
            [
                {"id": "c1", "user_id": "u1", "name": "Food", "type": "EXPENSE", "is_active": True},
                {"id": "c2", "user_id": "u2", "name": "Salary", "type": "INCOME", "is_active": True},
                {"id": "c3", "user_id": "u2", "name": "Old", "type": "EXPENSE", "is_active": False},
            ]
        ),
        "vendor_repo": FakeCatalogRepo(
            [{"id": "v1", "user_id": "u2", "name": "Corner Shop", "type": "STORE", "is_active": True}]
        ),
        "user_repo": FakeUserRepo(
            [
                {"_id": "u2", "name": "Bob", "email": "bob@example.com"},
                {"_id": "u1", "name": "Alice", "email": "alice@example.com"},
            ]
        ),
        "audit": FakeAudit(),
    }


@pytest.fixture
def app(repos):
    app = create_app()
    for name, repo in repos.items():
        setattr(app.state, name, repo)
    return app


@pytest.fixture
def client_for(app):
    """TestClient acting as the given principal; None uses the real token check."""

    def _make(principal: Principal | None) -> TestClient:
        if principal is not None:
            app.dependency_overrides[get_principal] = lambda: principal
        else:
            app.dependency_overrides.pop(get_principal, None)
        return TestClient(app)

    return _make

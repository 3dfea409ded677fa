from __future__ import annotations

from math import ceil
from typing import Any, Optional

from household_ledger.access.permissions import resolve_accessible_ids, resolve_target_user
from household_ledger.auth.models import Principal
from household_ledger.configs.settings import get_settings
from household_ledger.domain.entities.transaction import (
    TransactionCreateRequest,
    TransactionListQuery,
    TransactionUpdateRequest,
)
from household_ledger.repositories.scoping import oid_to_str
from household_ledger.repositories.transaction_repository import TransactionRepository
from household_ledger.services.audit import AuditLogger
from household_ledger.utils.time_utils import dt_to_iso, utc_now
from household_ledger.configs.logging_config import get_logger

log = get_logger(__name__)


def build_query(q: TransactionListQuery) -> dict[str, Any]:
    """Filter clauses for a transaction listing, owner scoping excluded."""
    query: dict[str, Any] = {}
    # A date range applies only when both ends are given.
    if q.start_date and q.end_date:
        query["transaction_date"] = {"$gte": q.start_date, "$lte": q.end_date}
    if q.type:
        query["type"] = q.type
    if q.category_id:
        query["category_id"] = q.category_id
    return query


_FIELD_MAP = {
    "type": "type",
    "amount": "amount",
    "categoryId": "category_id",
    "subcategoryId": "subcategory_id",
    "paymentMethodId": "payment_method_id",
    "transactionDate": "transaction_date",
    "description": "description",
    "vendor": "vendor",
    "isRecurring": "is_recurring",
    "recurringPattern": "recurring_pattern",
}


def _page_window(page: int, limit: int) -> tuple[int, int]:
    settings = get_settings()
    limit = max(min(limit, settings.max_page_size), 1)
    page = max(page, 1)
    return (page - 1) * limit, limit


def _to_out(doc: dict[str, Any]) -> dict[str, Any]:
    doc = oid_to_str(doc)
    for key in ("transaction_date", "created_at", "updated_at"):
        doc[key] = dt_to_iso(doc.get(key))
    doc.pop("deleted_at", None)
    return doc


class TransactionService:
    def __init__(self, repo: TransactionRepository, audit: AuditLogger):
        self._repo = repo
        self._audit = audit

    async def list_transactions(
        self, principal: Principal, view_user_id: Optional[str], q: TransactionListQuery
    ) -> dict[str, Any]:
        target_id = resolve_target_user(principal.role, principal.user_id, view_user_id)
        log.info(
            "svc.transaction.list start user_id=%s target=%s page=%s limit=%s",
            principal.user_id,
            target_id,
            q.page,
            q.limit,
        )
        return await self._list({target_id}, q)

    async def list_all(
        self, principal: Principal, view_user_id: Optional[str], q: TransactionListQuery
    ) -> dict[str, Any]:
        owner_ids = resolve_accessible_ids(principal.role, principal.user_id, view_user_id)
        log.info(
            "svc.transaction.list_all start user_id=%s owners=%s",
            principal.user_id,
            sorted(owner_ids) or "*",
        )
        return await self._list(owner_ids, q)

    async def _list(self, owner_ids, q: TransactionListQuery) -> dict[str, Any]:
        skip, limit = _page_window(q.page, q.limit)
        items, total = await self._repo.list(
            owner_ids=frozenset(owner_ids), query=build_query(q), skip=skip, limit=limit
        )
        out = [_to_out(it) for it in items]
        log.info("svc.transaction.list done returned=%s total=%s", len(out), total)
        return {
            "items": out,
            "pagination": {
                "total": total,
                "page": max(q.page, 1),
                "limit": limit,
                "totalPages": ceil(total / limit) if limit else 0,
            },
        }

    async def create_transaction(
        self,
        principal: Principal,
        req: TransactionCreateRequest,
        *,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> dict[str, Any]:
        # Writes are always owned by the caller, whoever they are viewing.
        now = utc_now()
        doc: dict[str, Any] = {
            "user_id": principal.user_id,
            "type": req.type,
            "amount": req.amount,
            "category_id": req.categoryId,
            "subcategory_id": req.subcategoryId,
            "payment_method_id": req.paymentMethodId,
            "vendor": req.vendor,
            "description": req.description,
            "transaction_date": req.transactionDate,
            "is_recurring": req.isRecurring,
            "recurring_pattern": req.recurringPattern,
            "created_at": now,
            "updated_at": now,
            "deleted_at": None,
        }
        _id = await self._repo.insert(doc)
        log.info("svc.transaction.create inserted user_id=%s id=%s", principal.user_id, _id)

        out = _to_out({**doc, "id": _id})
        self._audit.record(
            user_id=principal.user_id,
            action="CREATE",
            entity_type="Transaction",
            entity_id=_id,
            after=out,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        return out

    # Single-record reads and writes are scoped to the caller's own rows.
    # Another member's id yields the same 404 as a missing one.

    async def get_transaction(self, principal: Principal, transaction_id: str) -> dict[str, Any]:
        doc = await self._repo.get_owned(owner_id=principal.user_id, transaction_id=transaction_id)
        return _to_out(doc)

    async def update_transaction(
        self,
        principal: Principal,
        transaction_id: str,
        req: TransactionUpdateRequest,
        *,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> dict[str, Any]:
        before = _to_out(await self._repo.get_owned(owner_id=principal.user_id, transaction_id=transaction_id))

        sent = req.model_dump(exclude_unset=True, exclude_none=True)
        updates: dict[str, Any] = {_FIELD_MAP[k]: v for k, v in sent.items()}
        updates["updated_at"] = utc_now()

        doc = await self._repo.update_owned(
            owner_id=principal.user_id, transaction_id=transaction_id, updates=updates
        )
        after = _to_out(doc)
        log.info(
            "svc.transaction.update user_id=%s id=%s keys=%s",
            principal.user_id,
            transaction_id,
            sorted(sent.keys()),
        )
        self._audit.record(
            user_id=principal.user_id,
            action="UPDATE",
            entity_type="Transaction",
            entity_id=after.get("id", transaction_id),
            before=before,
            after=after,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        return after

    async def delete_transaction(
        self,
        principal: Principal,
        transaction_id: str,
        *,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        before = _to_out(await self._repo.get_owned(owner_id=principal.user_id, transaction_id=transaction_id))
        now = utc_now()
        await self._repo.update_owned(
            owner_id=principal.user_id,
            transaction_id=transaction_id,
            updates={"deleted_at": now, "updated_at": now},
        )
        log.info("svc.transaction.delete user_id=%s id=%s", principal.user_id, transaction_id)
        self._audit.record(
            user_id=principal.user_id,
            action="DELETE",
            entity_type="Transaction",
            entity_id=before.get("id", transaction_id),
            before=before,
            ip_address=ip_address,
            user_agent=user_agent,
        )

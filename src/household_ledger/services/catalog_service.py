from __future__ import annotations

from typing import Any, Optional

from household_ledger.access.permissions import resolve_target_user
from household_ledger.auth.models import Principal
from household_ledger.domain.entities.catalog import Member
from household_ledger.repositories.catalog_repository import CatalogRepository
from household_ledger.repositories.scoping import oid_to_str
from household_ledger.repositories.user_repository import UserRepository
from household_ledger.configs.logging_config import get_logger

log = get_logger(__name__)


class CatalogService:
    """Read side of categories, vendors and household members."""

    def __init__(
        self,
        categories: CatalogRepository,
        vendors: CatalogRepository,
        users: UserRepository,
    ):
        self._categories = categories
        self._vendors = vendors
        self._users = users

    async def list_categories(
        self, principal: Principal, view_user_id: Optional[str], type_: Optional[str] = None
    ) -> list[dict[str, Any]]:
        target_id = resolve_target_user(principal.role, principal.user_id, view_user_id)
        docs = await self._categories.list_active(owner_id=target_id, type_=type_)
        log.info("svc.category.list target=%s returned=%s", target_id, len(docs))
        return [oid_to_str(d) for d in docs]

    async def list_vendors(
        self, principal: Principal, view_user_id: Optional[str], type_: Optional[str] = None
    ) -> list[dict[str, Any]]:
        target_id = resolve_target_user(principal.role, principal.user_id, view_user_id)
        docs = await self._vendors.list_active(owner_id=target_id, type_=type_)
        log.info("svc.vendor.list target=%s returned=%s", target_id, len(docs))
        return [oid_to_str(d) for d in docs]

    async def list_members(self) -> list[dict[str, Any]]:
        docs = await self._users.list_members()
        return [
            Member(id=str(d["_id"]), name=d.get("name"), email=d.get("email")).model_dump() for d in docs
        ]

    async def touch_last_login(self, principal: Principal) -> bool:
        return await self._users.touch_last_login(principal.user_id)

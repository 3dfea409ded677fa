from __future__ import annotations

from fastapi import APIRouter, Depends

from household_ledger.auth.dependencies import get_principal
from household_ledger.auth.models import Principal
from household_ledger.routers.deps import catalog_service
from household_ledger.services.catalog_service import CatalogService
from household_ledger.utils.response import success

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("")
async def list_users(
    principal: Principal = Depends(get_principal),
    svc: CatalogService = Depends(catalog_service),
) -> dict:
    # Every member may see who is in the household; the selector itself is
    # hidden client-side for roles that cannot switch.
    return success(await svc.list_members(), message="Request successful")


@router.post("/update-last-login")
async def update_last_login(
    principal: Principal = Depends(get_principal),
    svc: CatalogService = Depends(catalog_service),
) -> dict:
    updated = await svc.touch_last_login(principal)
    return success({"ok": updated})

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from household_ledger.auth.dependencies import get_principal
from household_ledger.auth.models import Principal
from household_ledger.domain.entities.catalog import CategoryType, VendorType
from household_ledger.routers.deps import catalog_service
from household_ledger.services.catalog_service import CatalogService
from household_ledger.utils.response import success

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/categories")
async def list_categories(
    view_user_id: Optional[str] = Query(default=None, alias="viewUserId"),
    type: Optional[CategoryType] = None,
    principal: Principal = Depends(get_principal),
    svc: CatalogService = Depends(catalog_service),
) -> dict:
    data = await svc.list_categories(principal, view_user_id, type)
    return success(data, message="Request successful")


@router.get("/vendors")
async def list_vendors(
    view_user_id: Optional[str] = Query(default=None, alias="viewUserId"),
    type: Optional[VendorType] = None,
    principal: Principal = Depends(get_principal),
    svc: CatalogService = Depends(catalog_service),
) -> dict:
    data = await svc.list_vendors(principal, view_user_id, type)
    return success(data, message="Request successful")

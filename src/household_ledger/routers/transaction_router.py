from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from household_ledger.auth.dependencies import get_principal
from household_ledger.auth.models import Principal
from household_ledger.configs.settings import get_settings
from household_ledger.domain.entities.transaction import (
    TransactionCreateRequest,
    TransactionListQuery,
    TransactionType,
    TransactionUpdateRequest,
)
from household_ledger.routers.deps import transaction_service
from household_ledger.services.transaction_service import TransactionService
from household_ledger.utils.response import success
from household_ledger.configs.logging_config import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


def list_query(
    startDate: Optional[datetime] = None,
    endDate: Optional[datetime] = None,
    type: Optional[TransactionType] = None,
    categoryId: Optional[str] = None,
    page: int = 1,
    limit: Optional[int] = None,
) -> TransactionListQuery:
    return TransactionListQuery(
        start_date=startDate,
        end_date=endDate,
        type=type,
        category_id=categoryId,
        page=page,
        limit=limit or get_settings().default_page_size,
    )


@router.get("")
async def list_transactions(
    view_user_id: Optional[str] = Query(default=None, alias="viewUserId"),
    q: TransactionListQuery = Depends(list_query),
    principal: Principal = Depends(get_principal),
    svc: TransactionService = Depends(transaction_service),
) -> dict:
    log.info(
        "transaction.list.start user_id=%s view_user_id=%s page=%s",
        principal.user_id,
        view_user_id,
        q.page,
    )
    data = await svc.list_transactions(principal, view_user_id, q)
    return success(data["items"], message="Request successful", pagination=data["pagination"])


@router.get("/all")
async def list_all_transactions(
    view_user_id: Optional[str] = Query(default=None, alias="viewUserId"),
    q: TransactionListQuery = Depends(list_query),
    principal: Principal = Depends(get_principal),
    svc: TransactionService = Depends(transaction_service),
) -> dict:
    log.info("transaction.list_all.start user_id=%s view_user_id=%s", principal.user_id, view_user_id)
    data = await svc.list_all(principal, view_user_id, q)
    return success(data["items"], message="Request successful", pagination=data["pagination"])


@router.post("")
async def create_transaction(
    request: Request,
    body: TransactionCreateRequest,
    principal: Principal = Depends(get_principal),
    svc: TransactionService = Depends(transaction_service),
) -> dict:
    log.info("transaction.create.start user_id=%s type=%s", principal.user_id, body.type)
    data = await svc.create_transaction(
        principal,
        body,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    log.info("transaction.create.done user_id=%s id=%s", principal.user_id, data.get("id"))
    return success(data, message="Transaction created")


@router.get("/{transaction_id}")
async def get_transaction(
    transaction_id: str,
    principal: Principal = Depends(get_principal),
    svc: TransactionService = Depends(transaction_service),
) -> dict:
    data = await svc.get_transaction(principal, transaction_id)
    return success(data, message="Request successful")


@router.put("/{transaction_id}")
async def update_transaction(
    request: Request,
    transaction_id: str,
    body: TransactionUpdateRequest,
    principal: Principal = Depends(get_principal),
    svc: TransactionService = Depends(transaction_service),
) -> dict:
    log.info("transaction.update.start user_id=%s id=%s", principal.user_id, transaction_id)
    data = await svc.update_transaction(
        principal,
        transaction_id,
        body,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return success(data, message="Transaction updated")


@router.delete("/{transaction_id}")
async def delete_transaction(
    request: Request,
    transaction_id: str,
    principal: Principal = Depends(get_principal),
    svc: TransactionService = Depends(transaction_service),
) -> dict:
    log.info("transaction.delete.start user_id=%s id=%s", principal.user_id, transaction_id)
    await svc.delete_transaction(
        principal,
        transaction_id,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return success({"id": transaction_id}, message="Transaction deleted successfully")

from __future__ import annotations

from fastapi import Request

from household_ledger.services.catalog_service import CatalogService
from household_ledger.services.transaction_service import TransactionService


def transaction_service(request: Request) -> TransactionService:
    state = request.app.state
    return TransactionService(repo=state.transaction_repo, audit=state.audit)


def catalog_service(request: Request) -> CatalogService:
    state = request.app.state
    return CatalogService(
        categories=state.category_repo,
        vendors=state.vendor_repo,
        users=state.user_repo,
    )

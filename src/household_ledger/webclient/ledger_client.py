from __future__ import annotations

from typing import Any, Optional

import httpx

from household_ledger.errors import AccessDenied, AppError, AuthError
from household_ledger.viewing.context import ViewingContext
from household_ledger.configs.logging_config import get_logger

log = get_logger(__name__)


class LedgerClient:
    """
    Async client for the ledger API, bound to one session's viewing context.

    Listing calls carry the context's `viewUserId`. The server resolves and
    enforces access; this class only keeps requests consistent with what
    the UI shows.
    """

    def __init__(
        self,
        base_url: str,
        session_token: str,
        viewing: ViewingContext,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.viewing = viewing
        self._token = session_token
        self.session = client or httpx.AsyncClient(base_url=base_url)

    async def aclose(self) -> None:
        await self.session.aclose()

    async def request(self, method: str, url: str, **kwargs) -> dict[str, Any]:
        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"Bearer {self._token}"
        headers.setdefault("Cache-Control", "no-cache")

        resp = await self.session.request(method, url, headers=headers, **kwargs)
        return _unwrap(resp)

    def _view_params(self, **params: Any) -> dict[str, Any]:
        out = {k: v for k, v in params.items() if v is not None}
        view_user_id = self.viewing.view_user_id
        if view_user_id:
            out["viewUserId"] = view_user_id
        return out

    async def list_transactions(
        self,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        type_: Optional[str] = None,
        category_id: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> dict[str, Any]:
        params = self._view_params(
            startDate=start_date,
            endDate=end_date,
            type=type_,
            categoryId=category_id,
            page=page,
            limit=limit,
        )
        return await self.request("GET", "/api/transactions", params=params)

    async def list_categories(self, type_: Optional[str] = None) -> dict[str, Any]:
        return await self.request("GET", "/api/categories", params=self._view_params(type=type_))

    async def list_vendors(self, type_: Optional[str] = None) -> dict[str, Any]:
        return await self.request("GET", "/api/vendors", params=self._view_params(type=type_))

    async def list_users(self) -> dict[str, Any]:
        return await self.request("GET", "/api/users")

    async def get_transaction(self, transaction_id: str) -> dict[str, Any]:
        return await self.request("GET", f"/api/transactions/{transaction_id}")

    def _require_mutable(self, action: str) -> None:
        # Read-only while another member's data is on screen.
        if not self.viewing.can_mutate:
            log.info("client.%s.blocked target=%s", action, self.viewing.target_user_id)
            raise AccessDenied()

    async def create_transaction(self, data: dict[str, Any]) -> dict[str, Any]:
        self._require_mutable("create_transaction")
        return await self.request("POST", "/api/transactions", json=data)

    async def update_transaction(self, transaction_id: str, data: dict[str, Any]) -> dict[str, Any]:
        self._require_mutable("update_transaction")
        return await self.request("PUT", f"/api/transactions/{transaction_id}", json=data)

    async def delete_transaction(self, transaction_id: str) -> dict[str, Any]:
        self._require_mutable("delete_transaction")
        return await self.request("DELETE", f"/api/transactions/{transaction_id}")


def _unwrap(resp: httpx.Response) -> dict[str, Any]:
    if resp.status_code == 401:
        raise AuthError(_message(resp) or "unauthorized")
    if resp.status_code == 403:
        raise AccessDenied()
    if resp.is_error:
        raise AppError(_message(resp) or f"request failed with status {resp.status_code}", http_status=resp.status_code)
    return resp.json()


def _message(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("error") or body.get("message")
    return None

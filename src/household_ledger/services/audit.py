from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from household_ledger.configs.logging_config import get_logger
from household_ledger.utils.time_utils import now_ms

log = get_logger(__name__)


class AuditLogger:
    """
    Fire-and-forget audit sink backed by a Redis stream.

    `record` schedules the write and returns immediately; a failed write is
    logged and dropped.
    """

    def __init__(self, redis_client: Optional[redis.Redis], stream: str):
        self._redis = redis_client
        self._stream = stream
        self._pending: set[asyncio.Task] = set()

    def record(
        self,
        *,
        user_id: str,
        action: str,
        entity_type: str,
        entity_id: str,
        before: Any = None,
        after: Any = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        fields = {
            "user_id": user_id,
            "action": action,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "before": json.dumps(before, default=str) if before is not None else "",
            "after": json.dumps(after, default=str) if after is not None else "",
            "ip_address": ip_address or "",
            "user_agent": user_agent or "",
            "ts": str(now_ms()),
        }
        task = asyncio.create_task(self._write(fields))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, fields: dict[str, str]) -> None:
        if self._redis is None:
            log.warning("audit.skip no_redis action=%s entity_id=%s", fields["action"], fields["entity_id"])
            return
        try:
            await self._redis.xadd(self._stream, fields)
            log.info(
                "audit.recorded stream=%s action=%s entity_type=%s entity_id=%s",
                self._stream,
                fields["action"],
                fields["entity_type"],
                fields["entity_id"],
            )
        except RedisError as exc:
            log.error("audit.write_failed action=%s error=%s", fields["action"], str(exc))

    async def drain(self) -> None:
        """Wait for scheduled writes; used at shutdown."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

"""In-process settlement lease (single worker, tests, or Redis unavailable)."""

import asyncio
import time
import uuid


class InMemorySettlementLease:
    """ISettlementLease backed by a dict of key -> (token, expiry).

    Only serializes callers inside one process.
    """

    def __init__(self) -> None:
        self._holders: dict[str, tuple[str, float]] = {}
        self._lock = asyncio.Lock()

    async def acquire(self, key: str, ttl_seconds: int) -> str | None:
        now = time.monotonic()
        async with self._lock:
            holder = self._holders.get(key)
            if holder is not None and holder[1] > now:
                return None
            token = uuid.uuid4().hex
            self._holders[key] = (token, now + ttl_seconds)
            return token

    async def release(self, key: str, token: str) -> None:
        async with self._lock:
            holder = self._holders.get(key)
            if holder is not None and holder[0] == token:
                del self._holders[key]

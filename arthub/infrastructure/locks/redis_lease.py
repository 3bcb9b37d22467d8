"""Redis-backed settlement lease (SET NX PX with owner token).

Shared by every API worker so two processes never drive the same
fingerprint at once. Falls back to an in-process lease while Redis is
unreachable.
"""

from __future__ import annotations

import logging
import uuid

import redis.asyncio as redis

from arthub.core.config import Settings
from arthub.core.constants import LOCK_KEY_SEP, LOCK_PREFIX_SETTLEMENT
from arthub.infrastructure.locks.memory_lease import InMemorySettlementLease

logger = logging.getLogger(__name__)

# Delete the key only when it still holds our token.
_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


def lease_key(fingerprint: str) -> str:
    return f"{LOCK_PREFIX_SETTLEMENT}{LOCK_KEY_SEP}{fingerprint}"


class RedisSettlementLease:
    """ISettlementLease over redis.asyncio. Call connect() at startup and disconnect() at shutdown."""

    def __init__(self, settings: Settings, redis_client: redis.Redis | None = None) -> None:
        self.settings = settings
        self.redis = redis_client
        self._connected = redis_client is not None
        self._fallback = InMemorySettlementLease()

    async def connect(self) -> None:
        """Open and ping the connection. On failure, log and use the in-process fallback."""
        if self.redis is not None:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=(
                    self.settings.redis_password.get_secret_value()
                    if self.settings.redis_password
                    else None
                ),
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Redis lease connected: %s:%s", self.settings.redis_host, self.settings.redis_port
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Using in-process settlement lease.", e)
            self.redis = None
            self._connected = False

    async def disconnect(self) -> None:
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis lease disconnected")

    def is_available(self) -> bool:
        return self._connected and self.redis is not None

    async def acquire(self, key: str, ttl_seconds: int) -> str | None:
        if not self.is_available() or self.redis is None:
            return await self._fallback.acquire(key, ttl_seconds)
        token = uuid.uuid4().hex
        try:
            claimed = await self.redis.set(
                lease_key(key), token, nx=True, px=ttl_seconds * 1000
            )
        except redis.RedisError as e:
            logger.warning("Redis lease acquire failed for %s: %s; using in-process lease", key, e)
            return await self._fallback.acquire(key, ttl_seconds)
        return token if claimed else None

    async def release(self, key: str, token: str) -> None:
        await self._fallback.release(key, token)
        if not self.is_available() or self.redis is None:
            return
        try:
            await self.redis.eval(_RELEASE_SCRIPT, 1, lease_key(key), token)
        except redis.RedisError:
            logger.exception("Redis lease release failed for %s", key)

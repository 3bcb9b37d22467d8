"""Per-fingerprint settlement leases (Redis or in-process)."""

from arthub.infrastructure.locks.memory_lease import InMemorySettlementLease
from arthub.infrastructure.locks.redis_lease import RedisSettlementLease, lease_key

__all__ = ["InMemorySettlementLease", "RedisSettlementLease", "lease_key"]

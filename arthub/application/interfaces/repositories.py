"""Repository interfaces (ports) for the application layer.

Protocols define contracts; infrastructure provides SQLAlchemy
implementations and tests provide in-memory ones.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from arthub.application.dtos.sale import (
        CollectedNFTResult,
        SaleFilters,
        SaleRecordResult,
        SalesStats,
    )
    from arthub.application.dtos.settlement import CollectRequest
    from arthub.domain.entities.settlement import SettlementAttemptEntity


class ISettlementAttemptRepository(Protocol):
    """Protocol for settlement attempt persistence.

    Every write commits on its own so a recorded tx hash is durable before
    the saga waits for confirmation.
    """

    async def get_by_fingerprint(self, fingerprint: str) -> SettlementAttemptEntity | None:
        ...

    async def create(self, attempt: SettlementAttemptEntity) -> SettlementAttemptEntity:
        ...

    async def save(self, attempt: SettlementAttemptEntity) -> SettlementAttemptEntity:
        """Persist the mutable fields of an existing attempt."""
        ...

    async def list_for_reconciliation(
        self, pending_older_than_seconds: float, limit: int
    ) -> list[SettlementAttemptEntity]:
        """Attempts needing repair: minted but unpersisted, flagged, or stuck on a pending hash."""
        ...


class ISaleRepository(Protocol):
    """Protocol for sales ledger reads (reporting)."""

    async def get_by_fingerprint(self, fingerprint: str) -> SaleRecordResult | None:
        ...

    async def list_sales(self, filters: SaleFilters) -> list[SaleRecordResult]:
        """Sales matching filters, newest first."""
        ...

    async def get_stats(self, filters: SaleFilters) -> SalesStats:
        ...


class ILedgerRecorder(Protocol):
    """Protocol for writing the sale record and collected NFT exactly once."""

    async def record(
        self, attempt: SettlementAttemptEntity, request: CollectRequest
    ) -> tuple[SaleRecordResult, CollectedNFTResult]:
        """Write both rows in one transaction; return existing rows on a duplicate.

        Raises PersistenceException on any other database failure.
        """
        ...

"""Sale record repository: sales ledger reads for reporting."""

from decimal import Decimal
from typing import Any

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from arthub.application.dtos.sale import SaleFilters, SaleRecordResult, SalesStats
from arthub.infrastructure.persistence.models.sale_record import SaleRecord
from arthub.infrastructure.persistence.repositories.base import BaseRepository
from arthub.shared.utils.datetime import ensure_utc

_ZERO = Decimal("0")
_MICRO_USDC = Decimal("0.000001")


def sale_to_result(row: SaleRecord) -> SaleRecordResult:
    return SaleRecordResult(
        id=row.id,
        fingerprint=row.fingerprint,
        artwork_id=row.artwork_id,
        nft_name=row.nft_name,
        image_hash=row.image_hash,
        collection_address=row.collection_address,
        token_id=int(row.token_id),
        artist_wallet=row.artist_wallet,
        artist_name=row.artist_name,
        collector_wallet=row.collector_wallet,
        amount_usdc=row.amount_usdc,
        treasury_amount=row.treasury_amount,
        artist_amount=row.artist_amount,
        treasury_tx_hash=row.treasury_tx_hash,
        artist_tx_hash=row.artist_tx_hash,
        mint_tx_hash=row.mint_tx_hash,
        network=row.network,
        sale_type=row.sale_type,
        created_at=ensure_utc(row.created_at),
    )


def _filter_clauses(filters: SaleFilters) -> list[Any]:
    clauses: list[Any] = []
    if filters.artist_wallet:
        clauses.append(SaleRecord.artist_wallet == filters.artist_wallet.lower())
    if filters.collector_wallet:
        clauses.append(SaleRecord.collector_wallet == filters.collector_wallet.lower())
    if filters.start:
        clauses.append(SaleRecord.created_at >= ensure_utc(filters.start))
    if filters.end:
        clauses.append(SaleRecord.created_at <= ensure_utc(filters.end))
    return clauses


class SaleRepository(BaseRepository[SaleRecord]):
    """ISaleRepository over SQLAlchemy."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, SaleRecord)

    async def get_by_fingerprint(self, fingerprint: str) -> SaleRecordResult | None:
        row = await self.get_model_by_fingerprint(fingerprint)
        return sale_to_result(row) if row is not None else None

    async def list_sales(self, filters: SaleFilters) -> list[SaleRecordResult]:
        stmt = (
            select(SaleRecord)
            .where(*_filter_clauses(filters))
            .order_by(SaleRecord.created_at.desc(), SaleRecord.id)
        )
        if filters.limit:
            stmt = stmt.limit(filters.limit)
        result = await self.db.execute(stmt)
        return [sale_to_result(row) for row in result.scalars().all()]

    async def get_stats(self, filters: SaleFilters) -> SalesStats:
        stmt = select(
            func.count(SaleRecord.id),
            func.coalesce(func.sum(SaleRecord.amount_usdc), _ZERO),
            func.coalesce(func.sum(SaleRecord.artist_amount), _ZERO),
            func.coalesce(func.sum(SaleRecord.treasury_amount), _ZERO),
            func.count(distinct(SaleRecord.collector_wallet)),
        ).where(*_filter_clauses(filters))
        total, revenue, artist, treasury, collectors = (await self.db.execute(stmt)).one()
        revenue = Decimal(revenue)
        average = (revenue / total).quantize(_MICRO_USDC) if total else _ZERO
        return SalesStats(
            total_sales=total,
            total_revenue=revenue,
            total_artist_earnings=Decimal(artist),
            total_treasury_fees=Decimal(treasury),
            average_price=average,
            unique_collectors=collectors,
        )

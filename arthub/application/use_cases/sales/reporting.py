"""Sales reporting: listing, aggregate stats, and CSV export of the sales ledger."""

from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING

from arthub.application.dtos.sale import SaleFilters, SaleRecordResult, SalesStats
from arthub.domain.exceptions import ValidationException

if TYPE_CHECKING:
    from arthub.application.interfaces.repositories import ISaleRepository


SALES_DEFAULT_LIMIT = 100
SALES_MAX_LIMIT = 1000
# Export ignores the listing limit but stays bounded
EXPORT_MAX_ROWS = 10_000

CSV_COLUMNS = (
    "date",
    "artwork_id",
    "nft_name",
    "artist_wallet",
    "artist_name",
    "collector_wallet",
    "amount_usdc",
    "treasury_amount",
    "artist_amount",
    "collection_address",
    "token_id",
    "treasury_tx_hash",
    "artist_tx_hash",
    "mint_tx_hash",
    "network",
)


def _check_range(filters: SaleFilters) -> None:
    if filters.start and filters.end and filters.start > filters.end:
        raise ValidationException("start must not be after end", field="start")


def _csv_row(sale: SaleRecordResult) -> list[str]:
    return [
        sale.created_at.isoformat(),
        sale.artwork_id,
        sale.nft_name,
        sale.artist_wallet,
        sale.artist_name or "",
        sale.collector_wallet,
        f"{sale.amount_usdc:f}",
        f"{sale.treasury_amount:f}",
        f"{sale.artist_amount:f}",
        sale.collection_address,
        str(sale.token_id),
        sale.treasury_tx_hash,
        sale.artist_tx_hash,
        sale.mint_tx_hash,
        sale.network,
    ]


class SalesReportingUseCase:
    """Read-only views over the sales ledger for artists and operators."""

    def __init__(self, sale_repo: ISaleRepository) -> None:
        self.sale_repo = sale_repo

    async def list_sales(self, filters: SaleFilters) -> list[SaleRecordResult]:
        """Sales matching filters, newest first. Limit defaults to 100, capped at 1000."""
        _check_range(filters)
        limit = filters.limit or SALES_DEFAULT_LIMIT
        if limit < 1:
            raise ValidationException("limit must be positive", field="limit")
        return await self.sale_repo.list_sales(
            SaleFilters(
                artist_wallet=filters.artist_wallet,
                collector_wallet=filters.collector_wallet,
                start=filters.start,
                end=filters.end,
                limit=min(limit, SALES_MAX_LIMIT),
            )
        )

    async def get_stats(self, filters: SaleFilters) -> SalesStats:
        _check_range(filters)
        return await self.sale_repo.get_stats(filters)

    async def export_csv(self, filters: SaleFilters) -> str:
        """Render matching sales as CSV with a header row."""
        _check_range(filters)
        sales = await self.sale_repo.list_sales(
            SaleFilters(
                artist_wallet=filters.artist_wallet,
                collector_wallet=filters.collector_wallet,
                start=filters.start,
                end=filters.end,
                limit=EXPORT_MAX_ROWS,
            )
        )
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(CSV_COLUMNS)
        writer.writerows(_csv_row(sale) for sale in sales)
        return buffer.getvalue()

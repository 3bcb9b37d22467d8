"""SalesReportingUseCase: listing limits, stats passthrough, CSV export."""

import csv
import io
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from arthub.application.dtos.sale import SaleFilters, SaleRecordResult, SalesStats
from arthub.application.use_cases.sales import SalesReportingUseCase
from arthub.domain.exceptions import ValidationException


def _sale(n: int = 1) -> SaleRecordResult:
    return SaleRecordResult(
        id=f"sale{n}",
        fingerprint="f" * 64,
        artwork_id="artwork-1",
        nft_name="Sunrise, Study",
        image_hash="QmImage",
        collection_address="0x" + "b" * 40,
        token_id=1,
        artist_wallet="0x" + "a" * 40,
        artist_name=None,
        collector_wallet="0x" + "c" * 40,
        amount_usdc=Decimal("10.000000"),
        treasury_amount=Decimal("0.500000"),
        artist_amount=Decimal("9.500000"),
        treasury_tx_hash="0x1",
        artist_tx_hash="0x2",
        mint_tx_hash="0x3",
        network="base-sepolia",
        sale_type="gallery_collect",
        created_at=datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc),
    )


async def test_list_sales_applies_default_and_max_limit() -> None:
    repo = AsyncMock()
    repo.list_sales.return_value = [_sale()]
    use_case = SalesReportingUseCase(repo)

    await use_case.list_sales(SaleFilters(artist_wallet="0xA"))
    assert repo.list_sales.await_args.args[0].limit == 100
    assert repo.list_sales.await_args.args[0].artist_wallet == "0xA"

    await use_case.list_sales(SaleFilters(limit=5000))
    assert repo.list_sales.await_args.args[0].limit == 1000


async def test_inverted_date_range_is_rejected() -> None:
    use_case = SalesReportingUseCase(AsyncMock())
    filters = SaleFilters(
        start=datetime(2025, 2, 1, tzinfo=timezone.utc),
        end=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )
    with pytest.raises(ValidationException):
        await use_case.get_stats(filters)


async def test_stats_come_from_repository() -> None:
    repo = AsyncMock()
    stats = SalesStats(
        total_sales=2,
        total_revenue=Decimal("20"),
        total_artist_earnings=Decimal("19"),
        total_treasury_fees=Decimal("1"),
        average_price=Decimal("10"),
        unique_collectors=1,
    )
    repo.get_stats.return_value = stats
    assert await SalesReportingUseCase(repo).get_stats(SaleFilters()) == stats


async def test_export_csv_has_header_and_quoted_rows() -> None:
    repo = AsyncMock()
    repo.list_sales.return_value = [_sale(1), _sale(2)]

    content = await SalesReportingUseCase(repo).export_csv(SaleFilters(limit=1))

    rows = list(csv.reader(io.StringIO(content)))
    assert rows[0][:3] == ["date", "artwork_id", "nft_name"]
    assert len(rows) == 3
    assert rows[1][2] == "Sunrise, Study"
    assert rows[1][6] == "10.000000"
    # Export is not truncated by the listing limit.
    assert repo.list_sales.await_args.args[0].limit == 10_000

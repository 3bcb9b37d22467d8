"""Sales reporting API: list, aggregate, and export the sales ledger."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from arthub.api.v1.dependencies import get_sales_use_case
from arthub.application.dtos.sale import SaleFilters
from arthub.application.use_cases.sales import SalesReportingUseCase
from arthub.application.use_cases.sales.reporting import SALES_MAX_LIMIT
from arthub.schemas.sales import SaleResponse, SalesListResponse, SalesStatsResponse

router = APIRouter()


def get_sale_filters(
    artist_wallet: Annotated[str | None, Query(alias="artistWallet")] = None,
    collector_wallet: Annotated[str | None, Query(alias="collectorWallet")] = None,
    start: Annotated[datetime | None, Query(alias="startDate")] = None,
    end: Annotated[datetime | None, Query(alias="endDate")] = None,
    limit: Annotated[int | None, Query(ge=1, le=SALES_MAX_LIMIT)] = None,
) -> SaleFilters:
    return SaleFilters(
        artist_wallet=artist_wallet,
        collector_wallet=collector_wallet,
        start=start,
        end=end,
        limit=limit,
    )


@router.get("", response_model=SalesListResponse)
async def list_sales(
    filters: Annotated[SaleFilters, Depends(get_sale_filters)],
    sales: Annotated[SalesReportingUseCase, Depends(get_sales_use_case)],
) -> SalesListResponse:
    """Sales newest first, filtered by wallet and date range."""
    rows = await sales.list_sales(filters)
    return SalesListResponse(
        data=[SaleResponse.from_result(row) for row in rows], count=len(rows)
    )


@router.get("/stats", response_model=SalesStatsResponse)
async def sales_stats(
    filters: Annotated[SaleFilters, Depends(get_sale_filters)],
    sales: Annotated[SalesReportingUseCase, Depends(get_sales_use_case)],
) -> SalesStatsResponse:
    stats = await sales.get_stats(filters)
    return SalesStatsResponse.from_stats(stats)


@router.get("/export")
async def export_sales(
    filters: Annotated[SaleFilters, Depends(get_sale_filters)],
    sales: Annotated[SalesReportingUseCase, Depends(get_sales_use_case)],
) -> Response:
    """CSV of matching sales (header row included)."""
    content = await sales.export_csv(filters)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="sales.csv"'},
    )

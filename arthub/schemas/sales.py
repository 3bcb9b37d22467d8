"""Sales reporting API schemas."""

from dataclasses import asdict

from pydantic import AwareDatetime, BaseModel

from arthub.application.dtos.sale import SaleRecordResult, SalesStats
from arthub.schemas._types import TokenId, UsdcAmount
from arthub.schemas.settlement import CamelModel


class SaleResponse(CamelModel):
    id: str
    fingerprint: str
    artwork_id: str
    nft_name: str
    image_hash: str
    collection_address: str
    token_id: TokenId
    artist_wallet: str
    artist_name: str | None = None
    collector_wallet: str
    amount_usdc: UsdcAmount
    treasury_amount: UsdcAmount
    artist_amount: UsdcAmount
    treasury_tx_hash: str
    artist_tx_hash: str
    mint_tx_hash: str
    network: str
    sale_type: str
    created_at: AwareDatetime

    @classmethod
    def from_result(cls, sale: SaleRecordResult) -> "SaleResponse":
        return cls(**asdict(sale))


class SalesListResponse(BaseModel):
    success: bool = True
    data: list[SaleResponse]
    count: int


class SalesStatsResponse(CamelModel):
    total_sales: int
    total_revenue: UsdcAmount
    total_artist_earnings: UsdcAmount
    total_treasury_fees: UsdcAmount
    average_price: UsdcAmount
    unique_collectors: int

    @classmethod
    def from_stats(cls, stats: SalesStats) -> "SalesStatsResponse":
        return cls(
            total_sales=stats.total_sales,
            total_revenue=stats.total_revenue,
            total_artist_earnings=stats.total_artist_earnings,
            total_treasury_fees=stats.total_treasury_fees,
            average_price=stats.average_price,
            unique_collectors=stats.unique_collectors,
        )

"""DTOs for the sales ledger (sale records, collected NFTs, reporting)."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class SaleRecordResult:
    """Sale record read-model."""

    id: str
    fingerprint: str
    artwork_id: str
    nft_name: str
    image_hash: str
    collection_address: str
    token_id: int
    artist_wallet: str
    artist_name: str | None
    collector_wallet: str
    amount_usdc: Decimal
    treasury_amount: Decimal
    artist_amount: Decimal
    treasury_tx_hash: str
    artist_tx_hash: str
    mint_tx_hash: str
    network: str
    sale_type: str
    created_at: datetime


@dataclass(frozen=True)
class CollectedNFTResult:
    """Collected NFT read-model."""

    id: str
    fingerprint: str
    owner_wallet: str
    name: str
    description: str
    artist_name: str | None
    collection_address: str
    token_id: int
    image_hash: str
    metadata_hash: str | None
    network: str
    royalty_percentage: Decimal
    mint_tx_hash: str
    created_at: datetime


@dataclass(frozen=True)
class SaleFilters:
    """Filters for listing and aggregating sales. Wallets match case-insensitively."""

    artist_wallet: str | None = None
    collector_wallet: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    limit: int | None = None


@dataclass(frozen=True)
class SalesStats:
    total_sales: int
    total_revenue: Decimal
    total_artist_earnings: Decimal
    total_treasury_fees: Decimal
    average_price: Decimal
    unique_collectors: int

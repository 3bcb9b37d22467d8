"""DTOs for settlement use cases (no dependency on ORM or presentation schemas)."""

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class ArtworkMetadata:
    """NFT metadata supplied with a collect request (already uploaded to IPFS)."""

    name: str
    description: str
    image_hash: str
    metadata_hash: str | None = None
    artist_name: str | None = None

    @property
    def token_uri(self) -> str:
        """Content URI for the mint: metadata JSON when present, else the image."""
        return f"ipfs://{self.metadata_hash or self.image_hash}"


@dataclass(frozen=True)
class CollectRequest:
    """Input for one collect-and-settle run.

    The orchestrator rewrites both addresses to EIP-55 checksum form before
    the request is fingerprinted or stored.
    """

    artwork_id: str
    collector_address: str
    artist_address: str
    amount_usdc: Decimal
    metadata: ArtworkMetadata

    def to_payload(self) -> dict[str, Any]:
        """JSON-safe snapshot stored on the attempt for later reconciliation."""
        return {
            "artwork_id": self.artwork_id,
            "collector_address": self.collector_address,
            "artist_address": self.artist_address,
            "amount_usdc": str(self.amount_usdc),
            "metadata": asdict(self.metadata),
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CollectRequest":
        return cls(
            artwork_id=payload["artwork_id"],
            collector_address=payload["collector_address"],
            artist_address=payload["artist_address"],
            amount_usdc=Decimal(payload["amount_usdc"]),
            metadata=ArtworkMetadata(**payload["metadata"]),
        )


@dataclass(frozen=True)
class ValidationResult:
    """On-chain reads that justified accepting a request."""

    balance_base_units: int
    allowance_base_units: int


@dataclass(frozen=True)
class MintResult:
    """Collection created by the factory for a collect (decoded from its receipt)."""

    collection_address: str
    token_id: int
    tx_hash: str


@dataclass(frozen=True)
class SettlementResult:
    """Outcome of a completed settlement, composed for the HTTP response.

    ledger_pending is True when the chain work finished but the ledger write
    failed and was queued for reconciliation; nft_id/sale_id are then None.
    """

    fingerprint: str
    collection_address: str
    token_id: int
    treasury_tx_hash: str
    artist_tx_hash: str
    mint_tx_hash: str
    amount_paid: Decimal
    treasury_amount: Decimal
    artist_amount: Decimal
    nft_id: str | None = None
    sale_id: str | None = None
    ledger_pending: bool = False


@dataclass(frozen=True)
class ReconciliationSummary:
    """Counts from one reconciliation pass."""

    examined: int = 0
    ledger_repaired: int = 0
    steps_confirmed: int = 0
    hashes_cleared: int = 0
    still_pending: int = 0
    errors: int = 0

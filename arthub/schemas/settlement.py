"""Collect and settlement API schemas (camelCase on the wire)."""

from decimal import Decimal
from typing import Any

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from arthub.application.dtos.settlement import (
    ArtworkMetadata,
    CollectRequest,
    ReconciliationSummary,
    SettlementResult,
)
from arthub.domain.entities.settlement import SettlementAttemptEntity
from arthub.schemas._types import TokenId, UsdcAmount


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ArtworkMetadataBody(CamelModel):
    name: str = Field(..., min_length=1, max_length=500)
    description: str = Field(default="", max_length=10_000)
    image_hash: str = Field(..., min_length=1, max_length=255)
    metadata_hash: str | None = Field(default=None, max_length=255)
    artist_name: str | None = Field(default=None, max_length=255)


class CollectRequestBody(CamelModel):
    """Body of POST /gallery/collect."""

    artwork_id: str = Field(..., min_length=1, max_length=255)
    collector_address: str = Field(..., min_length=1)
    artist_address: str = Field(..., min_length=1)
    amount_usdc: Decimal = Field(..., alias="amountUSDC", gt=0)
    metadata: ArtworkMetadataBody

    @field_validator("artwork_id")
    @classmethod
    def strip_artwork_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("artworkId must not be blank")
        return v

    def to_dto(self) -> CollectRequest:
        return CollectRequest(
            artwork_id=self.artwork_id,
            collector_address=self.collector_address.strip(),
            artist_address=self.artist_address.strip(),
            amount_usdc=self.amount_usdc,
            metadata=ArtworkMetadata(
                name=self.metadata.name,
                description=self.metadata.description,
                image_hash=self.metadata.image_hash,
                metadata_hash=self.metadata.metadata_hash,
                artist_name=self.metadata.artist_name,
            ),
        )


class SettlementResultData(CamelModel):
    nft_id: str | None = None
    sale_id: str | None = None
    collection_address: str
    token_id: TokenId
    treasury_tx_hash: str
    artist_tx_hash: str
    mint_tx_hash: str
    amount_paid: UsdcAmount
    treasury_amount: UsdcAmount
    artist_amount: UsdcAmount
    fingerprint: str
    ledger_pending: bool = False

    @classmethod
    def from_result(cls, result: SettlementResult) -> "SettlementResultData":
        return cls(
            nft_id=result.nft_id,
            sale_id=result.sale_id,
            collection_address=result.collection_address,
            token_id=result.token_id,
            treasury_tx_hash=result.treasury_tx_hash,
            artist_tx_hash=result.artist_tx_hash,
            mint_tx_hash=result.mint_tx_hash,
            amount_paid=result.amount_paid,
            treasury_amount=result.treasury_amount,
            artist_amount=result.artist_amount,
            fingerprint=result.fingerprint,
            ledger_pending=result.ledger_pending,
        )


class CollectResponse(CamelModel):
    success: bool = True
    message: str
    data: SettlementResultData


class SettlementStatusResponse(CamelModel):
    """Operator view of one settlement attempt."""

    fingerprint: str
    status: str
    failed_from_status: str | None = None
    resume_status: str
    artwork_id: str | None = None
    collector_address: str | None = None
    total_base_units: str
    treasury_base_units: str
    artist_base_units: str
    treasury_tx_hash: str | None = None
    artist_tx_hash: str | None = None
    mint_tx_hash: str | None = None
    collection_address: str | None = None
    token_id: TokenId | None = None
    nft_id: str | None = None
    sale_id: str | None = None
    last_error: str | None = None
    needs_reconciliation: bool
    created_at: AwareDatetime | None = None
    updated_at: AwareDatetime | None = None

    @classmethod
    def from_entity(cls, attempt: SettlementAttemptEntity) -> "SettlementStatusResponse":
        payload: dict[str, Any] = attempt.request_payload or {}
        return cls(
            fingerprint=attempt.fingerprint,
            status=attempt.status.value,
            failed_from_status=(
                attempt.failed_from_status.value if attempt.failed_from_status else None
            ),
            resume_status=attempt.resume_status.value,
            artwork_id=payload.get("artwork_id"),
            collector_address=payload.get("collector_address"),
            total_base_units=str(attempt.total_base_units),
            treasury_base_units=str(attempt.treasury_base_units),
            artist_base_units=str(attempt.artist_base_units),
            treasury_tx_hash=attempt.treasury_tx_hash,
            artist_tx_hash=attempt.artist_tx_hash,
            mint_tx_hash=attempt.mint_tx_hash,
            collection_address=attempt.collection_address,
            token_id=attempt.token_id,
            nft_id=attempt.nft_id,
            sale_id=attempt.sale_id,
            last_error=attempt.last_error,
            needs_reconciliation=attempt.needs_reconciliation,
            created_at=attempt.created_at,
            updated_at=attempt.updated_at,
        )


class ReconcileResponse(CamelModel):
    examined: int
    ledger_repaired: int
    steps_confirmed: int
    hashes_cleared: int
    still_pending: int
    errors: int

    @classmethod
    def from_summary(cls, summary: ReconciliationSummary) -> "ReconcileResponse":
        return cls(
            examined=summary.examined,
            ledger_repaired=summary.ledger_repaired,
            steps_confirmed=summary.steps_confirmed,
            hashes_cleared=summary.hashes_cleared,
            still_pending=summary.still_pending,
            errors=summary.errors,
        )

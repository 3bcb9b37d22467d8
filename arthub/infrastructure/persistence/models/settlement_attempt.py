"""SettlementAttempt ORM model. One row per request fingerprint, mutated as the saga advances."""

from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, BigInteger, Boolean, Index, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from arthub.infrastructure.persistence.database import Base
from arthub.infrastructure.persistence.models.mixins import (
    CuidMixin,
    FingerprintMixin,
    TimestampMixin,
)


class SettlementAttempt(CuidMixin, FingerprintMixin, TimestampMixin, Base):
    """Durable saga state for one collect request. Table: settlement_attempt."""

    __tablename__ = "settlement_attempt"

    status: Mapped[str] = mapped_column(String(32), nullable=False)
    failed_from_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    request_payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    total_base_units: Mapped[int] = mapped_column(BigInteger, nullable=False)
    treasury_base_units: Mapped[int] = mapped_column(BigInteger, nullable=False)
    artist_base_units: Mapped[int] = mapped_column(BigInteger, nullable=False)
    treasury_tx_hash: Mapped[str | None] = mapped_column(String(66), nullable=True)
    artist_tx_hash: Mapped[str | None] = mapped_column(String(66), nullable=True)
    mint_tx_hash: Mapped[str | None] = mapped_column(String(66), nullable=True)
    collection_address: Mapped[str | None] = mapped_column(String(42), nullable=True)
    token_id: Mapped[Decimal | None] = mapped_column(Numeric(78, 0), nullable=True)
    nft_id: Mapped[str | None] = mapped_column(String, nullable=True)
    sale_id: Mapped[str | None] = mapped_column(String, nullable=True)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    needs_reconciliation: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )

    __table_args__ = (
        UniqueConstraint("fingerprint", name="uq_settlement_attempt_fingerprint"),
        Index("ix_settlement_attempt_status", "status"),
        Index("ix_settlement_attempt_needs_reconciliation", "needs_reconciliation"),
    )

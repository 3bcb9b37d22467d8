"""SaleRecord ORM model. Append-only sales ledger, one row per fingerprint."""

from decimal import Decimal

from sqlalchemy import Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from arthub.core.constants import SALE_TYPE_GALLERY_COLLECT
from arthub.infrastructure.persistence.database import Base
from arthub.infrastructure.persistence.models.mixins import LedgerModel


class SaleRecord(LedgerModel, Base):
    """Completed sale (payment split + mint). Table: sale_record.

    Wallet columns are stored lowercase so reporting filters match exactly.
    """

    __tablename__ = "sale_record"

    artwork_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    nft_name: Mapped[str] = mapped_column(String(500), nullable=False)
    image_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    collection_address: Mapped[str] = mapped_column(String(42), nullable=False)
    token_id: Mapped[Decimal] = mapped_column(Numeric(78, 0), nullable=False)
    artist_wallet: Mapped[str] = mapped_column(String(42), nullable=False)
    artist_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    collector_wallet: Mapped[str] = mapped_column(String(42), nullable=False)
    amount_usdc: Mapped[Decimal] = mapped_column(Numeric(20, 6), nullable=False)
    treasury_amount: Mapped[Decimal] = mapped_column(Numeric(20, 6), nullable=False)
    artist_amount: Mapped[Decimal] = mapped_column(Numeric(20, 6), nullable=False)
    treasury_tx_hash: Mapped[str] = mapped_column(String(66), nullable=False)
    artist_tx_hash: Mapped[str] = mapped_column(String(66), nullable=False)
    mint_tx_hash: Mapped[str] = mapped_column(String(66), nullable=False)
    network: Mapped[str] = mapped_column(String(32), nullable=False)
    sale_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default=SALE_TYPE_GALLERY_COLLECT
    )

    __table_args__ = (
        UniqueConstraint("fingerprint", name="uq_sale_record_fingerprint"),
        Index("ix_sale_record_artist_created", "artist_wallet", "created_at"),
        Index("ix_sale_record_collector_created", "collector_wallet", "created_at"),
    )

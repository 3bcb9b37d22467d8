"""CollectedNFT ORM model. The NFT a collector received, one row per fingerprint."""

from decimal import Decimal

from sqlalchemy import Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from arthub.infrastructure.persistence.database import Base
from arthub.infrastructure.persistence.models.mixins import LedgerModel


class CollectedNFT(LedgerModel, Base):
    """Minted NFT owned by the collector. Table: collected_nft.

    Only display fields (name, artist_name) may change after creation.
    """

    __tablename__ = "collected_nft"

    owner_wallet: Mapped[str] = mapped_column(String(42), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    artist_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    collection_address: Mapped[str] = mapped_column(String(42), nullable=False)
    token_id: Mapped[Decimal] = mapped_column(Numeric(78, 0), nullable=False)
    image_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    metadata_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    network: Mapped[str] = mapped_column(String(32), nullable=False)
    royalty_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    mint_tx_hash: Mapped[str] = mapped_column(String(66), nullable=False)

    __table_args__ = (UniqueConstraint("fingerprint", name="uq_collected_nft_fingerprint"),)

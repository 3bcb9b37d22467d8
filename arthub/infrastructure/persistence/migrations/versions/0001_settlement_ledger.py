"""settlement attempt, sale record and collected nft tables

Revision ID: 0001_settlement_ledger
Revises:
Create Date: 2026-10-18 00:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_settlement_ledger"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    )


def upgrade() -> None:
    op.create_table(
        "settlement_attempt",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("fingerprint", sa.String(64), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("failed_from_status", sa.String(32), nullable=True),
        sa.Column("request_payload", sa.JSON(), nullable=False),
        sa.Column("total_base_units", sa.BigInteger(), nullable=False),
        sa.Column("treasury_base_units", sa.BigInteger(), nullable=False),
        sa.Column("artist_base_units", sa.BigInteger(), nullable=False),
        sa.Column("treasury_tx_hash", sa.String(66), nullable=True),
        sa.Column("artist_tx_hash", sa.String(66), nullable=True),
        sa.Column("mint_tx_hash", sa.String(66), nullable=True),
        sa.Column("collection_address", sa.String(42), nullable=True),
        sa.Column("token_id", sa.Numeric(78, 0), nullable=True),
        sa.Column("nft_id", sa.String(), nullable=True),
        sa.Column("sale_id", sa.String(), nullable=True),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column(
            "needs_reconciliation", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        _created_at(),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.UniqueConstraint("fingerprint", name="uq_settlement_attempt_fingerprint"),
    )
    op.create_index("ix_settlement_attempt_status", "settlement_attempt", ["status"])
    op.create_index(
        "ix_settlement_attempt_needs_reconciliation",
        "settlement_attempt",
        ["needs_reconciliation"],
    )
    op.create_index("ix_settlement_attempt_created_at", "settlement_attempt", ["created_at"])

    op.create_table(
        "sale_record",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("fingerprint", sa.String(64), nullable=False),
        sa.Column("artwork_id", sa.String(255), nullable=False),
        sa.Column("nft_name", sa.String(500), nullable=False),
        sa.Column("image_hash", sa.String(255), nullable=False),
        sa.Column("collection_address", sa.String(42), nullable=False),
        sa.Column("token_id", sa.Numeric(78, 0), nullable=False),
        sa.Column("artist_wallet", sa.String(42), nullable=False),
        sa.Column("artist_name", sa.String(255), nullable=True),
        sa.Column("collector_wallet", sa.String(42), nullable=False),
        sa.Column("amount_usdc", sa.Numeric(20, 6), nullable=False),
        sa.Column("treasury_amount", sa.Numeric(20, 6), nullable=False),
        sa.Column("artist_amount", sa.Numeric(20, 6), nullable=False),
        sa.Column("treasury_tx_hash", sa.String(66), nullable=False),
        sa.Column("artist_tx_hash", sa.String(66), nullable=False),
        sa.Column("mint_tx_hash", sa.String(66), nullable=False),
        sa.Column("network", sa.String(32), nullable=False),
        sa.Column("sale_type", sa.String(32), nullable=False),
        _created_at(),
        sa.UniqueConstraint("fingerprint", name="uq_sale_record_fingerprint"),
    )
    op.create_index("ix_sale_record_artwork_id", "sale_record", ["artwork_id"])
    op.create_index("ix_sale_record_created_at", "sale_record", ["created_at"])
    op.create_index(
        "ix_sale_record_artist_created", "sale_record", ["artist_wallet", "created_at"]
    )
    op.create_index(
        "ix_sale_record_collector_created", "sale_record", ["collector_wallet", "created_at"]
    )

    op.create_table(
        "collected_nft",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("fingerprint", sa.String(64), nullable=False),
        sa.Column("owner_wallet", sa.String(42), nullable=False),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("artist_name", sa.String(255), nullable=True),
        sa.Column("collection_address", sa.String(42), nullable=False),
        sa.Column("token_id", sa.Numeric(78, 0), nullable=False),
        sa.Column("image_hash", sa.String(255), nullable=False),
        sa.Column("metadata_hash", sa.String(255), nullable=True),
        sa.Column("network", sa.String(32), nullable=False),
        sa.Column("royalty_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("mint_tx_hash", sa.String(66), nullable=False),
        _created_at(),
        sa.UniqueConstraint("fingerprint", name="uq_collected_nft_fingerprint"),
    )
    op.create_index("ix_collected_nft_owner_wallet", "collected_nft", ["owner_wallet"])
    op.create_index("ix_collected_nft_created_at", "collected_nft", ["created_at"])


def downgrade() -> None:
    op.drop_table("collected_nft")
    op.drop_table("sale_record")
    op.drop_table("settlement_attempt")

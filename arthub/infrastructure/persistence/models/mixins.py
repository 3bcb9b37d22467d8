"""SQLAlchemy mixins for common model patterns (DRY).

Provides: CuidMixin, CreatedAtMixin, TimestampMixin, and the combined
LedgerModel for append-only ledger rows.
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from arthub.shared.utils.generators import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class CreatedAtMixin:
    """Mixin for created_at only (ledger rows are never updated)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
        )


class TimestampMixin(CreatedAtMixin):
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class FingerprintMixin:
    """Mixin for the request fingerprint (SHA-256 hex). Each table adds its own unique constraint."""

    @declared_attr
    def fingerprint(cls) -> Mapped[str]:
        return mapped_column(String(64), nullable=False)


class LedgerModel(CuidMixin, FingerprintMixin, CreatedAtMixin):
    """Combined mixin: CUID + unique fingerprint + created_at."""

    __abstract__ = True

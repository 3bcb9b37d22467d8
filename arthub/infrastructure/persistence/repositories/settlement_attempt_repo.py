"""Settlement attempt repository: durable saga state keyed by fingerprint.

Each call runs in its own short transaction on a fresh session so that a
recorded tx hash is committed before the saga waits for confirmation.
"""

from datetime import timedelta
from decimal import Decimal

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from arthub.domain.entities.settlement import SettlementAttemptEntity
from arthub.domain.enums import SettlementStatus
from arthub.domain.exceptions import ResourceNotFoundException
from arthub.infrastructure.persistence.models.settlement_attempt import SettlementAttempt
from arthub.shared.utils.datetime import ensure_utc, utc_now

# Columns copied from the entity on every save.
_MUTABLE_FIELDS = (
    "treasury_tx_hash",
    "artist_tx_hash",
    "mint_tx_hash",
    "collection_address",
    "nft_id",
    "sale_id",
    "last_error",
    "needs_reconciliation",
)


def _to_entity(row: SettlementAttempt) -> SettlementAttemptEntity:
    return SettlementAttemptEntity(
        id=row.id,
        fingerprint=row.fingerprint,
        status=SettlementStatus(row.status),
        failed_from_status=(
            SettlementStatus(row.failed_from_status) if row.failed_from_status else None
        ),
        request_payload=dict(row.request_payload),
        total_base_units=row.total_base_units,
        treasury_base_units=row.treasury_base_units,
        artist_base_units=row.artist_base_units,
        treasury_tx_hash=row.treasury_tx_hash,
        artist_tx_hash=row.artist_tx_hash,
        mint_tx_hash=row.mint_tx_hash,
        collection_address=row.collection_address,
        token_id=int(row.token_id) if row.token_id is not None else None,
        nft_id=row.nft_id,
        sale_id=row.sale_id,
        last_error=row.last_error,
        needs_reconciliation=row.needs_reconciliation,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
    )


class SettlementAttemptRepository:
    """ISettlementAttemptRepository over SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get_by_fingerprint(self, fingerprint: str) -> SettlementAttemptEntity | None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(SettlementAttempt).where(SettlementAttempt.fingerprint == fingerprint)
            )
            row = result.scalar_one_or_none()
            return _to_entity(row) if row is not None else None

    async def create(self, attempt: SettlementAttemptEntity) -> SettlementAttemptEntity:
        async with self.session_factory() as session:
            async with session.begin():
                row = SettlementAttempt(
                    id=attempt.id,
                    fingerprint=attempt.fingerprint,
                    status=attempt.status.value,
                    failed_from_status=(
                        attempt.failed_from_status.value if attempt.failed_from_status else None
                    ),
                    request_payload=attempt.request_payload,
                    total_base_units=attempt.total_base_units,
                    treasury_base_units=attempt.treasury_base_units,
                    artist_base_units=attempt.artist_base_units,
                    needs_reconciliation=attempt.needs_reconciliation,
                )
                session.add(row)
                await session.flush()
                await session.refresh(row)
            return _to_entity(row)

    async def save(self, attempt: SettlementAttemptEntity) -> SettlementAttemptEntity:
        async with self.session_factory() as session:
            async with session.begin():
                row = await session.get(SettlementAttempt, attempt.id, with_for_update=True)
                if row is None:
                    raise ResourceNotFoundException("SettlementAttempt", attempt.id)
                row.status = attempt.status.value
                row.failed_from_status = (
                    attempt.failed_from_status.value if attempt.failed_from_status else None
                )
                for name in _MUTABLE_FIELDS:
                    setattr(row, name, getattr(attempt, name))
                row.token_id = Decimal(attempt.token_id) if attempt.token_id is not None else None
                await session.flush()
                await session.refresh(row)
            return _to_entity(row)

    async def list_for_reconciliation(
        self, pending_older_than_seconds: float, limit: int
    ) -> list[SettlementAttemptEntity]:
        """Unpersisted attempts that are minted, flagged, or idle with a recorded hash."""
        cutoff = utc_now() - timedelta(seconds=pending_older_than_seconds)
        resume_status = func.coalesce(
            SettlementAttempt.failed_from_status, SettlementAttempt.status
        )
        # The hash of the step after each resume status; only that one can be pending.
        pending_hash = or_(
            and_(
                resume_status == SettlementStatus.SPLIT_COMPUTED.value,
                SettlementAttempt.treasury_tx_hash.is_not(None),
            ),
            and_(
                resume_status == SettlementStatus.TREASURY_SENT.value,
                SettlementAttempt.artist_tx_hash.is_not(None),
            ),
            and_(
                resume_status == SettlementStatus.ARTIST_SENT.value,
                SettlementAttempt.mint_tx_hash.is_not(None),
            ),
        )
        stmt = (
            select(SettlementAttempt)
            .where(
                SettlementAttempt.status != SettlementStatus.PERSISTED.value,
                or_(
                    resume_status == SettlementStatus.MINTED.value,
                    SettlementAttempt.needs_reconciliation.is_(True),
                    and_(SettlementAttempt.updated_at <= cutoff, pending_hash),
                ),
            )
            .order_by(SettlementAttempt.updated_at)
            .limit(limit)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [_to_entity(row) for row in result.scalars().all()]

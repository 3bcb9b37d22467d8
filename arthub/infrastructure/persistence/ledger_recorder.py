"""Ledger recorder: writes the sale record and collected NFT for a minted attempt.

Both rows are inserted in one transaction and keyed by the request
fingerprint, so a repeated call can never create a second sale.
"""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from arthub.application.dtos.sale import CollectedNFTResult, SaleRecordResult
from arthub.application.dtos.settlement import CollectRequest
from arthub.core.constants import BPS_DENOMINATOR, SALE_TYPE_GALLERY_COLLECT
from arthub.domain.entities.settlement import SettlementAttemptEntity
from arthub.domain.enums import SettlementStatus
from arthub.domain.exceptions import PersistenceException
from arthub.infrastructure.persistence.models.collected_nft import CollectedNFT
from arthub.infrastructure.persistence.models.sale_record import SaleRecord
from arthub.infrastructure.persistence.repositories.sale_repo import sale_to_result
from arthub.shared.utils.datetime import ensure_utc
from arthub.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)


def nft_to_result(row: CollectedNFT) -> CollectedNFTResult:
    return CollectedNFTResult(
        id=row.id,
        fingerprint=row.fingerprint,
        owner_wallet=row.owner_wallet,
        name=row.name,
        description=row.description,
        artist_name=row.artist_name,
        collection_address=row.collection_address,
        token_id=int(row.token_id),
        image_hash=row.image_hash,
        metadata_hash=row.metadata_hash,
        network=row.network,
        royalty_percentage=row.royalty_percentage,
        mint_tx_hash=row.mint_tx_hash,
        created_at=ensure_utc(row.created_at),
    )


class LedgerRecorder:
    """ILedgerRecorder over SQLAlchemy."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        network: str,
        royalty_bps: int,
    ) -> None:
        self.session_factory = session_factory
        self.network = network
        self.royalty_percentage = (Decimal(royalty_bps) * 100 / BPS_DENOMINATOR).quantize(
            Decimal("0.01")
        )

    def _build_rows(
        self, attempt: SettlementAttemptEntity, request: CollectRequest
    ) -> tuple[SaleRecord, CollectedNFT]:
        split = attempt.split
        metadata = request.metadata
        sale = SaleRecord(
            id=generate_cuid(),
            fingerprint=attempt.fingerprint,
            artwork_id=request.artwork_id,
            nft_name=metadata.name,
            image_hash=metadata.image_hash,
            collection_address=attempt.collection_address,
            token_id=Decimal(attempt.token_id),
            artist_wallet=request.artist_address.lower(),
            artist_name=metadata.artist_name,
            collector_wallet=request.collector_address.lower(),
            amount_usdc=split.total_usdc,
            treasury_amount=split.treasury_usdc,
            artist_amount=split.artist_usdc,
            treasury_tx_hash=attempt.treasury_tx_hash,
            artist_tx_hash=attempt.artist_tx_hash,
            mint_tx_hash=attempt.mint_tx_hash,
            network=self.network,
            sale_type=SALE_TYPE_GALLERY_COLLECT,
        )
        nft = CollectedNFT(
            id=generate_cuid(),
            fingerprint=attempt.fingerprint,
            owner_wallet=request.collector_address.lower(),
            name=metadata.name,
            description=metadata.description,
            artist_name=metadata.artist_name,
            collection_address=attempt.collection_address,
            token_id=Decimal(attempt.token_id),
            image_hash=metadata.image_hash,
            metadata_hash=metadata.metadata_hash,
            network=self.network,
            royalty_percentage=self.royalty_percentage,
            mint_tx_hash=attempt.mint_tx_hash,
        )
        return sale, nft

    async def _load_existing(
        self, fingerprint: str
    ) -> tuple[SaleRecordResult, CollectedNFTResult] | None:
        async with self.session_factory() as session:
            sale = (
                await session.execute(select(SaleRecord).where(SaleRecord.fingerprint == fingerprint))
            ).scalar_one_or_none()
            nft = (
                await session.execute(
                    select(CollectedNFT).where(CollectedNFT.fingerprint == fingerprint)
                )
            ).scalar_one_or_none()
        if sale is None or nft is None:
            return None
        return sale_to_result(sale), nft_to_result(nft)

    async def record(
        self, attempt: SettlementAttemptEntity, request: CollectRequest
    ) -> tuple[SaleRecordResult, CollectedNFTResult]:
        """Insert the sale and NFT rows once per fingerprint.

        Returns:
            (sale, nft), newly created or already present.

        Raises:
            ValueError: The attempt is not minted yet.
            PersistenceException: Database failure other than a duplicate.
        """
        if not attempt.has_reached(SettlementStatus.MINTED) or attempt.token_id is None:
            raise ValueError("Ledger records require a minted attempt")
        sale, nft = self._build_rows(attempt, request)
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    session.add_all([sale, nft])
                    await session.flush()
                await session.refresh(sale)
                await session.refresh(nft)
            logger.info("Recorded sale %s and NFT %s for %s", sale.id, nft.id, attempt.fingerprint)
            return sale_to_result(sale), nft_to_result(nft)
        except IntegrityError as e:
            try:
                existing = await self._load_existing(attempt.fingerprint)
            except SQLAlchemyError as load_error:
                raise PersistenceException(attempt.fingerprint, str(load_error)) from load_error
            if existing is None:
                raise PersistenceException(attempt.fingerprint, str(e)) from e
            logger.info("Ledger rows already present for %s", attempt.fingerprint)
            return existing
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceException(attempt.fingerprint, str(e)) from e

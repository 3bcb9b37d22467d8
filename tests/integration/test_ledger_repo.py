"""Settlement attempt and ledger persistence tests. Require Postgres (alembic upgrade head).

Rows are committed, so every test uses fresh fingerprints and wallets.
"""

import hashlib
import uuid
from decimal import Decimal

import pytest

from arthub.application.dtos.sale import SaleFilters
from arthub.application.dtos.settlement import ArtworkMetadata, CollectRequest
from arthub.domain.entities.settlement import SettlementAttemptEntity
from arthub.domain.enums import SettlementStatus, SettlementStep
from arthub.infrastructure.persistence.ledger_recorder import LedgerRecorder
from arthub.infrastructure.persistence.repositories import (
    SaleRepository,
    SettlementAttemptRepository,
)
from arthub.shared.utils.generators import generate_cuid


def _wallet() -> str:
    return "0x" + uuid.uuid4().hex + uuid.uuid4().hex[:8]


def _request(artist: str, collector: str) -> CollectRequest:
    return CollectRequest(
        artwork_id="artwork-int",
        collector_address=collector,
        artist_address=artist,
        amount_usdc=Decimal("10"),
        metadata=ArtworkMetadata(name="Sunrise", description="", image_hash="QmImage"),
    )


def _attempt(request: CollectRequest) -> SettlementAttemptEntity:
    return SettlementAttemptEntity(
        id=generate_cuid(),
        fingerprint=hashlib.sha256(uuid.uuid4().bytes).hexdigest(),
        status=SettlementStatus.SPLIT_COMPUTED,
        request_payload=request.to_payload(),
        total_base_units=10_000_000,
        treasury_base_units=500_000,
        artist_base_units=9_500_000,
    )


def _minted(attempt: SettlementAttemptEntity) -> SettlementAttemptEntity:
    attempt.record_tx_hash(SettlementStep.TREASURY, "0x" + "1" * 64)
    attempt.confirm_step(SettlementStep.TREASURY)
    attempt.record_tx_hash(SettlementStep.ARTIST, "0x" + "2" * 64)
    attempt.confirm_step(SettlementStep.ARTIST)
    attempt.record_tx_hash(SettlementStep.MINT, "0x" + "3" * 64)
    attempt.mark_minted("0x" + "b" * 40, 2**70)
    return attempt


@pytest.mark.requires_db
async def test_attempt_create_save_and_reload(session_factory) -> None:
    repo = SettlementAttemptRepository(session_factory)
    request = _request(_wallet(), _wallet())
    created = await repo.create(_attempt(request))
    assert created.created_at is not None
    assert created.status == SettlementStatus.SPLIT_COMPUTED

    created.record_tx_hash(SettlementStep.TREASURY, "0x" + "1" * 64)
    created.mark_failed("treasury transaction timed out")
    await repo.save(created)

    found = await repo.get_by_fingerprint(created.fingerprint)
    assert found is not None
    assert found.status == SettlementStatus.FAILED
    assert found.failed_from_status == SettlementStatus.SPLIT_COMPUTED
    assert found.treasury_tx_hash == "0x" + "1" * 64
    assert CollectRequest.from_payload(found.request_payload) == request


@pytest.mark.requires_db
async def test_token_id_above_bigint_round_trips(session_factory) -> None:
    repo = SettlementAttemptRepository(session_factory)
    attempt = await repo.create(_attempt(_request(_wallet(), _wallet())))
    await repo.save(_minted(attempt))

    found = await repo.get_by_fingerprint(attempt.fingerprint)
    assert found.token_id == 2**70
    assert found.status == SettlementStatus.MINTED

    found.mark_persisted(nft_id="nft", sale_id="sale")
    await repo.save(found)


@pytest.mark.requires_db
async def test_minted_attempt_is_listed_for_reconciliation(session_factory) -> None:
    repo = SettlementAttemptRepository(session_factory)
    fresh = await repo.create(_attempt(_request(_wallet(), _wallet())))
    minted = await repo.create(_attempt(_request(_wallet(), _wallet())))
    await repo.save(_minted(minted))

    listed = await repo.list_for_reconciliation(pending_older_than_seconds=3600, limit=500)
    fingerprints = {a.fingerprint for a in listed}
    assert minted.fingerprint in fingerprints
    assert fresh.fingerprint not in fingerprints

    minted.mark_persisted(nft_id="nft", sale_id="sale")
    await repo.save(minted)


@pytest.mark.requires_db
async def test_ledger_record_is_idempotent(session_factory) -> None:
    artist, collector = _wallet(), _wallet()
    request = _request(artist.upper().replace("0X", "0x"), collector)
    attempts = SettlementAttemptRepository(session_factory)
    attempt = _minted(await attempts.create(_attempt(request)))
    ledger = LedgerRecorder(session_factory, network="base-sepolia", royalty_bps=250)

    sale, nft = await ledger.record(attempt, request)
    again_sale, again_nft = await ledger.record(attempt, request)

    assert (again_sale.id, again_nft.id) == (sale.id, nft.id)
    assert sale.artist_wallet == artist.lower()
    assert sale.treasury_amount == Decimal("0.5")
    assert nft.token_id == 2**70
    assert nft.royalty_percentage == Decimal("2.50")

    async with session_factory() as session:
        sales = await SaleRepository(session).list_sales(SaleFilters(artist_wallet=artist))
    assert [s.id for s in sales] == [sale.id]


@pytest.mark.requires_db
async def test_ledger_rejects_unminted_attempt(session_factory) -> None:
    request = _request(_wallet(), _wallet())
    ledger = LedgerRecorder(session_factory, network="base-sepolia", royalty_bps=250)
    with pytest.raises(ValueError):
        await ledger.record(_attempt(request), request)


@pytest.mark.requires_db
async def test_sales_stats_for_artist(session_factory) -> None:
    artist = _wallet()
    ledger = LedgerRecorder(session_factory, network="base-sepolia", royalty_bps=250)
    attempts = SettlementAttemptRepository(session_factory)
    collector = _wallet()
    for buyer in (collector, collector, _wallet()):
        request = _request(artist, buyer)
        await ledger.record(_minted(await attempts.create(_attempt(request))), request)

    async with session_factory() as session:
        stats = await SaleRepository(session).get_stats(SaleFilters(artist_wallet=artist))

    assert stats.total_sales == 3
    assert stats.total_revenue == Decimal("30")
    assert stats.total_artist_earnings == Decimal("28.5")
    assert stats.total_treasury_fees == Decimal("1.5")
    assert stats.average_price == Decimal("10")
    assert stats.unique_collectors == 2

"""ReconcileSettlementsUseCase and ReconciliationRunner."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from arthub.application.dtos.chain import TxReceipt
from arthub.application.dtos.settlement import ReconciliationSummary
from arthub.application.services import FingerprintService, MintExecutor
from arthub.application.use_cases.settlements import ReconcileSettlementsUseCase
from arthub.core.reconciliation_runner import ReconciliationRunner
from arthub.domain.entities.settlement import SettlementAttemptEntity
from arthub.domain.enums import SettlementStatus
from arthub.infrastructure.chain.signer_queue import SignerQueue
from arthub.infrastructure.locks import InMemorySettlementLease
from tests.fakes import (
    COLLECTION,
    COLLECTOR,
    FakeAttemptRepository,
    FakeChainGateway,
    FakeLedgerRecorder,
    make_request,
)

GRACE = 300
H1, H2, H3 = ("0x" + c * 64 for c in "123")


@pytest.fixture
def env():
    gateway = FakeChainGateway()
    repo = FakeAttemptRepository()
    ledger = FakeLedgerRecorder()
    lease = InMemorySettlementLease()
    use_case = ReconcileSettlementsUseCase(
        attempt_repo=repo,
        ledger=ledger,
        gateway=gateway,
        mint_executor=MintExecutor(
            gateway, SignerQueue(gateway, confirmation_timeout=1.0), royalty_bps=250, symbol="CLCT"
        ),
        lease=lease,
        pending_grace_seconds=GRACE,
        lease_seconds=60,
    )
    return use_case, gateway, repo, ledger, lease


async def _store(repo: FakeAttemptRepository, status: SettlementStatus, **fields) -> str:
    request = make_request()
    fingerprint = FingerprintService().compute(request)
    await repo.create(
        SettlementAttemptEntity(
            id="att1",
            fingerprint=fingerprint,
            status=status,
            request_payload=request.to_payload(),
            total_base_units=10_000_000,
            treasury_base_units=500_000,
            artist_base_units=9_500_000,
            **fields,
        )
    )
    return fingerprint


def _mint_receipt(tx_hash: str, success: bool = True) -> TxReceipt:
    events = [{"collection": COLLECTION, "recipient": COLLECTOR, "tokenId": 4}] if success else []
    return TxReceipt(tx_hash=tx_hash, success=success, raw={"events": events})


async def test_flagged_minted_attempt_gets_ledger_rows(env) -> None:
    use_case, gateway, repo, ledger, _ = env
    fp = await _store(
        repo,
        SettlementStatus.MINTED,
        treasury_tx_hash=H1,
        artist_tx_hash=H2,
        mint_tx_hash=H3,
        collection_address=COLLECTION,
        token_id=4,
        needs_reconciliation=True,
    )

    summary = await use_case.run()

    assert summary.examined == 1
    assert summary.ledger_repaired == 1
    row = repo.rows[fp]
    assert row.status == SettlementStatus.PERSISTED
    assert row.sale_id == "sale1"
    assert not row.needs_reconciliation
    assert gateway.sent == []


async def test_missing_collection_is_decoded_from_mint_receipt(env) -> None:
    use_case, gateway, repo, ledger, _ = env
    gateway.receipts[H3] = _mint_receipt(H3)
    fp = await _store(
        repo,
        SettlementStatus.MINTED,
        treasury_tx_hash=H1,
        artist_tx_hash=H2,
        mint_tx_hash=H3,
        needs_reconciliation=True,
    )

    await use_case.run()

    sale, nft = ledger.records[fp]
    assert sale.collection_address == COLLECTION
    assert nft.token_id == 4
    assert repo.rows[fp].status == SettlementStatus.PERSISTED


async def test_confirmed_pending_hash_advances_step(env) -> None:
    use_case, gateway, repo, ledger, _ = env
    gateway.receipts[H2] = TxReceipt(tx_hash=H2, success=True)
    fp = await _store(repo, SettlementStatus.TREASURY_SENT, treasury_tx_hash=H1, artist_tx_hash=H2)
    repo.backdate(fp, GRACE * 2)

    summary = await use_case.run()

    assert summary.steps_confirmed == 1
    assert repo.rows[fp].status == SettlementStatus.ARTIST_SENT
    assert ledger.calls == 0


async def test_confirmed_mint_hash_is_decoded_and_recorded_in_one_pass(env) -> None:
    use_case, gateway, repo, ledger, _ = env
    gateway.receipts[H3] = _mint_receipt(H3)
    fp = await _store(
        repo, SettlementStatus.ARTIST_SENT, treasury_tx_hash=H1, artist_tx_hash=H2, mint_tx_hash=H3
    )
    repo.backdate(fp, GRACE * 2)

    summary = await use_case.run()

    assert summary.steps_confirmed == 1
    assert summary.ledger_repaired == 1
    assert repo.rows[fp].collection_address == COLLECTION
    assert repo.rows[fp].status == SettlementStatus.PERSISTED


async def test_dropped_hash_is_cleared_after_grace(env) -> None:
    use_case, gateway, repo, _, _ = env
    fp = await _store(repo, SettlementStatus.TREASURY_SENT, treasury_tx_hash=H1, artist_tx_hash=H2)
    repo.backdate(fp, GRACE * 2)

    summary = await use_case.run()

    assert summary.hashes_cleared == 1
    assert repo.rows[fp].artist_tx_hash is None
    assert repo.rows[fp].status == SettlementStatus.TREASURY_SENT


async def test_hash_still_in_mempool_is_left_pending(env) -> None:
    use_case, gateway, repo, _, _ = env
    gateway.pending[H2] = TxReceipt(tx_hash=H2, success=True)
    fp = await _store(repo, SettlementStatus.TREASURY_SENT, treasury_tx_hash=H1, artist_tx_hash=H2)
    repo.backdate(fp, GRACE * 2)

    summary = await use_case.run()

    assert summary.still_pending == 1
    assert repo.rows[fp].artist_tx_hash == H2


async def test_reverted_hash_marks_attempt_failed(env) -> None:
    use_case, gateway, repo, _, _ = env
    gateway.receipts[H2] = TxReceipt(tx_hash=H2, success=False)
    fp = await _store(repo, SettlementStatus.TREASURY_SENT, treasury_tx_hash=H1, artist_tx_hash=H2)
    repo.backdate(fp, GRACE * 2)

    await use_case.run()

    row = repo.rows[fp]
    assert row.status == SettlementStatus.FAILED
    assert row.failed_from_status == SettlementStatus.TREASURY_SENT
    assert row.artist_tx_hash is None


async def test_attempt_held_by_live_request_is_skipped(env) -> None:
    use_case, _, repo, ledger, lease = env
    fp = await _store(
        repo,
        SettlementStatus.MINTED,
        mint_tx_hash=H3,
        collection_address=COLLECTION,
        token_id=4,
        needs_reconciliation=True,
    )
    await lease.acquire(fp, 60)

    summary = await use_case.run()

    assert summary.examined == 1
    assert summary.ledger_repaired == 0
    assert ledger.calls == 0


async def test_ledger_error_is_counted_and_attempt_kept(env) -> None:
    use_case, _, repo, ledger, _ = env
    ledger.fail_times = 1
    fp = await _store(
        repo,
        SettlementStatus.MINTED,
        mint_tx_hash=H3,
        collection_address=COLLECTION,
        token_id=4,
        needs_reconciliation=True,
    )

    summary = await use_case.run()

    assert summary.errors == 1
    assert repo.rows[fp].status == SettlementStatus.MINTED


def _runner(use_case: MagicMock, interval: float = 3600) -> ReconciliationRunner:
    return ReconciliationRunner(lambda: use_case, interval_seconds=interval, batch_size=25)


async def test_runner_notify_wakes_loop_early() -> None:
    ran = asyncio.Event()
    use_case = MagicMock()

    async def run(limit: int) -> ReconciliationSummary:
        ran.set()
        return ReconciliationSummary()

    use_case.run = AsyncMock(side_effect=run)
    runner = _runner(use_case)
    runner.start()
    try:
        runner.notify("f" * 64)
        await asyncio.wait_for(ran.wait(), timeout=1)
    finally:
        await runner.stop()
    use_case.run.assert_awaited_with(limit=25)
    assert runner.pending == frozenset()


async def test_runner_survives_failed_pass() -> None:
    calls = 0
    done = asyncio.Event()
    use_case = MagicMock()

    async def run(limit: int) -> ReconciliationSummary:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise RuntimeError("database unavailable")
        done.set()
        return ReconciliationSummary()

    use_case.run = AsyncMock(side_effect=run)
    runner = _runner(use_case, interval=0.01)
    runner.start()
    try:
        await asyncio.wait_for(done.wait(), timeout=1)
        assert runner.running
    finally:
        await runner.stop()


async def test_disabled_runner_keeps_notifications_for_manual_pass() -> None:
    use_case = MagicMock()
    use_case.run = AsyncMock(return_value=ReconciliationSummary(examined=1, ledger_repaired=1))
    runner = _runner(use_case, interval=0)
    runner.start()
    assert not runner.running

    runner.notify("f" * 64)
    assert runner.pending == {"f" * 64}
    summary = await runner.run_once()
    assert summary.ledger_repaired == 1
    assert runner.pending == frozenset()

"""Reconcile settlements: repair missing ledger rows and settle stale tx hashes.

Never submits a transaction. It only observes the chain and moves attempts
forward (or clears a hash whose transaction reverted or was dropped) so
that the next client retry resumes from the right place.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from arthub.application.dtos.settlement import CollectRequest, ReconciliationSummary
from arthub.domain.enums import SettlementStatus, SettlementStep
from arthub.shared.telemetry.logging import get_logger
from arthub.shared.telemetry.tracing import traced
from arthub.shared.utils.datetime import older_than

if TYPE_CHECKING:
    from arthub.application.interfaces.repositories import (
        ILedgerRecorder,
        ISettlementAttemptRepository,
    )
    from arthub.application.interfaces.services import (
        IChainGateway,
        IMintExecutor,
        ISettlementLease,
    )
    from arthub.domain.entities.settlement import SettlementAttemptEntity

logger = get_logger(__name__)

RECONCILE_DEFAULT_LIMIT = 50
RECONCILE_MAX_LIMIT = 500


class _Outcome(Enum):
    LEDGER_REPAIRED = "ledger_repaired"
    STEP_CONFIRMED = "step_confirmed"
    HASH_CLEARED = "hash_cleared"
    STILL_PENDING = "still_pending"
    SKIPPED = "skipped"


@dataclass
class _Counter:
    examined: int = 0
    ledger_repaired: int = 0
    steps_confirmed: int = 0
    hashes_cleared: int = 0
    still_pending: int = 0
    errors: int = 0

    def add(self, outcomes: list[_Outcome]) -> None:
        for outcome in outcomes:
            match outcome:
                case _Outcome.LEDGER_REPAIRED:
                    self.ledger_repaired += 1
                case _Outcome.STEP_CONFIRMED:
                    self.steps_confirmed += 1
                case _Outcome.HASH_CLEARED:
                    self.hashes_cleared += 1
                case _Outcome.STILL_PENDING:
                    self.still_pending += 1

    def summary(self) -> ReconciliationSummary:
        return ReconciliationSummary(
            examined=self.examined,
            ledger_repaired=self.ledger_repaired,
            steps_confirmed=self.steps_confirmed,
            hashes_cleared=self.hashes_cleared,
            still_pending=self.still_pending,
            errors=self.errors,
        )


class ReconcileSettlementsUseCase:
    """Repairs unpersisted attempts (minted or flagged) and stale pending hashes.

    Each attempt is processed under its settlement lease; attempts held by a
    live request are skipped. Per-attempt failures are logged and counted,
    never abort the batch.
    """

    def __init__(
        self,
        attempt_repo: ISettlementAttemptRepository,
        ledger: ILedgerRecorder,
        gateway: IChainGateway,
        mint_executor: IMintExecutor,
        lease: ISettlementLease,
        pending_grace_seconds: float,
        lease_seconds: int,
    ) -> None:
        self.attempt_repo = attempt_repo
        self.ledger = ledger
        self.gateway = gateway
        self.mint_executor = mint_executor
        self.lease = lease
        self.pending_grace_seconds = pending_grace_seconds
        self.lease_seconds = lease_seconds

    @traced("settlement.reconcile")
    async def run(self, limit: int = RECONCILE_DEFAULT_LIMIT) -> ReconciliationSummary:
        """Reconcile up to limit attempts.

        Returns:
            ReconciliationSummary with per-outcome counts.
        """
        limit = max(1, min(limit, RECONCILE_MAX_LIMIT))
        attempts = await self.attempt_repo.list_for_reconciliation(
            pending_older_than_seconds=self.pending_grace_seconds, limit=limit
        )
        counter = _Counter()
        for attempt in attempts:
            counter.examined += 1
            token = await self.lease.acquire(attempt.fingerprint, self.lease_seconds)
            if token is None:
                logger.debug("Skipping %s: settlement in progress", attempt.fingerprint)
                continue
            try:
                counter.add(await self.reconcile_attempt(attempt))
            except Exception:
                counter.errors += 1
                logger.exception("Reconciliation failed for settlement %s", attempt.fingerprint)
            finally:
                await self.lease.release(attempt.fingerprint, token)

        summary = counter.summary()
        if summary.examined:
            logger.info("Reconciliation pass: %s", summary)
        return summary

    async def reconcile_attempt(self, attempt: SettlementAttemptEntity) -> list[_Outcome]:
        """Advance one attempt as far as the chain allows without submitting anything."""
        outcomes: list[_Outcome] = []
        if attempt.is_persisted:
            return [_Outcome.SKIPPED]

        if not attempt.has_reached(SettlementStatus.MINTED):
            outcome = await self._check_pending_hash(attempt)
            outcomes.append(outcome)
            if not attempt.has_reached(SettlementStatus.MINTED):
                return outcomes

        request = CollectRequest.from_payload(attempt.request_payload)
        if attempt.collection_address is None or attempt.token_id is None:
            if not await self._redecode_mint(attempt, request):
                outcomes.append(_Outcome.STILL_PENDING)
                return outcomes

        sale, nft = await self.ledger.record(attempt, request)
        attempt.mark_persisted(nft_id=nft.id, sale_id=sale.id)
        await self.attempt_repo.save(attempt)
        logger.info(
            "Reconciled settlement %s: sale=%s nft=%s",
            attempt.fingerprint,
            sale.id,
            nft.id,
        )
        outcomes.append(_Outcome.LEDGER_REPAIRED)
        return outcomes

    async def _check_pending_hash(self, attempt: SettlementAttemptEntity) -> _Outcome:
        step = attempt.next_step
        recorded = attempt.tx_hash_for(step) if step is not None else None
        if step is None or not recorded:
            return _Outcome.SKIPPED

        receipt = await self.gateway.get_receipt(recorded)
        if receipt is None:
            if older_than(attempt.updated_at, self.pending_grace_seconds) and not (
                await self.gateway.is_known(recorded)
            ):
                attempt.clear_tx_hash(step)
                await self.attempt_repo.save(attempt)
                logger.warning(
                    "Cleared dropped %s tx %s for settlement %s",
                    step.value,
                    recorded,
                    attempt.fingerprint,
                )
                return _Outcome.HASH_CLEARED
            return _Outcome.STILL_PENDING

        if not receipt.success:
            attempt.clear_tx_hash(step)
            attempt.mark_failed(f"{step.value} transaction {recorded} reverted")
            await self.attempt_repo.save(attempt)
            logger.warning(
                "Settlement %s %s tx %s reverted (found by reconciliation)",
                attempt.fingerprint,
                step.value,
                recorded,
            )
            return _Outcome.HASH_CLEARED

        if step is SettlementStep.MINT:
            collector = attempt.request_payload["collector_address"]
            minted = self.mint_executor.decode(receipt, collector)
            attempt.mark_minted(minted.collection_address, minted.token_id)
        else:
            attempt.confirm_step(step)
        await self.attempt_repo.save(attempt)
        logger.info(
            "Settlement %s %s tx %s confirmed by reconciliation",
            attempt.fingerprint,
            step.value,
            recorded,
        )
        return _Outcome.STEP_CONFIRMED

    async def _redecode_mint(
        self, attempt: SettlementAttemptEntity, request: CollectRequest
    ) -> bool:
        if not attempt.mint_tx_hash:
            return False
        receipt = await self.gateway.get_receipt(attempt.mint_tx_hash)
        if receipt is None or not receipt.success:
            return False
        minted = self.mint_executor.decode(receipt, request.collector_address)
        attempt.collection_address = minted.collection_address
        attempt.token_id = minted.token_id
        return True



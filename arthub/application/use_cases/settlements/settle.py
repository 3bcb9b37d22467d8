"""Collect-and-settle use case: validate, split, transfer, mint, record.

The saga is driven from a persisted attempt keyed by the request
fingerprint. Every retry with the same fingerprint resumes from the last
confirmed step; a fully persisted attempt is answered from storage without
touching the chain.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import replace
from decimal import Decimal
from typing import TYPE_CHECKING

from arthub.application.dtos.chain import ContractCall, TxReceipt
from arthub.application.dtos.settlement import CollectRequest, MintResult, SettlementResult
from arthub.domain.entities.settlement import SettlementAttemptEntity
from arthub.domain.enums import SettlementStatus, SettlementStep
from arthub.domain.exceptions import (
    ArtHubException,
    ChainSubmissionException,
    ConfirmationTimeoutException,
    MintDecodeException,
    PartialSettlementException,
    PersistenceException,
    SettlementInProgressException,
    TransactionRevertedException,
    ValidationException,
)
from arthub.domain.value_objects.core import Address, PaymentSplit, to_base_units
from arthub.shared.telemetry.logging import get_logger
from arthub.shared.telemetry.tracing import add_span_attributes, traced
from arthub.shared.utils.generators import generate_cuid

if TYPE_CHECKING:
    from arthub.application.interfaces.repositories import (
        ILedgerRecorder,
        ISettlementAttemptRepository,
    )
    from arthub.application.interfaces.services import (
        BroadcastCallback,
        IChainGateway,
        IFingerprintService,
        IMintExecutor,
        IPaymentValidator,
        ISettlementLease,
        ISignerQueue,
    )

logger = get_logger(__name__)


def result_from_attempt(
    attempt: SettlementAttemptEntity, ledger_pending: bool = False
) -> SettlementResult:
    """Compose the client-facing result from a minted or persisted attempt."""
    split = attempt.split
    return SettlementResult(
        fingerprint=attempt.fingerprint,
        collection_address=attempt.collection_address or "",
        token_id=attempt.token_id if attempt.token_id is not None else 0,
        treasury_tx_hash=attempt.treasury_tx_hash or "",
        artist_tx_hash=attempt.artist_tx_hash or "",
        mint_tx_hash=attempt.mint_tx_hash or "",
        amount_paid=split.total_usdc,
        treasury_amount=split.treasury_usdc,
        artist_amount=split.artist_usdc,
        nft_id=attempt.nft_id,
        sale_id=attempt.sale_id,
        ledger_pending=ledger_pending,
    )


def _checksummed(request: CollectRequest) -> CollectRequest:
    """Return request with both addresses in EIP-55 form.

    Raises:
        ValidationException: Malformed address or bad mixed-case checksum.
    """
    addresses = {}
    for field_name, attr in (
        ("collectorAddress", "collector_address"),
        ("artistAddress", "artist_address"),
    ):
        try:
            addresses[attr] = Address(getattr(request, attr)).value
        except ValueError as e:
            raise ValidationException(str(e), field=field_name) from e
    return replace(request, **addresses)


class SettlementOrchestrator:
    """Drives one collect request through the settlement state machine.

    VALIDATING -> SPLIT_COMPUTED -> TREASURY_SENT -> ARTIST_SENT -> MINTED
    -> PERSISTED, with FAILED remembering the last successful status. Chain
    steps go through the signer queue; each broadcast hash is saved on the
    attempt before its confirmation is awaited.
    """

    def __init__(
        self,
        attempt_repo: ISettlementAttemptRepository,
        ledger: ILedgerRecorder,
        validator: IPaymentValidator,
        signer_queue: ISignerQueue,
        mint_executor: IMintExecutor,
        gateway: IChainGateway,
        fingerprint_service: IFingerprintService,
        lease: ISettlementLease,
        treasury_wallet: str,
        fee_bps: int,
        minimum_amount_usdc: Decimal,
        lease_seconds: int,
        on_ledger_pending: Callable[[str], None] | None = None,
    ) -> None:
        self.attempt_repo = attempt_repo
        self.ledger = ledger
        self.validator = validator
        self.signer_queue = signer_queue
        self.mint_executor = mint_executor
        self.gateway = gateway
        self.fingerprint_service = fingerprint_service
        self.lease = lease
        self.treasury_wallet = treasury_wallet
        self.fee_bps = fee_bps
        self.minimum_amount_usdc = minimum_amount_usdc
        self.lease_seconds = lease_seconds
        self.on_ledger_pending = on_ledger_pending

    @traced("settlement.settle")
    async def settle(self, request: CollectRequest) -> SettlementResult:
        """Run (or resume) the saga for request. Idempotent on its fingerprint.

        Raises:
            ValidationException: Bad amount or address; no attempt created.
            InsufficientBalanceException, InsufficientAllowanceException:
                Collector cannot pay; no attempt created.
            RelayerUnderfundedException: Signer cannot pay gas.
            SettlementInProgressException: Another worker holds this fingerprint.
            ChainSubmissionException: Nothing broadcast and no money moved.
            ConfirmationTimeoutException: Hash recorded but not yet confirmed.
            TransactionRevertedException: Treasury transfer reverted.
            PartialSettlementException: A step after the treasury transfer failed.
        """
        request, total = self._check_request(request)
        fingerprint = self.fingerprint_service.compute(request)
        add_span_attributes(**{"settlement.fingerprint": fingerprint})

        async with self._claim(fingerprint):
            attempt = await self.attempt_repo.get_by_fingerprint(fingerprint)
            if attempt is not None and attempt.is_persisted:
                logger.info("Settlement %s already persisted; returning recorded result", fingerprint)
                return result_from_attempt(attempt)

            if attempt is None:
                await self.validator.validate(request.collector_address, total)
                await self.validator.check_relayer_funds()
                attempt = await self._create_attempt(fingerprint, request, total)
            else:
                # Records are always derived from the first request for this fingerprint.
                request = _checksummed(CollectRequest.from_payload(attempt.request_payload))
                logger.info(
                    "Resuming settlement %s from %s",
                    fingerprint,
                    attempt.resume_status.value,
                )
                remaining = attempt.remaining_base_units()
                if remaining:
                    await self.validator.validate(request.collector_address, remaining)
                if attempt.next_step is not None:
                    await self.validator.check_relayer_funds()

            await self._execute_steps(attempt, request)
            return await self._persist(attempt, request)

    def _check_request(self, request: CollectRequest) -> tuple[CollectRequest, int]:
        if request.amount_usdc < self.minimum_amount_usdc:
            raise ValidationException(
                f"Minimum purchase amount is {self.minimum_amount_usdc} USDC",
                field="amountUSDC",
            )
        request = _checksummed(request)
        try:
            return request, to_base_units(request.amount_usdc)
        except ValueError as e:
            raise ValidationException(str(e), field="amountUSDC") from e

    @asynccontextmanager
    async def _claim(self, fingerprint: str) -> AsyncIterator[None]:
        token = await self.lease.acquire(fingerprint, self.lease_seconds)
        if token is None:
            logger.info("Settlement %s already in progress elsewhere", fingerprint)
            raise SettlementInProgressException(fingerprint)
        try:
            yield
        finally:
            await self.lease.release(fingerprint, token)

    async def _create_attempt(
        self, fingerprint: str, request: CollectRequest, total: int
    ) -> SettlementAttemptEntity:
        split = PaymentSplit.compute(total, self.fee_bps)
        attempt = await self.attempt_repo.create(
            SettlementAttemptEntity(
                id=generate_cuid(),
                fingerprint=fingerprint,
                status=SettlementStatus.VALIDATING,
                request_payload=request.to_payload(),
                total_base_units=split.total_base_units,
                treasury_base_units=split.treasury_base_units,
                artist_base_units=split.artist_base_units,
            )
        )
        attempt.advance_to(SettlementStatus.SPLIT_COMPUTED)
        await self.attempt_repo.save(attempt)
        logger.info(
            "Settlement %s split computed: total=%s treasury=%s artist=%s",
            fingerprint,
            split.total_base_units,
            split.treasury_base_units,
            split.artist_base_units,
        )
        return attempt

    def _build_call(
        self, step: SettlementStep, attempt: SettlementAttemptEntity, request: CollectRequest
    ) -> ContractCall:
        """transferFrom call for the treasury or artist step."""
        if step is SettlementStep.TREASURY:
            to, amount = self.treasury_wallet, attempt.treasury_base_units
        else:
            to, amount = request.artist_address, attempt.artist_base_units
        return ContractCall(
            address=self.gateway.token_address,
            abi_name="erc20",
            function="transferFrom",
            args=(request.collector_address, to, amount),
            label=step.value,
        )

    async def _execute_steps(self, attempt: SettlementAttemptEntity, request: CollectRequest) -> None:
        for step in SettlementStep:
            if attempt.is_step_confirmed(step):
                continue
            try:
                if step is SettlementStep.MINT:
                    minted = await self._run_mint(attempt, request)
                    attempt.mark_minted(minted.collection_address, minted.token_id)
                    tx_hash = minted.tx_hash
                else:
                    receipt = await self._run_step(attempt, step, self._build_call(step, attempt, request))
                    if not receipt.success:
                        await self._handle_revert(attempt, step, receipt.tx_hash)
                    attempt.confirm_step(step)
                    tx_hash = receipt.tx_hash
                await self._save_confirmed(attempt, step)
                logger.info(
                    "Settlement %s %s confirmed (tx %s)", attempt.fingerprint, step.value, tx_hash
                )
            except (ChainSubmissionException, MintDecodeException, PersistenceException) as e:
                if not attempt.is_step_confirmed(SettlementStep.TREASURY):
                    raise
                await self._fail_partial(attempt, step, e)

    async def _save_confirmed(self, attempt: SettlementAttemptEntity, step: SettlementStep) -> None:
        try:
            await self.attempt_repo.save(attempt)
        except Exception as e:
            logger.exception(
                "Could not save confirmed %s step for settlement %s", step.value, attempt.fingerprint
            )
            raise PersistenceException(attempt.fingerprint, str(e)) from e

    async def _recheck(self, attempt: SettlementAttemptEntity, step: SettlementStep) -> TxReceipt | None:
        """Receipt of the step's recorded hash if it succeeded, None if there is nothing to follow."""
        recorded = attempt.tx_hash_for(step)
        if not recorded:
            return None
        receipt = await self.gateway.get_receipt(recorded)
        if receipt is None:
            logger.info(
                "Settlement %s %s tx %s still unconfirmed", attempt.fingerprint, step.value, recorded
            )
            raise ConfirmationTimeoutException(step.value, recorded, 0)
        if receipt.success:
            return receipt
        logger.warning(
            "Settlement %s %s tx %s reverted; resubmitting", attempt.fingerprint, step.value, recorded
        )
        attempt.clear_tx_hash(step)
        await self.attempt_repo.save(attempt)
        return None

    def _hash_recorder(self, attempt: SettlementAttemptEntity, step: SettlementStep) -> BroadcastCallback:
        async def record_hash(tx_hash: str) -> None:
            attempt.record_tx_hash(step, tx_hash)
            await self.attempt_repo.save(attempt)

        return record_hash

    async def _run_step(
        self, attempt: SettlementAttemptEntity, step: SettlementStep, call: ContractCall
    ) -> TxReceipt:
        """Re-check a recorded hash, or submit the step through the signer queue."""
        receipt = await self._recheck(attempt, step)
        if receipt is not None:
            return receipt
        return await self.signer_queue.enqueue(call, on_broadcast=self._hash_recorder(attempt, step))

    async def _run_mint(self, attempt: SettlementAttemptEntity, request: CollectRequest) -> MintResult:
        step = SettlementStep.MINT
        receipt = await self._recheck(attempt, step)
        if receipt is not None:
            return self.mint_executor.decode(receipt, request.collector_address)
        try:
            return await self.mint_executor.mint(
                request.metadata,
                recipient=request.collector_address,
                artist=request.artist_address,
                on_broadcast=self._hash_recorder(attempt, step),
            )
        except TransactionRevertedException as e:
            await self._handle_revert(attempt, step, e.tx_hash)
            raise

    async def _handle_revert(
        self, attempt: SettlementAttemptEntity, step: SettlementStep, tx_hash: str
    ) -> None:
        attempt.clear_tx_hash(step)
        if step is SettlementStep.TREASURY:
            attempt.mark_failed(f"{step.value} transaction {tx_hash} reverted")
            await self.attempt_repo.save(attempt)
            logger.warning("Settlement %s treasury transfer %s reverted", attempt.fingerprint, tx_hash)
            raise TransactionRevertedException(step.value, tx_hash)
        await self._fail_partial(attempt, step, TransactionRevertedException(step.value, tx_hash))

    async def _fail_partial(
        self, attempt: SettlementAttemptEntity, step: SettlementStep, cause: ArtHubException
    ) -> None:
        reason = f"{cause.error_code}: {cause.message}"
        attempt.mark_failed(reason)
        try:
            await self.attempt_repo.save(attempt)
        except Exception:
            # The stored row keeps its last saved status; a retry resumes from there.
            logger.exception("Could not record failure of settlement %s", attempt.fingerprint)
        logger.error(
            "Partial settlement %s: %s step failed after %s (%s); treasury=%s artist=%s mint=%s",
            attempt.fingerprint,
            step.value,
            attempt.failed_from_status.value if attempt.failed_from_status else None,
            reason,
            attempt.treasury_tx_hash,
            attempt.artist_tx_hash,
            attempt.mint_tx_hash,
        )
        raise PartialSettlementException(
            fingerprint=attempt.fingerprint,
            failed_step=step.value,
            last_completed_status=attempt.resume_status.value,
            reason=reason,
            treasury_tx_hash=attempt.treasury_tx_hash,
            artist_tx_hash=attempt.artist_tx_hash,
            mint_tx_hash=attempt.mint_tx_hash,
        ) from cause

    async def _persist(
        self, attempt: SettlementAttemptEntity, request: CollectRequest
    ) -> SettlementResult:
        try:
            sale, nft = await self.ledger.record(attempt, request)
        except PersistenceException as e:
            logger.exception(
                "Ledger write failed for settlement %s; queued for reconciliation", attempt.fingerprint
            )
            attempt.flag_for_reconciliation(str(e.details.get("reason", e.message)))
            try:
                await self.attempt_repo.save(attempt)
            except Exception:
                logger.exception("Could not flag settlement %s for reconciliation", attempt.fingerprint)
            if self.on_ledger_pending is not None:
                self.on_ledger_pending(attempt.fingerprint)
            return result_from_attempt(attempt, ledger_pending=True)

        attempt.mark_persisted(nft_id=nft.id, sale_id=sale.id)
        try:
            await self.attempt_repo.save(attempt)
        except Exception:
            # Ledger rows exist; the attempt stays MINTED until reconciliation
            # re-records (idempotently) and marks it persisted.
            logger.exception(
                "Could not mark settlement %s persisted; queued for reconciliation",
                attempt.fingerprint,
            )
            if self.on_ledger_pending is not None:
                self.on_ledger_pending(attempt.fingerprint)
            return result_from_attempt(attempt)
        logger.info(
            "Settlement %s persisted: sale=%s nft=%s", attempt.fingerprint, sale.id, nft.id
        )
        return result_from_attempt(attempt)

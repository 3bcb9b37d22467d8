"""Signer queue: the single actor that owns the platform signer's nonce.

Every state-changing transaction goes through one asyncio worker. Jobs run
strictly in enqueue order and the next job starts only after the previous
one has a receipt (or timed out), so nonces are assigned without gaps or
collisions even when many requests settle concurrently.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass

from arthub.application.dtos.chain import ContractCall, TxReceipt
from arthub.application.interfaces.services import BroadcastCallback, IChainGateway
from arthub.domain.exceptions import (
    ArtHubException,
    ChainSubmissionException,
    ConfirmationTimeoutException,
)

logger = logging.getLogger(__name__)


@dataclass
class _Job:
    call: ContractCall
    on_broadcast: BroadcastCallback | None
    future: asyncio.Future[TxReceipt]


class SignerQueue:
    """FIFO transaction actor for one signing key (ISignerQueue).

    The nonce is seeded from the signer's pending transaction count and
    incremented locally after each broadcast. Any submission failure drops
    the cached nonce so the next job re-reads it from the node. A failure
    that still carries a signed hash is handled as a broadcast: the callback
    fires and the queue waits on that hash.

    Callers awaiting enqueue() may be cancelled (e.g. HTTP disconnect); the
    job still runs to completion so its broadcast callback fires.
    """

    def __init__(self, gateway: IChainGateway, confirmation_timeout: float) -> None:
        self.gateway = gateway
        self.confirmation_timeout = confirmation_timeout
        self._queue: asyncio.Queue[_Job] = asyncio.Queue()
        self._worker: asyncio.Task[None] | None = None
        self._nonce: int | None = None

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def start(self) -> None:
        """Start the worker task. Idempotent."""
        if self.running:
            return
        self._worker = asyncio.create_task(self._run(), name="signer-queue")
        logger.info("Signer queue started for %s", self.gateway.signer_address)

    async def stop(self) -> None:
        """Cancel the worker and fail any jobs still waiting."""
        if self._worker is not None:
            self._worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._worker
            self._worker = None
        while not self._queue.empty():
            job = self._queue.get_nowait()
            if not job.future.done():
                job.future.set_exception(
                    ChainSubmissionException(job.call.label, "signer queue stopped")
                )
            self._queue.task_done()
        logger.info("Signer queue stopped")

    async def enqueue(
        self, call: ContractCall, on_broadcast: BroadcastCallback | None = None
    ) -> TxReceipt:
        """Submit call after every previously enqueued job and wait for its receipt.

        Args:
            call: Contract call to sign and broadcast.
            on_broadcast: Awaited with the tx hash right after broadcast and
                before the confirmation wait.

        Returns:
            Mined receipt (success may be False for a revert).

        Raises:
            ChainSubmissionException: Nothing was broadcast.
            ConfirmationTimeoutException: Broadcast, but no receipt in time.
        """
        if not self.running:
            raise ChainSubmissionException(call.label, "signer queue is not running")
        future: asyncio.Future[TxReceipt] = asyncio.get_running_loop().create_future()
        await self._queue.put(_Job(call=call, on_broadcast=on_broadcast, future=future))
        return await asyncio.shield(future)

    async def _run(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                receipt = await self._process(job)
            except ArtHubException as e:
                if not job.future.done():
                    job.future.set_exception(e)
            except Exception as e:
                logger.exception("Unexpected error processing %s", job.call.label)
                self._nonce = None
                if not job.future.done():
                    job.future.set_exception(ChainSubmissionException(job.call.label, str(e)))
            else:
                if not job.future.done():
                    job.future.set_result(receipt)
            finally:
                self._queue.task_done()

    async def _process(self, job: _Job) -> TxReceipt:
        if self._nonce is None:
            self._nonce = await self.gateway.get_pending_nonce()
            logger.debug("Signer nonce synced to %s", self._nonce)
        nonce = self._nonce
        try:
            tx_hash = await self.gateway.send_transaction(job.call, nonce)
        except ChainSubmissionException as e:
            self._nonce = None
            if e.tx_hash is None:
                raise
            # The node may already hold this transaction; wait on its hash.
            tx_hash = e.tx_hash
            logger.warning(
                "Broadcast of %s tx %s (nonce %s) unconfirmed by node; waiting on its hash",
                job.call.label,
                tx_hash,
                nonce,
            )
        else:
            self._nonce = nonce + 1
            logger.info("Broadcast %s tx %s (nonce %s)", job.call.label, tx_hash, nonce)

        if job.on_broadcast is not None:
            try:
                await job.on_broadcast(tx_hash)
            except Exception:
                # The transaction is already on the wire; keep waiting so the
                # caller still learns its outcome.
                logger.exception("Broadcast callback failed for %s tx %s", job.call.label, tx_hash)

        receipt = await self.gateway.wait_for_receipt(tx_hash, self.confirmation_timeout)
        if receipt is None:
            logger.warning(
                "%s tx %s not confirmed within %ss", job.call.label, tx_hash, self.confirmation_timeout
            )
            raise ConfirmationTimeoutException(job.call.label, tx_hash, self.confirmation_timeout)
        logger.info(
            "%s tx %s mined in block %s (success=%s)",
            job.call.label,
            tx_hash,
            receipt.block_number,
            receipt.success,
        )
        return receipt

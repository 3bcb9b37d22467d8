"""Periodic reconciliation task started by the lifespan.

Runs a reconciliation pass every interval, or sooner when a settlement
reports that its ledger write failed (notify).
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable

from arthub.application.dtos.settlement import ReconciliationSummary
from arthub.application.use_cases.settlements import ReconcileSettlementsUseCase

logger = logging.getLogger(__name__)


class ReconciliationRunner:
    """Background loop around ReconcileSettlementsUseCase.

    interval_seconds <= 0 disables the loop; flagged attempts then wait for
    the reconcile endpoint or the run_reconciliation script.
    """

    def __init__(
        self,
        build_use_case: Callable[[], ReconcileSettlementsUseCase],
        interval_seconds: float,
        batch_size: int,
    ) -> None:
        self.build_use_case = build_use_case
        self.interval_seconds = interval_seconds
        self.batch_size = batch_size
        self._wake = asyncio.Event()
        self._pending: set[str] = set()
        self._task: asyncio.Task[None] | None = None

    @property
    def enabled(self) -> bool:
        return self.interval_seconds > 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> frozenset[str]:
        """Fingerprints queued by notify() and not yet covered by a pass."""
        return frozenset(self._pending)

    def start(self) -> None:
        if not self.enabled or self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="reconciliation-runner")
        logger.info("Reconciliation runner started (every %ss)", self.interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Reconciliation runner stopped")

    def notify(self, fingerprint: str) -> None:
        """Queue fingerprint for repair and wake the loop."""
        self._pending.add(fingerprint)
        if self.running:
            self._wake.set()
        else:
            logger.warning(
                "Settlement %s needs reconciliation; runner is not active", fingerprint
            )

    async def run_once(self) -> ReconciliationSummary:
        self._pending.clear()
        return await self.build_use_case().run(limit=self.batch_size)

    async def _loop(self) -> None:
        while True:
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._wake.wait(), timeout=self.interval_seconds)
            self._wake.clear()
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Reconciliation pass failed")

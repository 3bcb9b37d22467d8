"""Composition root for the settlement saga.

Process-wide chain resources (gateway, signer queue, lease) are created once
by the lifespan (or a script) and held in SettlementServices; use cases are
built per request or per reconciliation pass from them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from arthub.application.services import (
    FingerprintService,
    MintExecutor,
    PaymentValidator,
)
from arthub.application.use_cases.settlements import (
    ReconcileSettlementsUseCase,
    SettlementOrchestrator,
)
from arthub.core.config import Settings
from arthub.infrastructure.chain import SignerQueue, Web3ChainGateway
from arthub.infrastructure.locks import RedisSettlementLease
from arthub.infrastructure.persistence.database import get_session_factory
from arthub.infrastructure.persistence.ledger_recorder import LedgerRecorder
from arthub.infrastructure.persistence.repositories import SettlementAttemptRepository


@dataclass
class SettlementServices:
    """Long-lived chain resources shared by every settlement."""

    gateway: Web3ChainGateway
    signer_queue: SignerQueue
    lease: RedisSettlementLease

    @classmethod
    def from_settings(cls, settings: Settings) -> SettlementServices:
        gateway = Web3ChainGateway.from_settings(settings)
        return cls(
            gateway=gateway,
            signer_queue=SignerQueue(gateway, settings.confirmation_timeout_seconds),
            lease=RedisSettlementLease(settings),
        )

    async def start(self, connect_redis: bool) -> None:
        if connect_redis:
            await self.lease.connect()
        await self.signer_queue.start()

    async def close(self) -> None:
        await self.signer_queue.stop()
        await self.lease.disconnect()
        await self.gateway.close()


def _mint_executor(services: SettlementServices, settings: Settings) -> MintExecutor:
    return MintExecutor(
        gateway=services.gateway,
        signer_queue=services.signer_queue,
        royalty_bps=settings.royalty_bps,
        symbol=settings.collection_symbol,
    )


def _ledger(settings: Settings) -> LedgerRecorder:
    return LedgerRecorder(
        get_session_factory(),
        network=settings.network,
        royalty_bps=settings.royalty_bps,
    )


def build_orchestrator(
    services: SettlementServices,
    settings: Settings,
    on_ledger_pending: Callable[[str], None] | None = None,
) -> SettlementOrchestrator:
    """Build the saga orchestrator. Raises SqlNotConfiguredException without DATABASE_URL."""
    return SettlementOrchestrator(
        attempt_repo=SettlementAttemptRepository(get_session_factory()),
        ledger=_ledger(settings),
        validator=PaymentValidator(services.gateway, settings.min_relayer_balance_wei),
        mint_executor=_mint_executor(services, settings),
        gateway=services.gateway,
        fingerprint_service=FingerprintService(),
        lease=services.lease,
        treasury_wallet=settings.treasury_wallet,
        fee_bps=settings.treasury_fee_bps,
        minimum_amount_usdc=settings.minimum_amount_usdc,
        lease_seconds=settings.settlement_lease_seconds,
        on_ledger_pending=on_ledger_pending,
    )


def build_reconciler(
    services: SettlementServices, settings: Settings
) -> ReconcileSettlementsUseCase:
    return ReconcileSettlementsUseCase(
        attempt_repo=SettlementAttemptRepository(get_session_factory()),
        ledger=_ledger(settings),
        gateway=services.gateway,
        mint_executor=_mint_executor(services, settings),
        lease=services.lease,
        pending_grace_seconds=settings.reconciliation_pending_grace_seconds,
        lease_seconds=settings.settlement_lease_seconds,
    )

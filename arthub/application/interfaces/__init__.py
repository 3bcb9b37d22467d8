"""Application interfaces (ports)."""

from arthub.application.interfaces.repositories import (
    ILedgerRecorder,
    ISaleRepository,
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

__all__ = [
    "BroadcastCallback",
    "IChainGateway",
    "IFingerprintService",
    "ILedgerRecorder",
    "IMintExecutor",
    "IPaymentValidator",
    "ISaleRepository",
    "ISettlementAttemptRepository",
    "ISettlementLease",
    "ISignerQueue",
]

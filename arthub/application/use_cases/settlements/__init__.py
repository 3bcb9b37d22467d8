"""Settlement use cases: collect-and-settle saga and reconciliation."""

from arthub.application.use_cases.settlements.reconcile import ReconcileSettlementsUseCase
from arthub.application.use_cases.settlements.settle import (
    SettlementOrchestrator,
    result_from_attempt,
)

__all__ = ["ReconcileSettlementsUseCase", "SettlementOrchestrator", "result_from_attempt"]

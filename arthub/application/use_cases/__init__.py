"""Application use cases: one entry point per workflow."""

from arthub.application.use_cases.sales import SalesReportingUseCase
from arthub.application.use_cases.settlements import (
    ReconcileSettlementsUseCase,
    SettlementOrchestrator,
)

__all__ = [
    "ReconcileSettlementsUseCase",
    "SalesReportingUseCase",
    "SettlementOrchestrator",
]

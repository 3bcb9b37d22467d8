"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions and application use cases.
Use cases are built from the process-wide settlement services on
app.state; routes depend only on these dependencies, not on infra directly.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from arthub.application.interfaces.repositories import ISettlementAttemptRepository
from arthub.application.use_cases.sales import SalesReportingUseCase
from arthub.application.use_cases.settlements import (
    ReconcileSettlementsUseCase,
    SettlementOrchestrator,
)
from arthub.core.config import Settings, get_settings
from arthub.core.container import SettlementServices, build_orchestrator, build_reconciler
from arthub.core.reconciliation_runner import ReconciliationRunner
from arthub.infrastructure.persistence.database import get_db, get_session_factory
from arthub.infrastructure.persistence.repositories import (
    SaleRepository,
    SettlementAttemptRepository,
)


def get_settlement_services(request: Request) -> SettlementServices:
    """Chain resources created by the lifespan; 503 before startup completes."""
    services = getattr(request.app.state, "settlement_services", None)
    if services is None:
        raise HTTPException(status_code=503, detail="Settlement services are not running")
    return services


def get_reconciliation_runner(request: Request) -> ReconciliationRunner | None:
    return getattr(request.app.state, "reconciliation_runner", None)


def get_orchestrator(
    services: Annotated[SettlementServices, Depends(get_settlement_services)],
    runner: Annotated[ReconciliationRunner | None, Depends(get_reconciliation_runner)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SettlementOrchestrator:
    return build_orchestrator(
        services,
        settings,
        on_ledger_pending=runner.notify if runner is not None else None,
    )


def get_reconciler(
    services: Annotated[SettlementServices, Depends(get_settlement_services)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ReconcileSettlementsUseCase:
    return build_reconciler(services, settings)


def get_attempt_repo() -> ISettlementAttemptRepository:
    return SettlementAttemptRepository(get_session_factory())


def get_sales_use_case(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SalesReportingUseCase:
    return SalesReportingUseCase(SaleRepository(db))

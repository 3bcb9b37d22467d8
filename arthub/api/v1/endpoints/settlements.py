"""Settlement operator API: attempt status and on-demand reconciliation."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request

from arthub.api.v1.dependencies import get_attempt_repo, get_reconciler
from arthub.application.interfaces.repositories import ISettlementAttemptRepository
from arthub.application.use_cases.settlements import ReconcileSettlementsUseCase
from arthub.application.use_cases.settlements.reconcile import (
    RECONCILE_DEFAULT_LIMIT,
    RECONCILE_MAX_LIMIT,
)
from arthub.core.limiter import limit_writes
from arthub.domain.exceptions import ResourceNotFoundException
from arthub.schemas.settlement import ReconcileResponse, SettlementStatusResponse

router = APIRouter()


@router.post("/reconcile", response_model=ReconcileResponse)
@limit_writes
async def reconcile_settlements(
    request: Request,
    reconciler: Annotated[ReconcileSettlementsUseCase, Depends(get_reconciler)],
    limit: Annotated[
        int,
        Query(ge=1, le=RECONCILE_MAX_LIMIT, description="Max attempts to examine"),
    ] = RECONCILE_DEFAULT_LIMIT,
) -> ReconcileResponse:
    """Run one reconciliation pass now. Never submits transactions."""
    summary = await reconciler.run(limit=limit)
    return ReconcileResponse.from_summary(summary)


@router.get("/{fingerprint}", response_model=SettlementStatusResponse)
async def get_settlement(
    fingerprint: Annotated[str, Path(pattern=r"^[0-9a-f]{64}$")],
    attempt_repo: Annotated[ISettlementAttemptRepository, Depends(get_attempt_repo)],
) -> SettlementStatusResponse:
    """Return the saga state recorded for a request fingerprint."""
    attempt = await attempt_repo.get_by_fingerprint(fingerprint)
    if attempt is None:
        raise ResourceNotFoundException("Settlement", fingerprint)
    return SettlementStatusResponse.from_entity(attempt)

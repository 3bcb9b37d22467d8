"""Gallery collect API: pay for an artwork and receive its NFT."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from arthub.api.v1.dependencies import get_orchestrator
from arthub.application.use_cases.settlements import SettlementOrchestrator
from arthub.core.limiter import limit_collect
from arthub.schemas.settlement import (
    CollectRequestBody,
    CollectResponse,
    SettlementResultData,
)

router = APIRouter()

COLLECTED_MESSAGE = "NFT collected successfully"
LEDGER_PENDING_MESSAGE = "NFT collected successfully; sale record is pending reconciliation"


@router.post("/collect", response_model=CollectResponse)
@limit_collect
async def collect_artwork(
    request: Request,
    body: CollectRequestBody,
    orchestrator: Annotated[SettlementOrchestrator, Depends(get_orchestrator)],
) -> CollectResponse:
    """Split the payment (treasury, artist), mint the NFT to the collector, record the sale.

    Safe to retry with the same body: a settled request returns its stored
    result and a partially settled one resumes from its last confirmed step.
    """
    result = await orchestrator.settle(body.to_dto())
    return CollectResponse(
        message=LEDGER_PENDING_MESSAGE if result.ledger_pending else COLLECTED_MESSAGE,
        data=SettlementResultData.from_result(result),
    )

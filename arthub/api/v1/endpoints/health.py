"""Health endpoints: liveness and relayer (signer) funding."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from web3 import Web3

from arthub.api.v1.dependencies import get_settlement_services
from arthub.core.config import Settings, get_settings
from arthub.core.container import SettlementServices
from arthub.schemas.health import HealthResponse, RelayerHealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/relayer",
    response_model=RelayerHealthResponse,
    responses={503: {"description": "Signer balance below minimum", "model": RelayerHealthResponse}},
)
async def relayer_health(
    services: Annotated[SettlementServices, Depends(get_settlement_services)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RelayerHealthResponse | JSONResponse:
    """Report the signer's native balance; 503 when it cannot cover gas."""
    gateway = services.gateway
    balance = await gateway.get_native_balance(gateway.signer_address)
    sufficient = balance >= settings.min_relayer_balance_wei
    body = RelayerHealthResponse(
        status="ok" if sufficient else "underfunded",
        network=settings.network,
        chain_id=settings.network_config.chain_id,
        signer_address=gateway.signer_address,
        balance_wei=str(balance),
        balance_eth=str(Web3.from_wei(balance, "ether")),
        min_balance_wei=str(settings.min_relayer_balance_wei),
        sufficient=sufficient,
        signer_queue_running=services.signer_queue.running,
    )
    if sufficient:
        return body
    return JSONResponse(status_code=503, content=body.model_dump(mode="json", by_alias=True))

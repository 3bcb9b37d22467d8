"""Health check API schemas."""

from pydantic import BaseModel, Field

from arthub.schemas.settlement import CamelModel


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")


class RelayerHealthResponse(CamelModel):
    """Response for GET /health/relayer."""

    status: str = Field(..., description="ok or underfunded")
    network: str
    chain_id: int
    signer_address: str
    balance_wei: str
    balance_eth: str
    min_balance_wei: str
    sufficient: bool
    signer_queue_running: bool

"""Tests for POST /api/v1/gallery/collect (orchestrator overridden; no chain or DB)."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from arthub.api.v1.dependencies import get_orchestrator
from arthub.application.dtos.settlement import SettlementResult
from arthub.domain.exceptions import (
    InsufficientAllowanceException,
    PartialSettlementException,
    SettlementInProgressException,
    ValidationException,
)
from arthub.main import app
from tests.fakes import ARTIST, COLLECTION, COLLECTOR, SIGNER, TOKEN

URL = "/api/v1/gallery/collect"
FP = "f" * 64

BODY = {
    "artworkId": "artwork-1",
    "collectorAddress": COLLECTOR,
    "artistAddress": ARTIST,
    "amountUSDC": 10,
    "metadata": {
        "name": "Sunrise",
        "description": "Oil on canvas",
        "imageHash": "QmImage",
        "metadataHash": "QmMeta",
        "artistName": "Ada",
    },
}


def _result(**overrides) -> SettlementResult:
    values = dict(
        fingerprint=FP,
        collection_address=COLLECTION,
        token_id=2**70,
        treasury_tx_hash="0x01",
        artist_tx_hash="0x02",
        mint_tx_hash="0x03",
        amount_paid=Decimal("10"),
        treasury_amount=Decimal("0.5"),
        artist_amount=Decimal("9.5"),
        nft_id="nft1",
        sale_id="sale1",
    )
    values.update(overrides)
    return SettlementResult(**values)


@pytest.fixture
def orchestrator() -> AsyncMock:
    mock = AsyncMock()
    mock.settle.return_value = _result()
    app.dependency_overrides[get_orchestrator] = lambda: mock
    return mock


async def test_collect_returns_camel_case_result(
    client: AsyncClient, orchestrator: AsyncMock
) -> None:
    response = await client.post(URL, json=BODY)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "NFT collected successfully"
    data = body["data"]
    assert data["collectionAddress"] == COLLECTION
    assert data["tokenId"] == str(2**70)
    assert data["amountPaid"] == 10.0
    assert data["treasuryAmount"] == 0.5
    assert data["artistAmount"] == 9.5
    assert data["saleId"] == "sale1"
    assert data["ledgerPending"] is False

    request = orchestrator.settle.await_args.args[0]
    assert request.amount_usdc == Decimal("10")
    assert request.metadata.image_hash == "QmImage"


async def test_collect_reports_pending_ledger(
    client: AsyncClient, orchestrator: AsyncMock
) -> None:
    orchestrator.settle.return_value = _result(nft_id=None, sale_id=None, ledger_pending=True)
    response = await client.post(URL, json=BODY)
    assert response.status_code == 200
    body = response.json()
    assert "pending reconciliation" in body["message"]
    assert body["data"]["ledgerPending"] is True
    assert body["data"]["saleId"] is None


async def test_collect_strips_artwork_id(client: AsyncClient, orchestrator: AsyncMock) -> None:
    await client.post(URL, json={**BODY, "artworkId": "  artwork-1  "})
    assert orchestrator.settle.await_args.args[0].artwork_id == "artwork-1"


@pytest.mark.parametrize(
    "change",
    [
        {"amountUSDC": 0},
        {"amountUSDC": -1},
        {"artworkId": "   "},
        {"metadata": {"name": "Sunrise"}},
    ],
)
async def test_collect_invalid_body_returns_400(
    client: AsyncClient, orchestrator: AsyncMock, change: dict
) -> None:
    response = await client.post(URL, json={**BODY, **change})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "VALIDATION_ERROR"
    assert body["details"]
    orchestrator.settle.assert_not_awaited()


async def test_below_minimum_returns_400(client: AsyncClient, orchestrator: AsyncMock) -> None:
    orchestrator.settle.side_effect = ValidationException(
        "Minimum purchase is 0.10 USDC", field="amount_usdc"
    )
    response = await client.post(URL, json={**BODY, "amountUSDC": 0.05})
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_missing_allowance_returns_approval_instruction(
    client: AsyncClient, orchestrator: AsyncMock
) -> None:
    orchestrator.settle.side_effect = InsufficientAllowanceException(
        token_address=TOKEN,
        spender=SIGNER,
        amount_base_units=10_000_000,
        allowance_base_units=0,
    )
    response = await client.post(URL, json=BODY)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["needsApproval"] is True
    assert body["approvalData"] == {
        "tokenAddress": TOKEN,
        "spender": SIGNER,
        "amount": "10000000",
    }


async def test_concurrent_settlement_returns_409(
    client: AsyncClient, orchestrator: AsyncMock
) -> None:
    orchestrator.settle.side_effect = SettlementInProgressException(FP)
    response = await client.post(URL, json=BODY)
    assert response.status_code == 409
    assert response.json()["error"] == "SETTLEMENT_IN_PROGRESS"


async def test_partial_settlement_returns_500_with_hashes(
    client: AsyncClient, orchestrator: AsyncMock
) -> None:
    orchestrator.settle.side_effect = PartialSettlementException(
        fingerprint=FP,
        failed_step="mint",
        last_completed_status="artist_sent",
        reason="reverted",
        treasury_tx_hash="0x01",
        artist_tx_hash="0x02",
    )
    response = await client.post(URL, json=BODY)
    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "PARTIAL_SETTLEMENT"
    assert body["details"]["failed_step"] == "mint"
    assert body["details"]["retryable"] is True
    assert body["details"]["treasury_tx_hash"] == "0x01"


async def test_collect_without_running_services_returns_503(client: AsyncClient) -> None:
    """Lifespan is not run by the client fixture, so no settlement services exist."""
    response = await client.post(URL, json=BODY)
    assert response.status_code == 503
    assert response.json()["success"] is False

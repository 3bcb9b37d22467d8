"""MintExecutor: factory call construction and typed event decoding."""

import pytest

from arthub.application.dtos.chain import TxReceipt
from arthub.application.services.mint_executor import MintExecutor
from arthub.domain.exceptions import MintDecodeException, TransactionRevertedException
from arthub.infrastructure.chain.signer_queue import SignerQueue
from tests.fakes import ARTIST, COLLECTION, COLLECTOR, FACTORY, FakeChainGateway, make_request


def _executor(gateway: FakeChainGateway, queue: SignerQueue | None = None) -> MintExecutor:
    return MintExecutor(
        gateway=gateway,
        signer_queue=queue or SignerQueue(gateway, confirmation_timeout=1.0),
        royalty_bps=250,
        symbol="CLCT",
    )


def _receipt(events: list[dict]) -> TxReceipt:
    return TxReceipt(tx_hash="0x" + "9" * 64, success=True, raw={"events": events})


def test_build_call_targets_factory_with_token_uri_and_recipient() -> None:
    metadata = make_request().metadata
    call = _executor(FakeChainGateway()).build_call(metadata, artist=ARTIST, recipient=COLLECTOR)
    assert call.address == FACTORY
    assert call.function == "createCollection"
    assert call.args == ("Sunrise", "CLCT", "ipfs://QmMeta", ARTIST, 250, COLLECTOR)
    assert call.label == "mint"


def test_decode_skips_unrelated_leading_events() -> None:
    other = "0x" + "d" * 40
    receipt = _receipt(
        [
            {"collection": "0x" + "e" * 40, "recipient": other, "tokenId": 9},
            {"collection": COLLECTION, "recipient": COLLECTOR.upper().replace("0X", "0x"), "tokenId": 3},
        ]
    )
    result = _executor(FakeChainGateway()).decode(receipt, COLLECTOR)
    assert result.collection_address == COLLECTION
    assert result.token_id == 3
    assert result.tx_hash == receipt.tx_hash


def test_decode_without_matching_event_raises() -> None:
    receipt = _receipt([{"collection": COLLECTION, "recipient": "0x" + "d" * 40, "tokenId": 1}])
    with pytest.raises(MintDecodeException) as exc_info:
        _executor(FakeChainGateway()).decode(receipt, COLLECTOR)
    assert exc_info.value.details["tx_hash"] == receipt.tx_hash



async def test_mint_submits_through_queue_and_decodes() -> None:
    gateway = FakeChainGateway()
    queue = SignerQueue(gateway, confirmation_timeout=1.0)
    await queue.start()
    recorded: list[str] = []

    async def on_broadcast(tx_hash: str) -> None:
        recorded.append(tx_hash)

    try:
        result = await _executor(gateway, queue).mint(
            make_request().metadata, COLLECTOR, ARTIST, on_broadcast=on_broadcast
        )
    finally:
        await queue.stop()
    assert result.collection_address == COLLECTION
    assert gateway.sent_labels() == ["mint"]
    assert recorded == [result.tx_hash]


async def test_mint_revert_raises() -> None:
    gateway = FakeChainGateway()
    gateway.revert_labels.add("mint")
    queue = SignerQueue(gateway, confirmation_timeout=1.0)
    await queue.start()
    try:
        with pytest.raises(TransactionRevertedException):
            await _executor(gateway, queue).mint(make_request().metadata, COLLECTOR, ARTIST)
    finally:
        await queue.stop()

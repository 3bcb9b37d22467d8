"""Web3ChainGateway submission: signed hash and broadcast failure handling."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_account import Account
from web3 import Web3

from arthub.application.dtos.chain import ContractCall
from arthub.domain.exceptions import ChainSubmissionException
from arthub.infrastructure.chain.gateway import Web3ChainGateway
from tests.fakes import COLLECTOR, FACTORY, TOKEN, TREASURY

KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TX = {
    "to": TOKEN,
    "value": 0,
    "gas": 60_000,
    "maxFeePerGas": 2 * 10**9,
    "maxPriorityFeePerGas": 10**9,
    "nonce": 7,
    "chainId": 84532,
    "data": "0x",
}
SIGNED_HASH = Web3.to_hex(Account.sign_transaction(TX, KEY).hash)


def _gateway(send_raw: AsyncMock) -> Web3ChainGateway:
    gateway = Web3ChainGateway(
        rpc_url="http://localhost:8545",
        chain_id=84532,
        private_key=KEY,
        token_address=TOKEN,
        factory_address=FACTORY,
    )
    contract = MagicMock()
    contract.functions.transferFrom.return_value.build_transaction = AsyncMock(return_value=dict(TX))
    gateway._contract = MagicMock(return_value=contract)
    gateway.w3 = MagicMock()
    gateway.w3.eth.send_raw_transaction = send_raw
    return gateway


def _call() -> ContractCall:
    return ContractCall(
        address=TOKEN,
        abi_name="erc20",
        function="transferFrom",
        args=(COLLECTOR, TREASURY, 500_000),
        label="treasury",
    )


async def test_send_returns_hash_of_signed_payload() -> None:
    gateway = _gateway(AsyncMock(return_value=b"\x01" * 32))
    assert await gateway.send_transaction(_call(), nonce=7) == SIGNED_HASH


async def test_broadcast_timeout_carries_signed_hash() -> None:
    gateway = _gateway(AsyncMock(side_effect=asyncio.TimeoutError()))
    with pytest.raises(ChainSubmissionException) as exc_info:
        await gateway.send_transaction(_call(), nonce=7)
    assert exc_info.value.tx_hash == SIGNED_HASH
    assert exc_info.value.details["tx_hash"] == SIGNED_HASH


async def test_node_rejection_carries_no_hash() -> None:
    gateway = _gateway(AsyncMock(side_effect=ValueError("nonce too low")))
    with pytest.raises(ChainSubmissionException) as exc_info:
        await gateway.send_transaction(_call(), nonce=7)
    assert exc_info.value.tx_hash is None
    assert "tx_hash" not in exc_info.value.details

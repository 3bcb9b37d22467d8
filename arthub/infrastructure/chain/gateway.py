"""web3.py chain gateway: contract reads, signed submission, receipts, event decoding.

The gateway holds the platform signer key but never chooses nonces; the
signer queue passes the nonce for every submission.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import TimeExhausted, TransactionNotFound, Web3Exception
from web3.logs import DISCARD

from arthub.application.dtos.chain import ContractCall, TxReceipt
from arthub.core.config import Settings
from arthub.domain.exceptions import ChainSubmissionException
from arthub.domain.value_objects import TxHash
from arthub.infrastructure.chain.abis import ABIS

logger = logging.getLogger(__name__)

# Errors meaning the node never accepted the transaction.
_SUBMISSION_ERRORS = (Web3Exception, ValueError, OSError, asyncio.TimeoutError)
# Broadcast failures where the request may have reached the node.
_TRANSPORT_ERRORS = (OSError, asyncio.TimeoutError)


class Web3ChainGateway:
    """IChainGateway over AsyncWeb3 + AsyncHTTPProvider.

    Call close() at shutdown to release the provider's HTTP session.
    """

    def __init__(
        self,
        rpc_url: str,
        chain_id: int,
        private_key: str,
        token_address: str,
        factory_address: str,
        receipt_poll_interval: float = 1.0,
        request_timeout: float = 30.0,
    ) -> None:
        self.w3 = AsyncWeb3(
            AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": request_timeout})
        )
        self.chain_id = chain_id
        self.receipt_poll_interval = receipt_poll_interval
        self._account = Account.from_key(private_key)
        self._token_address = Web3.to_checksum_address(token_address)
        self._factory_address = Web3.to_checksum_address(factory_address)
        self._token = self.w3.eth.contract(address=self._token_address, abi=ABIS["erc20"])

    @classmethod
    def from_settings(cls, settings: Settings) -> Web3ChainGateway:
        return cls(
            rpc_url=settings.effective_rpc_url,
            chain_id=settings.network_config.chain_id,
            private_key=settings.relayer_private_key.get_secret_value(),
            token_address=settings.effective_usdc_address,
            factory_address=settings.effective_factory_address,
            receipt_poll_interval=settings.receipt_poll_interval_seconds,
        )

    @property
    def signer_address(self) -> str:
        return self._account.address

    @property
    def token_address(self) -> str:
        return self._token_address

    @property
    def factory_address(self) -> str:
        return self._factory_address

    async def read_balance(self, owner: str) -> int:
        return await self._token.functions.balanceOf(Web3.to_checksum_address(owner)).call()

    async def read_allowance(self, owner: str, spender: str) -> int:
        return await self._token.functions.allowance(
            Web3.to_checksum_address(owner), Web3.to_checksum_address(spender)
        ).call()

    async def get_native_balance(self, address: str) -> int:
        return await self.w3.eth.get_balance(Web3.to_checksum_address(address))

    async def get_pending_nonce(self) -> int:
        return await self.w3.eth.get_transaction_count(self.signer_address, "pending")

    def _contract(self, abi_name: str, address: str) -> Any:
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=ABIS[abi_name])

    async def send_transaction(self, call: ContractCall, nonce: int) -> str:
        """Build (gas and fees estimated by the node), sign locally, broadcast.

        The hash is derived from the signed payload before broadcast. A
        transport failure during broadcast carries that hash on the raised
        exception, since the node may have accepted the transaction anyway.

        Raises:
            ChainSubmissionException: Estimation, signing or broadcast failed.
        """
        try:
            contract = self._contract(call.abi_name, call.address)
            function = getattr(contract.functions, call.function)(*call.args)
            tx = await function.build_transaction(
                {"from": self.signer_address, "nonce": nonce, "chainId": self.chain_id}
            )
            signed = self._account.sign_transaction(tx)
        except _SUBMISSION_ERRORS as e:
            logger.warning("Building %s (nonce %s) failed: %s", call.label, nonce, e)
            raise ChainSubmissionException(call.label, str(e)) from e

        tx_hash = str(TxHash(Web3.to_hex(signed.hash)))
        try:
            await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except _TRANSPORT_ERRORS as e:
            logger.warning(
                "Broadcast of %s tx %s (nonce %s) outcome unknown: %s", call.label, tx_hash, nonce, e
            )
            raise ChainSubmissionException(call.label, str(e), tx_hash=tx_hash) from e
        except _SUBMISSION_ERRORS as e:
            logger.warning("Node rejected %s (nonce %s): %s", call.label, nonce, e)
            raise ChainSubmissionException(call.label, str(e)) from e
        return tx_hash

    def _to_receipt(self, raw: Any) -> TxReceipt:
        return TxReceipt(
            tx_hash=Web3.to_hex(raw["transactionHash"]),
            success=raw["status"] == 1,
            block_number=raw.get("blockNumber"),
            raw=raw,
        )

    async def wait_for_receipt(self, tx_hash: str, timeout: float) -> TxReceipt | None:
        try:
            raw = await self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=timeout, poll_latency=self.receipt_poll_interval
            )
        except TimeExhausted:
            return None
        return self._to_receipt(raw)

    async def get_receipt(self, tx_hash: str) -> TxReceipt | None:
        try:
            raw = await self.w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            return None
        return self._to_receipt(raw)

    async def is_known(self, tx_hash: str) -> bool:
        """Return whether the node knows the transaction (pending or mined)."""
        try:
            await self.w3.eth.get_transaction(tx_hash)
        except TransactionNotFound:
            return False
        return True

    def decode_events(
        self, receipt: TxReceipt, abi_name: str, event_name: str
    ) -> list[dict[str, Any]]:
        """Decode event_name logs emitted by the configured contract for abi_name.

        Logs from other contracts, or that do not match the event signature,
        are discarded.
        """
        address = self._factory_address if abi_name == "factory" else self._token_address
        contract = self._contract(abi_name, address)
        event = getattr(contract.events, event_name)()
        decoded = event.process_receipt(receipt.raw, errors=DISCARD)
        return [
            dict(entry["args"])
            for entry in decoded
            if str(entry["address"]).lower() == address.lower()
        ]

    async def close(self) -> None:
        await self.w3.provider.disconnect()

"""Service interfaces (ports) for the application layer.

Protocols define contracts for chain access, signing, and locking (DIP).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from arthub.application.dtos.chain import ContractCall, TxReceipt
    from arthub.application.dtos.settlement import (
        ArtworkMetadata,
        CollectRequest,
        MintResult,
        ValidationResult,
    )

BroadcastCallback = Callable[[str], Awaitable[None]]


class IChainGateway(Protocol):
    """Protocol for the EVM client: reads, signed submission, receipts, event decoding."""

    @property
    def signer_address(self) -> str:
        """Checksummed address of the platform signer."""
        ...

    @property
    def token_address(self) -> str:
        ...

    @property
    def factory_address(self) -> str:
        ...

    async def read_balance(self, owner: str) -> int:
        """ERC-20 balanceOf(owner) in base units."""
        ...

    async def read_allowance(self, owner: str, spender: str) -> int:
        """ERC-20 allowance(owner, spender) in base units."""
        ...

    async def get_native_balance(self, address: str) -> int:
        """Native (gas) balance in wei."""
        ...

    async def get_pending_nonce(self) -> int:
        """Signer transaction count including pending transactions."""
        ...

    async def send_transaction(self, call: ContractCall, nonce: int) -> str:
        """Build, sign and broadcast call with nonce; return the tx hash.

        Raises ChainSubmissionException when nothing was broadcast.
        """
        ...

    async def wait_for_receipt(self, tx_hash: str, timeout: float) -> TxReceipt | None:
        """Receipt once mined, or None if not mined within timeout."""
        ...

    async def get_receipt(self, tx_hash: str) -> TxReceipt | None:
        """Receipt if mined, else None (pending or unknown)."""
        ...

    async def is_known(self, tx_hash: str) -> bool:
        """Whether the node knows the transaction at all (pending or mined)."""
        ...

    def decode_events(
        self, receipt: TxReceipt, abi_name: str, event_name: str
    ) -> list[dict[str, Any]]:
        """ABI-decoded args of every matching event in the receipt; unrelated logs ignored."""
        ...


class ISignerQueue(Protocol):
    """Protocol for the single-signer actor (FIFO, one transaction in flight)."""

    async def enqueue(
        self, call: ContractCall, on_broadcast: BroadcastCallback | None = None
    ) -> TxReceipt:
        ...


class IPaymentValidator(Protocol):
    async def validate(self, collector: str, total_base_units: int) -> ValidationResult:
        """Raise InsufficientBalance/InsufficientAllowance, else return the reads."""
        ...

    async def check_relayer_funds(self) -> int:
        """Raise RelayerUnderfundedException if the signer cannot pay gas."""
        ...


class IMintExecutor(Protocol):
    def build_call(self, metadata: ArtworkMetadata, artist: str, recipient: str) -> ContractCall:
        ...

    def decode(self, receipt: TxReceipt, recipient: str) -> MintResult:
        ...

    async def mint(
        self,
        metadata: ArtworkMetadata,
        recipient: str,
        artist: str,
        on_broadcast: BroadcastCallback | None = None,
    ) -> MintResult:
        ...


class IFingerprintService(Protocol):
    def compute(self, request: CollectRequest) -> str:
        """Stable SHA-256 hex fingerprint of the request's identity."""
        ...


class ISettlementLease(Protocol):
    """Protocol for the per-fingerprint claim that serializes retries."""

    async def acquire(self, key: str, ttl_seconds: int) -> str | None:
        """Return an owner token if claimed, None if someone else holds it."""
        ...

    async def release(self, key: str, token: str) -> None:
        """Release only if token still owns the key."""
        ...

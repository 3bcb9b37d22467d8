"""DTOs exchanged with the chain gateway and signer queue."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ContractCall:
    """A state-changing contract call to be signed by the platform signer.

    abi_name selects the ABI ("erc20" or "factory"); label names the saga
    step for logs and error details.
    """

    address: str
    abi_name: str
    function: str
    args: tuple[Any, ...]
    label: str = "transaction"


@dataclass(frozen=True)
class TxReceipt:
    """Mined transaction receipt. raw keeps the client receipt for event decoding."""

    tx_hash: str
    success: bool
    block_number: int | None = None
    raw: Any = field(default=None, compare=False, repr=False)

"""Domain value objects for the ArtHub settlement service.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, InvalidOperation

from eth_utils import is_checksum_address, to_checksum_address

from arthub.core.constants import BPS_DENOMINATOR, USDC_DECIMALS

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_TX_HASH_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")

_UNIT = Decimal(10) ** USDC_DECIMALS
_QUANTUM = Decimal(1).scaleb(-USDC_DECIMALS)


def to_base_units(amount: Decimal | str | int) -> int:
    """Convert a user-unit USDC amount to 6-decimal base units.

    Exact: amounts with more than 6 decimal places are rejected rather
    than rounded, so no fraction of a cent is silently lost.

    Raises:
        ValueError: If amount is not a finite number or has too many decimals.
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    scaled = value * _UNIT
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount supports at most {USDC_DECIMALS} decimal places")
    return int(scaled)


def from_base_units(base_units: int) -> Decimal:
    """Convert base units back to a user-unit Decimal (6 decimal places)."""
    return (Decimal(base_units) / _UNIT).quantize(_QUANTUM, rounding=ROUND_DOWN)


@dataclass(frozen=True)
class Address:
    """Value object for an EVM account address.

    Must be 0x followed by 40 hex characters. Mixed-case input must carry a
    valid EIP-55 checksum; single-case input is accepted as is. Stored in
    checksum form; compare via .lower for case-insensitive identity.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate format and normalize to checksum form.

        Raises:
            ValueError: If the string is not a 0x-prefixed 40-hex address, or
                is mixed-case with a wrong checksum.
        """
        if not self.value or not _ADDRESS_RE.fullmatch(self.value):
            raise ValueError(f"Invalid address: {self.value!r}")
        digits = self.value[2:]
        if digits not in (digits.lower(), digits.upper()) and not is_checksum_address(self.value):
            raise ValueError(f"Address checksum mismatch: {self.value!r}")
        object.__setattr__(self, "value", to_checksum_address(self.value))

    @property
    def lower(self) -> str:
        return self.value.lower()

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TxHash:
    """Value object for a transaction hash (0x + 64 hex chars, lowercase)."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not _TX_HASH_RE.fullmatch(self.value):
            raise ValueError(f"Invalid transaction hash: {self.value!r}")
        object.__setattr__(self, "value", self.value.lower())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PaymentSplit:
    """Value object for the treasury/artist split of a payment (base units).

    The treasury share is floored; the artist always receives the
    remainder, so treasury + artist == total holds for every input.
    """

    total_base_units: int
    treasury_base_units: int
    artist_base_units: int

    def __post_init__(self) -> None:
        """Validate non-negative parts summing exactly to the total.

        Raises:
            ValueError: If any part is negative or the parts do not sum to total.
        """
        if self.total_base_units <= 0:
            raise ValueError("Payment total must be positive")
        if self.treasury_base_units < 0 or self.artist_base_units < 0:
            raise ValueError("Payment split parts must be non-negative")
        if self.treasury_base_units + self.artist_base_units != self.total_base_units:
            raise ValueError("Payment split parts must sum to the total")

    @classmethod
    def compute(cls, total_base_units: int, fee_bps: int) -> "PaymentSplit":
        """Split total into treasury fee (floored) and artist remainder.

        Args:
            total_base_units: Amount paid by the collector in base units.
            fee_bps: Treasury fee in basis points (500 = 5%).

        Returns:
            PaymentSplit with treasury = total * fee_bps // 10_000.
        """
        if fee_bps < 0 or fee_bps > BPS_DENOMINATOR:
            raise ValueError(f"fee_bps must be between 0 and {BPS_DENOMINATOR}")
        treasury = total_base_units * fee_bps // BPS_DENOMINATOR
        return cls(
            total_base_units=total_base_units,
            treasury_base_units=treasury,
            artist_base_units=total_base_units - treasury,
        )

    @property
    def total_usdc(self) -> Decimal:
        return from_base_units(self.total_base_units)

    @property
    def treasury_usdc(self) -> Decimal:
        return from_base_units(self.treasury_base_units)

    @property
    def artist_usdc(self) -> Decimal:
        return from_base_units(self.artist_base_units)

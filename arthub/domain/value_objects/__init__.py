"""Domain value objects and shared value types."""

from arthub.domain.value_objects.core import (
    Address,
    PaymentSplit,
    TxHash,
    from_base_units,
    to_base_units,
)

__all__ = [
    "Address",
    "PaymentSplit",
    "TxHash",
    "from_base_units",
    "to_base_units",
]

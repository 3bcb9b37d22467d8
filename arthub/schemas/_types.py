"""Shared schema types."""

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# USDC amounts carry at most 6 decimals, so a JSON number is exact enough for clients.
UsdcAmount = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]
# uint256 token ids exceed JS number precision.
TokenId = Annotated[int, PlainSerializer(str, return_type=str, when_used="json")]

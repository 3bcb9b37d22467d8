"""Application DTOs (no ORM dependency)."""

from arthub.application.dtos.chain import ContractCall, TxReceipt
from arthub.application.dtos.sale import (
    CollectedNFTResult,
    SaleFilters,
    SaleRecordResult,
    SalesStats,
)
from arthub.application.dtos.settlement import (
    ArtworkMetadata,
    CollectRequest,
    MintResult,
    ReconciliationSummary,
    SettlementResult,
    ValidationResult,
)

__all__ = [
    "ArtworkMetadata",
    "CollectRequest",
    "CollectedNFTResult",
    "ContractCall",
    "MintResult",
    "ReconciliationSummary",
    "SaleFilters",
    "SaleRecordResult",
    "SalesStats",
    "SettlementResult",
    "TxReceipt",
    "ValidationResult",
]

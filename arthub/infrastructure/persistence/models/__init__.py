"""ORM models. Importing this package registers every table on Base.metadata."""

from arthub.infrastructure.persistence.models.collected_nft import CollectedNFT
from arthub.infrastructure.persistence.models.sale_record import SaleRecord
from arthub.infrastructure.persistence.models.settlement_attempt import SettlementAttempt

__all__ = ["CollectedNFT", "SaleRecord", "SettlementAttempt"]

"""SQLAlchemy repositories."""

from arthub.infrastructure.persistence.repositories.sale_repo import SaleRepository
from arthub.infrastructure.persistence.repositories.settlement_attempt_repo import (
    SettlementAttemptRepository,
)

__all__ = ["SaleRepository", "SettlementAttemptRepository"]

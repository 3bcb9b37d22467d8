"""Domain entities."""

from arthub.domain.entities.settlement import SettlementAttemptEntity

__all__ = ["SettlementAttemptEntity"]

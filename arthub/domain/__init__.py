"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from arthub.domain.entities import SettlementAttemptEntity
from arthub.domain.enums import SettlementStatus, SettlementStep
from arthub.domain.exceptions import (
    ArtHubException,
    ChainSubmissionException,
    ConfirmationTimeoutException,
    InsufficientAllowanceException,
    InsufficientBalanceException,
    MintDecodeException,
    PartialSettlementException,
    PersistenceException,
    RelayerUnderfundedException,
    ResourceNotFoundException,
    SettlementInProgressException,
    SqlNotConfiguredException,
    TransactionRevertedException,
    ValidationException,
)
from arthub.domain.value_objects import Address, PaymentSplit, TxHash

__all__ = [
    # Entities
    "SettlementAttemptEntity",
    # Enums
    "SettlementStatus",
    "SettlementStep",
    # Exceptions
    "ArtHubException",
    "ChainSubmissionException",
    "ConfirmationTimeoutException",
    "InsufficientAllowanceException",
    "InsufficientBalanceException",
    "MintDecodeException",
    "PartialSettlementException",
    "PersistenceException",
    "RelayerUnderfundedException",
    "ResourceNotFoundException",
    "SettlementInProgressException",
    "SqlNotConfiguredException",
    "TransactionRevertedException",
    "ValidationException",
    # Value objects
    "Address",
    "PaymentSplit",
    "TxHash",
]

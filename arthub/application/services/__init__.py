"""Application services: fingerprinting, payment validation, minting."""

from arthub.application.services.fingerprint_service import FingerprintService
from arthub.application.services.mint_executor import MintExecutor
from arthub.application.services.payment_validator import PaymentValidator

__all__ = [
    "FingerprintService",
    "MintExecutor",
    "PaymentValidator",
]

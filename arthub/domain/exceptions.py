"""Domain exceptions for the ArtHub settlement service.

Defines domain-level exceptions that represent business rule violations and
saga failures. These exceptions are independent of infrastructure concerns.
Presentation layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class ArtHubException(Exception):
    """Base exception for all ArtHub application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, tx hashes).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Failure envelope returned to clients."""
        return {
            "success": False,
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(ArtHubException):
    """Raised when input validation fails (e.g. invalid address or amount below minimum)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(ArtHubException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InsufficientBalanceException(ArtHubException):
    """Raised when the collector's token balance is below the required amount."""

    def __init__(self, balance_base_units: int, required_base_units: int) -> None:
        """Initialize with both amounts so the client can show the exact shortfall.

        Args:
            balance_base_units: Collector balance (6-decimal base units).
            required_base_units: Amount the settlement needs.
        """
        super().__init__(
            "Insufficient USDC balance",
            "INSUFFICIENT_BALANCE",
            {
                "balance_base_units": str(balance_base_units),
                "required_base_units": str(required_base_units),
                "shortfall_base_units": str(required_base_units - balance_base_units),
            },
        )
        self.balance_base_units = balance_base_units
        self.required_base_units = required_base_units


class InsufficientAllowanceException(ArtHubException):
    """Raised when the collector has not approved the signer for the required amount.

    Carries an approval instruction the client can submit directly; the
    service never attempts a transfer it knows will revert.
    """

    def __init__(
        self,
        token_address: str,
        spender: str,
        amount_base_units: int,
        allowance_base_units: int,
    ) -> None:
        super().__init__(
            "Insufficient USDC allowance. Approve the platform signer to spend your USDC.",
            "INSUFFICIENT_ALLOWANCE",
            {
                "allowance_base_units": str(allowance_base_units),
                "required_base_units": str(amount_base_units),
            },
        )
        self.token_address = token_address
        self.spender = spender
        self.amount_base_units = amount_base_units
        self.allowance_base_units = allowance_base_units

    def approval_data(self) -> dict[str, str]:
        """Approval instruction: token, spender (signer), exact amount in base units."""
        return {
            "tokenAddress": self.token_address,
            "spender": self.spender,
            "amount": str(self.amount_base_units),
        }


class RelayerUnderfundedException(ArtHubException):
    """Raised when the signer's native balance cannot cover gas."""

    def __init__(self, signer_address: str, balance_wei: int, required_wei: int) -> None:
        super().__init__(
            "Platform signer has insufficient funds for gas",
            "RELAYER_UNDERFUNDED",
            {
                "signer_address": signer_address,
                "balance_wei": str(balance_wei),
                "required_wei": str(required_wei),
            },
        )


class SettlementInProgressException(ArtHubException):
    """Raised when another worker holds the lease for this fingerprint."""

    def __init__(self, fingerprint: str) -> None:
        super().__init__(
            "A settlement for this request is already in progress; retry shortly.",
            "SETTLEMENT_IN_PROGRESS",
            {"fingerprint": fingerprint, "retryable": True},
        )


class ChainSubmissionException(ArtHubException):
    """Raised when a transaction could not be broadcast (RPC, gas estimation, signer).

    Without tx_hash nothing reached the chain and a retry is safe. With
    tx_hash the transaction was signed but the broadcast call failed in
    transit, so the node may still have accepted it; callers treat that hash
    as broadcast and confirm it before any resubmission.
    """

    def __init__(self, step: str, reason: str, tx_hash: str | None = None) -> None:
        details: dict[str, Any] = {"step": step, "reason": reason, "retryable": True}
        if tx_hash is not None:
            details["tx_hash"] = tx_hash
        super().__init__(f"Failed to submit {step} transaction", "CHAIN_SUBMISSION_ERROR", details)
        self.step = step
        self.reason = reason
        self.tx_hash = tx_hash


class ConfirmationTimeoutException(ArtHubException):
    """Raised when a broadcast transaction has no receipt within the bound.

    Not a definitive failure: the transaction may still land. The hash stays
    recorded and the next retry re-checks it instead of resubmitting.
    """

    def __init__(self, step: str, tx_hash: str, timeout_seconds: float) -> None:
        super().__init__(
            f"Timed out waiting for {step} transaction confirmation",
            "CONFIRMATION_TIMEOUT",
            {
                "step": step,
                "tx_hash": tx_hash,
                "timeout_seconds": timeout_seconds,
                "retryable": True,
            },
        )
        self.step = step
        self.tx_hash = tx_hash


class TransactionRevertedException(ArtHubException):
    """Raised when a transaction was mined but reverted."""

    def __init__(self, step: str, tx_hash: str) -> None:
        super().__init__(
            f"{step} transaction reverted",
            "TRANSACTION_REVERTED",
            {"step": step, "tx_hash": tx_hash},
        )
        self.step = step
        self.tx_hash = tx_hash


class MintDecodeException(ArtHubException):
    """Raised when the mint receipt carries no matching CollectionCreated event."""

    def __init__(self, tx_hash: str, reason: str) -> None:
        super().__init__(
            "Could not decode minted collection from receipt",
            "MINT_DECODE_ERROR",
            {"tx_hash": tx_hash, "reason": reason},
        )


class PartialSettlementException(ArtHubException):
    """Raised when a later step fails after money already moved.

    Funds are in motion with work still owed; requires resumption (client
    retry) or operator reconciliation. Never silently dropped.
    """

    def __init__(
        self,
        fingerprint: str,
        failed_step: str,
        last_completed_status: str,
        reason: str,
        treasury_tx_hash: str | None = None,
        artist_tx_hash: str | None = None,
        mint_tx_hash: str | None = None,
    ) -> None:
        super().__init__(
            f"Settlement partially completed; {failed_step} step failed",
            "PARTIAL_SETTLEMENT",
            {
                "fingerprint": fingerprint,
                "failed_step": failed_step,
                "last_completed_status": last_completed_status,
                "reason": reason,
                "treasury_tx_hash": treasury_tx_hash,
                "artist_tx_hash": artist_tx_hash,
                "mint_tx_hash": mint_tx_hash,
                "retryable": True,
            },
        )
        self.fingerprint = fingerprint
        self.failed_step = failed_step
        self.treasury_tx_hash = treasury_tx_hash
        self.artist_tx_hash = artist_tx_hash
        self.mint_tx_hash = mint_tx_hash


class PersistenceException(ArtHubException):
    """Raised when ledger writes fail after full on-chain success."""

    def __init__(self, fingerprint: str, reason: str) -> None:
        super().__init__(
            "Failed to persist settlement records",
            "PERSISTENCE_ERROR",
            {"fingerprint": fingerprint, "reason": reason},
        )


class SqlNotConfiguredException(ArtHubException):
    """Raised when an operation requires Postgres but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )

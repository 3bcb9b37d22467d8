"""Settlement attempt domain entity.

Represents one collect request's progress through the settlement saga,
independent of persistence. The attempt is created after validation,
mutated in place as steps confirm, and never deleted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from arthub.domain.enums import STATUS_ORDER, SettlementStatus, SettlementStep
from arthub.domain.exceptions import ValidationException
from arthub.domain.value_objects.core import PaymentSplit


@dataclass
class SettlementAttemptEntity:
    """Domain entity for a settlement attempt (SRP: saga state separate from persistence).

    Status only moves forward. FAILED keeps the last successful status in
    failed_from_status so a retry resumes from there rather than from the
    beginning.
    """

    id: str
    fingerprint: str
    status: SettlementStatus
    request_payload: dict[str, Any]
    total_base_units: int
    treasury_base_units: int
    artist_base_units: int
    failed_from_status: SettlementStatus | None = None
    treasury_tx_hash: str | None = None
    artist_tx_hash: str | None = None
    mint_tx_hash: str | None = None
    collection_address: str | None = None
    token_id: int | None = None
    nft_id: str | None = None
    sale_id: str | None = None
    last_error: str | None = None
    needs_reconciliation: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate attempt business rules. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Attempt ID is required", field="id")
        if not self.fingerprint or len(self.fingerprint) != 64:
            raise ValidationException(
                "Attempt fingerprint must be a SHA-256 hex digest", field="fingerprint"
            )
        if self.treasury_base_units + self.artist_base_units != self.total_base_units:
            raise ValidationException("Attempt split does not sum to total", field="split")
        if self.status == SettlementStatus.FAILED and self.failed_from_status is None:
            raise ValidationException(
                "Failed attempt must record its last successful status",
                field="failed_from_status",
            )

    @property
    def split(self) -> PaymentSplit:
        return PaymentSplit(
            total_base_units=self.total_base_units,
            treasury_base_units=self.treasury_base_units,
            artist_base_units=self.artist_base_units,
        )

    @property
    def resume_status(self) -> SettlementStatus:
        """Last successful status: failed_from_status when FAILED, else status."""
        if self.status == SettlementStatus.FAILED:
            assert self.failed_from_status is not None
            return self.failed_from_status
        return self.status

    @property
    def is_persisted(self) -> bool:
        return self.status == SettlementStatus.PERSISTED

    def has_reached(self, status: SettlementStatus) -> bool:
        """Return whether the attempt has confirmed at least the given status."""
        return STATUS_ORDER.index(self.resume_status) >= STATUS_ORDER.index(status)

    def is_step_confirmed(self, step: SettlementStep) -> bool:
        return self.has_reached(step.confirmed_status)

    @property
    def next_step(self) -> SettlementStep | None:
        """First on-chain step not yet confirmed, or None when all are."""
        for step in SettlementStep:
            if not self.is_step_confirmed(step):
                return step
        return None

    def tx_hash_for(self, step: SettlementStep) -> str | None:
        return getattr(self, f"{step.value}_tx_hash")

    def record_tx_hash(self, step: SettlementStep, tx_hash: str) -> None:
        """Record the broadcast hash of a step before its confirmation is known.

        Raises:
            ValueError: If the step is already confirmed.
        """
        if self.is_step_confirmed(step):
            raise ValueError(f"{step.value} step is already confirmed")
        setattr(self, f"{step.value}_tx_hash", tx_hash)

    def clear_tx_hash(self, step: SettlementStep) -> None:
        """Forget a hash whose transaction reverted so the step can be resubmitted."""
        if self.is_step_confirmed(step):
            raise ValueError(f"{step.value} step is already confirmed")
        setattr(self, f"{step.value}_tx_hash", None)

    def remaining_base_units(self) -> int:
        """Amount still to be pulled from the collector.

        Counts the transfer steps that are neither confirmed nor carrying a
        recorded hash that may still land.
        """
        remaining = 0
        if not self.is_step_confirmed(SettlementStep.TREASURY) and not self.treasury_tx_hash:
            remaining += self.treasury_base_units
        if not self.is_step_confirmed(SettlementStep.ARTIST) and not self.artist_tx_hash:
            remaining += self.artist_base_units
        return remaining

    def advance_to(self, status: SettlementStatus) -> None:
        """Move forward to status. Resuming from FAILED clears the failure.

        Raises:
            ValueError: If status is FAILED or not ahead of the current status.
        """
        if status == SettlementStatus.FAILED:
            raise ValueError("Use mark_failed to fail an attempt")
        current = self.resume_status
        if STATUS_ORDER.index(status) <= STATUS_ORDER.index(current):
            raise ValueError(
                f"Cannot move attempt from {current.value} to {status.value}"
            )
        self.status = status
        self.failed_from_status = None
        self.last_error = None

    def confirm_step(self, step: SettlementStep) -> None:
        self.advance_to(step.confirmed_status)

    def mark_failed(self, reason: str) -> None:
        """Set FAILED, remembering the last successful status. No rollback.

        Raises:
            ValueError: If the attempt is already PERSISTED.
        """
        if self.status == SettlementStatus.PERSISTED:
            raise ValueError("Persisted attempt cannot fail")
        self.failed_from_status = self.resume_status
        self.status = SettlementStatus.FAILED
        self.last_error = reason

    def mark_minted(self, collection_address: str, token_id: int) -> None:
        self.collection_address = collection_address
        self.token_id = token_id
        self.confirm_step(SettlementStep.MINT)

    def mark_persisted(self, nft_id: str, sale_id: str) -> None:
        self.nft_id = nft_id
        self.sale_id = sale_id
        self.needs_reconciliation = False
        self.advance_to(SettlementStatus.PERSISTED)

    def flag_for_reconciliation(self, reason: str) -> None:
        self.needs_reconciliation = True
        self.last_error = reason

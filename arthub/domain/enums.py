"""Domain enumerations for the settlement saga.

Enums represent fixed sets of domain values (attempt status, saga step).
"""

from enum import Enum


class SettlementStatus(str, Enum):
    """Settlement attempt lifecycle.

    Forward-only: VALIDATING → SPLIT_COMPUTED → TREASURY_SENT → ARTIST_SENT
    → MINTED → PERSISTED. FAILED is reachable from any non-terminal state and
    remembers the last successful state so resumption knows where to continue.
    """

    VALIDATING = "validating"
    SPLIT_COMPUTED = "split_computed"
    TREASURY_SENT = "treasury_sent"
    ARTIST_SENT = "artist_sent"
    MINTED = "minted"
    PERSISTED = "persisted"
    FAILED = "failed"


# Forward order of the non-failed states.
STATUS_ORDER: tuple[SettlementStatus, ...] = (
    SettlementStatus.VALIDATING,
    SettlementStatus.SPLIT_COMPUTED,
    SettlementStatus.TREASURY_SENT,
    SettlementStatus.ARTIST_SENT,
    SettlementStatus.MINTED,
    SettlementStatus.PERSISTED,
)


class SettlementStep(str, Enum):
    """On-chain steps of the saga, in execution order."""

    TREASURY = "treasury"
    ARTIST = "artist"
    MINT = "mint"

    @property
    def confirmed_status(self) -> SettlementStatus:
        """Status the attempt reaches once this step's receipt confirms."""
        return _STEP_CONFIRMED_STATUS[self]


_STEP_CONFIRMED_STATUS = {
    SettlementStep.TREASURY: SettlementStatus.TREASURY_SENT,
    SettlementStep.ARTIST: SettlementStatus.ARTIST_SENT,
    SettlementStep.MINT: SettlementStatus.MINTED,
}

"""Claim result and cooldown status models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from src.domain.models.history_entry import HistoryEntry

CLAIM_COUNT_MIN = 1
CLAIM_COUNT_MAX = 15


@dataclass(frozen=True)
class ClaimResult:
    """Outcome of a successful claim.

    A partial claim (fewer lines than requested) is still a success.

    Attributes:
        team_id: Team the claim ran against.
        claimed_by: User id of the claimant.
        claimed_at: Instant shared by every entry in the batch.
        requested_count: Number of lines the caller asked for.
        entries: History entries created, in FIFO order.
        cooldown_until: When the claimant may claim again, None if no
            cooldown is enforced.
    """

    team_id: str
    claimed_by: str
    claimed_at: datetime
    requested_count: int
    entries: tuple[HistoryEntry, ...]
    cooldown_until: datetime | None = None

    @property
    def claimed_count(self) -> int:
        """Number of lines actually claimed."""
        return len(self.entries)

    @property
    def is_partial(self) -> bool:
        """True if fewer lines were available than requested."""
        return self.claimed_count < self.requested_count


@dataclass(frozen=True)
class CooldownStatus:
    """A user's cooldown state at a reference instant.

    Attributes:
        last_claim_at: When the user's last claim committed, if ever.
        cooldown_until: When the current window ends, if one applies.
        now: Reference instant.
    """

    last_claim_at: datetime | None
    cooldown_until: datetime | None
    now: datetime

    @classmethod
    def evaluate(
        cls,
        last_claim_at: datetime | None,
        cooldown: timedelta,
        now: datetime,
    ) -> CooldownStatus:
        """Compute cooldown state from the last claim time.

        Args:
            last_claim_at: When the user last claimed, or None.
            cooldown: Team's cooldown window.
            now: Reference instant.

        Returns:
            CooldownStatus for the user.
        """
        if last_claim_at is None:
            return cls(last_claim_at=None, cooldown_until=None, now=now)
        return cls(
            last_claim_at=last_claim_at,
            cooldown_until=last_claim_at + cooldown,
            now=now,
        )

    @property
    def active(self) -> bool:
        """True if the user must still wait."""
        return self.cooldown_until is not None and self.cooldown_until > self.now

    @property
    def remaining_seconds(self) -> int:
        """Whole seconds left in the window (0 when inactive)."""
        if not self.active or self.cooldown_until is None:
            return 0
        remaining = (self.cooldown_until - self.now).total_seconds()
        return max(1, math.ceil(remaining))

"""Claim transfer port.

The claim transfer is the only operation that moves data between the
queue store and the history ledger. It is one atomic unit:

1. Check the claimant's cooldown against their stored last claim time.
2. Remove exactly the selected line ids from the team's queue. If any
   of them is already gone (a concurrent claim won it), nothing is
   written and ClaimConflictError is raised.
3. Append the history entries.
4. Stamp the claimant's last claim time.

Either all four effects become visible together or none do; a line is
never simultaneously claimable and already claimed.

Implementations:
- ClaimTransferStub: single asyncio.Lock critical section
- PostgresClaimTransfer: single transaction with row locks; cooldown
  checked and stamped with the database clock
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Protocol, runtime_checkable
from uuid import UUID

from src.domain.models.history_entry import HistoryEntry


@runtime_checkable
class ClaimTransferProtocol(Protocol):
    """Protocol for atomically moving claimed lines into history."""

    async def get_last_claim_at(self, team_id: str, user_id: str) -> datetime | None:
        """Return when the user's last claim committed, or None.

        Args:
            team_id: Team of the user.
            user_id: Claimant.

        Returns:
            UTC timestamp of the last successful claim, or None.
        """
        ...

    async def transfer(
        self,
        team_id: str,
        user_id: str,
        line_ids: Sequence[UUID],
        entries: Sequence[HistoryEntry],
        claimed_at: datetime,
        cooldown: timedelta | None,
    ) -> None:
        """Atomically move the selected lines into history.

        Args:
            team_id: Team whose queue is claimed from.
            user_id: Claimant; their last claim time is stamped.
            line_ids: Exact ids selected for the claim.
            entries: One history entry per selected line.
            claimed_at: Claim instant, also the new last claim time.
                A store with its own clock may use that clock for the
                cooldown comparison and the stamp instead.
            cooldown: Window to enforce against the stored last claim
                time, or None to skip the cooldown check.

        Raises:
            CooldownActiveError: The claimant is still cooling down.
            ClaimConflictError: Some selected line was already removed.
            StorageUnavailableError: The backing store failed.
        """
        ...

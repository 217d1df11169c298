"""History ledger port.

Abstract interface for a team-scoped, append-only record of claimed
lines. Entries are immutable once written and are never deleted here.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from src.domain.models.history_entry import HistoryEntry


@runtime_checkable
class HistoryLedgerProtocol(Protocol):
    """Protocol for team-scoped claim history persistence."""

    async def append(self, team_id: str, entries: Sequence[HistoryEntry]) -> None:
        """Record entries for a team, all or nothing.

        Args:
            team_id: Owning team; every entry must carry the same team_id.
            entries: Entries to record.

        Raises:
            ValueError: If an entry belongs to a different team.
        """
        ...

    async def list_entries(
        self,
        team_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[HistoryEntry]:
        """List a team's history, newest claim first.

        Args:
            team_id: Owning team.
            limit: Maximum entries to return, None for all.
            offset: Entries to skip.

        Returns:
            HistoryEntry records.
        """
        ...

    async def search(
        self,
        team_id: str,
        query: str,
        limit: int | None = None,
    ) -> list[HistoryEntry]:
        """Find entries whose content contains ``query``, ignoring case.

        Args:
            team_id: Owning team.
            query: Substring to look for.
            limit: Maximum entries to return, None for all.

        Returns:
            Matching HistoryEntry records, newest claim first.
        """
        ...

    async def contents(self, team_id: str) -> list[str]:
        """Return the content of every history entry for the team."""
        ...

    async def count(self, team_id: str) -> int:
        """Return the number of history entries for the team."""
        ...

"""Queue store port.

Abstract interface for a team-scoped queue of pending lines.

Ordering contract:
- Insertion order is creation order and is observable through
  ``QueuedLine.sequence``.
- ``list_lines`` returns newest-first for display.
- ``select_oldest`` returns oldest-first (FIFO) for claim selection.
These two orderings are independent and must not be conflated.

Every method is scoped by team_id; no method may expose or modify
another team's lines.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable
from uuid import UUID

from src.domain.models.queued_line import QueuedLine


@runtime_checkable
class QueueStoreProtocol(Protocol):
    """Protocol for team-scoped queue persistence.

    Implementations may use PostgreSQL, in-memory storage, or other
    backends as long as insertion of one line is atomic and reads never
    observe a partially inserted batch.
    """

    async def append(
        self,
        team_id: str,
        lines: Sequence[str],
        added_by: str,
        added_at: datetime,
    ) -> list[QueuedLine]:
        """Append lines to the team's queue in the given order.

        Args:
            team_id: Owning team.
            lines: Line contents, one entry each; must be non-empty.
            added_by: Submitting user id.
            added_at: Timestamp stamped on every line of the batch.

        Returns:
            Created QueuedLine records in input order.
        """
        ...

    async def list_lines(self, team_id: str) -> list[QueuedLine]:
        """List all queued lines for a team, newest first.

        Args:
            team_id: Owning team.

        Returns:
            QueuedLine records ordered by descending sequence.
        """
        ...

    async def select_oldest(self, team_id: str, limit: int) -> list[QueuedLine]:
        """Select up to ``limit`` lines for a team, oldest first.

        Read-only; it does not reserve the lines. The claim transfer
        re-checks that the selected lines still exist.

        Args:
            team_id: Owning team.
            limit: Maximum number of lines to return.

        Returns:
            QueuedLine records ordered by ascending sequence.
        """
        ...

    async def contents(self, team_id: str) -> list[str]:
        """Return the raw content of every queued line for the team."""
        ...

    async def count(self, team_id: str) -> int:
        """Return the number of queued lines for the team."""
        ...

    async def remove(self, team_id: str, line_id: UUID) -> None:
        """Delete one line from the team's queue.

        Args:
            team_id: Owning team.
            line_id: Line to delete.

        Raises:
            QueuedLineNotFoundError: No such line under this team.
        """
        ...

    async def clear(self, team_id: str) -> int:
        """Delete every queued line for the team.

        Returns:
            Number of lines removed.
        """
        ...

"""Queued line domain model.

A QueuedLine is a pending text line in a team's queue. It is owned by
the queue store until it is either claimed (moved into the history
ledger) or deleted.

Ordering:
- ``sequence`` is assigned by the store at insertion and is strictly
  increasing per store; it is the creation order used for FIFO claims.
- ``added_at`` is shared by all lines of one enqueue batch and is only
  used for display.

Uniqueness is NOT a storage constraint: two identical lines may coexist
if they arrive through different paths. Dedup is a submission filter.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, eq=True)
class QueuedLine:
    """A line waiting in a team's queue.

    Attributes:
        id: Unique identifier of the queued line.
        team_id: Team that owns the line.
        content: Line text exactly as submitted.
        added_by: User id of the submitter.
        added_at: When the line was enqueued (UTC timezone-aware).
        sequence: Store-assigned creation order (FIFO key).
    """

    id: UUID
    team_id: str
    content: str
    added_by: str
    added_at: datetime
    sequence: int = 0

    def __post_init__(self) -> None:
        """Validate queued line fields.

        Raises:
            ValueError: If added_at is naive.
        """
        if self.added_at.tzinfo is None:
            raise ValueError("added_at must be timezone-aware (UTC)")

    def to_dict(self) -> dict:
        """Serialize to dictionary.

        Returns:
            Dictionary representation with string ids and ISO timestamps.
        """
        return {
            "id": str(self.id),
            "team_id": self.team_id,
            "content": self.content,
            "added_by": self.added_by,
            "added_at": self.added_at.isoformat(),
            "sequence": self.sequence,
        }

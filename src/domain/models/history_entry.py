"""History entry domain model.

A HistoryEntry records one claimed line. Entries are created only by
the claim service, are immutable, and are never deleted by this
service. The claimed line's content and original submitter metadata
are preserved verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID, uuid4

from src.domain.models.caller_identity import CallerIdentity
from src.domain.models.queued_line import QueuedLine


@dataclass(frozen=True, eq=True)
class HistoryEntry:
    """A claimed line recorded in a team's history ledger.

    Attributes:
        id: Unique identifier of the history entry.
        team_id: Team that owns the entry.
        content: Line text, identical to the claimed queued line.
        claimed_by: User id of the claimant.
        claimed_by_name: Display name of the claimant at claim time.
        claimed_at: Claim instant, shared by every line in one claim.
        original_added_by: Submitter of the queued line.
        original_added_at: When the queued line was enqueued.
        source_line_id: Id the line had while queued.
    """

    id: UUID
    team_id: str
    content: str
    claimed_by: str
    claimed_by_name: str
    claimed_at: datetime
    original_added_by: str
    original_added_at: datetime
    source_line_id: UUID | None = None

    def __post_init__(self) -> None:
        """Validate history entry fields.

        Raises:
            ValueError: If a timestamp is naive.
        """
        if self.claimed_at.tzinfo is None:
            raise ValueError("claimed_at must be timezone-aware (UTC)")
        if self.original_added_at.tzinfo is None:
            raise ValueError("original_added_at must be timezone-aware (UTC)")

    @classmethod
    def from_claimed_line(
        cls,
        line: QueuedLine,
        claimant: CallerIdentity,
        claimed_at: datetime,
    ) -> HistoryEntry:
        """Build the history record for a queued line being claimed.

        Args:
            line: The queued line being moved.
            claimant: Identity of the claiming user.
            claimed_at: Instant shared by the whole claim batch.

        Returns:
            A new HistoryEntry preserving the line's content and origin.
        """
        return cls(
            id=uuid4(),
            team_id=line.team_id,
            content=line.content,
            claimed_by=claimant.user_id,
            claimed_by_name=claimant.claim_name,
            claimed_at=claimed_at,
            original_added_by=line.added_by,
            original_added_at=line.added_at,
            source_line_id=line.id,
        )

    def to_dict(self) -> dict:
        """Serialize to dictionary.

        Returns:
            Dictionary representation with string ids and ISO timestamps.
        """
        return {
            "id": str(self.id),
            "team_id": self.team_id,
            "content": self.content,
            "claimed_by": self.claimed_by,
            "claimed_by_name": self.claimed_by_name,
            "claimed_at": self.claimed_at.isoformat(),
            "original_added_by": self.original_added_by,
            "original_added_at": self.original_added_at.isoformat(),
            "source_line_id": str(self.source_line_id) if self.source_line_id else None,
        }

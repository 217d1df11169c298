"""Queue API request/response models.

Covers the submission entry point (dedupe), enqueue, listing and
maintenance of a team's queued lines.
"""

from uuid import UUID

from pydantic import Field

from src.api.models.common import CamelModel, DateTimeWithZ
from src.domain.models.queued_line import QueuedLine
from src.domain.services.line_dedup import DedupOutcome


class DedupeRequest(CamelModel):
    """Raw lines to deduplicate against the team's queue and history.

    Either ``lines`` or ``text`` (newline-separated, as pasted into a
    textarea) may be given. Both are combined, ``text`` last.
    """

    lines: list[str] = Field(default_factory=list, description="Lines as entered")
    text: str | None = Field(default=None, description="Newline-separated lines")

    def raw_lines(self) -> list[str]:
        """Return every submitted line, blank lines included."""
        combined = list(self.lines)
        if self.text:
            combined.extend(self.text.splitlines())
        return combined


class DedupeResponse(CamelModel):
    """Deduplicated lines and how many were dropped, by reason."""

    lines: list[str] = Field(..., description="Accepted lines, verbatim, in input order")
    submitted_count: int = Field(..., ge=0, description="Non-blank lines submitted")
    unique_count: int = Field(..., ge=0)
    duplicate_count: int = Field(..., ge=0)
    batch_duplicates: int = Field(..., ge=0)
    queued_duplicates: int = Field(..., ge=0)
    history_duplicates: int = Field(..., ge=0)
    all_duplicates: bool = Field(
        ..., description="True if every submitted line already exists"
    )

    @classmethod
    def from_outcome(cls, outcome: DedupOutcome) -> "DedupeResponse":
        return cls(
            lines=list(outcome.lines),
            submitted_count=outcome.submitted_count,
            unique_count=outcome.unique_count,
            duplicate_count=outcome.duplicate_count,
            batch_duplicates=outcome.batch_duplicates,
            queued_duplicates=outcome.queued_duplicates,
            history_duplicates=outcome.history_duplicates,
            all_duplicates=outcome.all_duplicates,
        )


class EnqueueRequest(CamelModel):
    """Lines to append to the team's queue, stored as given."""

    lines: list[str] = Field(..., min_length=1, description="Lines to enqueue")


class QueuedLineResponse(CamelModel):
    """One queued line."""

    id: UUID
    content: str
    added_by: str
    added_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, line: QueuedLine) -> "QueuedLineResponse":
        return cls(
            id=line.id,
            content=line.content,
            added_by=line.added_by,
            added_at=line.added_at,
        )


class QueuedLinesResponse(CamelModel):
    """A list of queued lines with its size."""

    lines: list[QueuedLineResponse]
    count: int = Field(..., ge=0)


class QueueCountResponse(CamelModel):
    """Number of lines waiting in the team's queue."""

    count: int = Field(..., ge=0)


class ClearQueueResponse(CamelModel):
    """Result of clearing the team's queue."""

    removed_count: int = Field(..., ge=0)

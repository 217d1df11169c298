"""History API response models."""

from uuid import UUID

from pydantic import Field

from src.api.models.common import CamelModel, DateTimeWithZ
from src.domain.models.history_entry import HistoryEntry


class HistoryEntryResponse(CamelModel):
    """One claimed line."""

    id: UUID
    content: str
    claimed_by: str
    claimed_by_name: str
    claimed_at: DateTimeWithZ
    original_added_by: str
    original_added_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, entry: HistoryEntry) -> "HistoryEntryResponse":
        return cls(
            id=entry.id,
            content=entry.content,
            claimed_by=entry.claimed_by,
            claimed_by_name=entry.claimed_by_name,
            claimed_at=entry.claimed_at,
            original_added_by=entry.original_added_by,
            original_added_at=entry.original_added_at,
        )


class HistoryListResponse(CamelModel):
    """A page of history entries, newest claim first.

    ``count`` is the number of entries in this page. ``total`` is the
    size of the team's whole history.
    """

    entries: list[HistoryEntryResponse]
    count: int = Field(..., ge=0)
    total: int | None = Field(default=None, ge=0)

"""Claim API request/response models."""

from pydantic import Field

from src.api.models.common import CamelModel, DateTimeWithZ
from src.api.models.history import HistoryEntryResponse
from src.domain.models.line_claim import CLAIM_COUNT_MAX, CLAIM_COUNT_MIN, ClaimResult


class ClaimRequest(CamelModel):
    """Request to claim the oldest queued lines.

    Attributes:
        requested_count: Number of lines wanted, 1..15.
    """

    requested_count: int = Field(
        ...,
        strict=True,
        description=f"Number of lines to claim, {CLAIM_COUNT_MIN}..{CLAIM_COUNT_MAX}",
    )


class ClaimResponse(CamelModel):
    """Lines claimed, in FIFO order.

    ``claimed_count`` may be lower than requested when the queue held
    fewer lines.
    """

    claimed_count: int = Field(..., ge=1)
    lines: list[HistoryEntryResponse]
    claimed_at: DateTimeWithZ
    cooldown_until: DateTimeWithZ | None = None

    @classmethod
    def from_result(cls, result: ClaimResult) -> "ClaimResponse":
        return cls(
            claimed_count=result.claimed_count,
            lines=[HistoryEntryResponse.from_domain(e) for e in result.entries],
            claimed_at=result.claimed_at,
            cooldown_until=result.cooldown_until,
        )


class CooldownStatusResponse(CamelModel):
    """The caller's cooldown state."""

    active: bool
    last_claim_at: DateTimeWithZ | None = None
    cooldown_until: DateTimeWithZ | None = None
    remaining_seconds: int = Field(..., ge=0)

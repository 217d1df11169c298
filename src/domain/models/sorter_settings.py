"""Sorter settings domain model.

Per-team claim policy:
- lines_per_claim: how many lines one claim may take, in [1, 15]
- cooldown_minutes: minimum wait between a user's claims, in [1, 1440]

A team without a stored row reads the defaults (5 lines, 5 minutes).
Values outside their ranges are rejected, never clamped.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from src.domain.errors.sorter_settings import SettingsOutOfRangeError

LINES_PER_CLAIM_MIN = 1
LINES_PER_CLAIM_MAX = 15
COOLDOWN_MINUTES_MIN = 1
COOLDOWN_MINUTES_MAX = 1440

DEFAULT_LINES_PER_CLAIM = 5
DEFAULT_COOLDOWN_MINUTES = 5

SETTINGS_BOUNDS: dict[str, tuple[int, int]] = {
    "lines_per_claim": (LINES_PER_CLAIM_MIN, LINES_PER_CLAIM_MAX),
    "cooldown_minutes": (COOLDOWN_MINUTES_MIN, COOLDOWN_MINUTES_MAX),
}


def check_setting_in_range(field: str, value: int) -> None:
    """Validate one setting against its declared bounds.

    Args:
        field: Setting name (a key of SETTINGS_BOUNDS).
        value: Candidate value.

    Raises:
        SettingsOutOfRangeError: If value is outside the bounds.
    """
    minimum, maximum = SETTINGS_BOUNDS[field]
    if isinstance(value, bool) or not minimum <= value <= maximum:
        raise SettingsOutOfRangeError(field, value, minimum, maximum)


@dataclass(frozen=True)
class SorterSettings:
    """Claim policy for one team.

    Attributes:
        team_id: Team the policy belongs to.
        lines_per_claim: Maximum lines per claim.
        cooldown_minutes: Minimum minutes between a user's claims.
        updated_at: Last write time, None when these are the defaults.
    """

    team_id: str
    lines_per_claim: int = DEFAULT_LINES_PER_CLAIM
    cooldown_minutes: int = DEFAULT_COOLDOWN_MINUTES
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate both values are in range.

        Raises:
            SettingsOutOfRangeError: If a value is outside its bounds.
        """
        check_setting_in_range("lines_per_claim", self.lines_per_claim)
        check_setting_in_range("cooldown_minutes", self.cooldown_minutes)

    @classmethod
    def defaults(cls, team_id: str) -> SorterSettings:
        """Return the default policy for a team with no stored row."""
        return cls(team_id=team_id)

    @property
    def is_default(self) -> bool:
        """True if no settings row has been written for the team."""
        return self.updated_at is None

    @property
    def cooldown(self) -> timedelta:
        """Cooldown window as a timedelta."""
        return timedelta(minutes=self.cooldown_minutes)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "team_id": self.team_id,
            "lines_per_claim": self.lines_per_claim,
            "cooldown_minutes": self.cooldown_minutes,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class SorterSettingsPatch:
    """Partial settings update; None means "leave unchanged".

    Attributes:
        lines_per_claim: New per-claim ceiling, if changing.
        cooldown_minutes: New cooldown, if changing.
    """

    lines_per_claim: int | None = None
    cooldown_minutes: int | None = None

    @property
    def is_empty(self) -> bool:
        """True if the patch changes nothing."""
        return self.lines_per_claim is None and self.cooldown_minutes is None

    def validate(self) -> None:
        """Check every provided value against its bounds.

        Raises:
            SettingsOutOfRangeError: On the first out-of-range value.
        """
        if self.lines_per_claim is not None:
            check_setting_in_range("lines_per_claim", self.lines_per_claim)
        if self.cooldown_minutes is not None:
            check_setting_in_range("cooldown_minutes", self.cooldown_minutes)

    def apply_to(self, current: SorterSettings, updated_at: datetime) -> SorterSettings:
        """Merge this patch onto existing settings.

        Args:
            current: Stored settings or the defaults.
            updated_at: Timestamp for the new row.

        Returns:
            New SorterSettings with patched values.
        """
        return SorterSettings(
            team_id=current.team_id,
            lines_per_claim=(
                self.lines_per_claim
                if self.lines_per_claim is not None
                else current.lines_per_claim
            ),
            cooldown_minutes=(
                self.cooldown_minutes
                if self.cooldown_minutes is not None
                else current.cooldown_minutes
            ),
            updated_at=updated_at,
        )

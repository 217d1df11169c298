"""Sorter settings API models."""

from pydantic import Field

from src.api.models.common import CamelModel, DateTimeWithZ
from src.domain.models.sorter_settings import SorterSettings, SorterSettingsPatch


class SorterSettingsResponse(CamelModel):
    """A team's sorter settings."""

    lines_per_claim: int
    cooldown_minutes: int
    updated_at: DateTimeWithZ | None = None

    @classmethod
    def from_domain(cls, settings: SorterSettings) -> "SorterSettingsResponse":
        return cls(
            lines_per_claim=settings.lines_per_claim,
            cooldown_minutes=settings.cooldown_minutes,
            updated_at=settings.updated_at,
        )


class SorterSettingsUpdateRequest(CamelModel):
    """Partial settings update; omitted fields keep their stored value.

    Range checks happen in the domain so out-of-range values are
    reported as 400 with the allowed bounds.
    """

    lines_per_claim: int | None = Field(default=None, strict=True)
    cooldown_minutes: int | None = Field(default=None, strict=True)

    def to_patch(self) -> SorterSettingsPatch:
        return SorterSettingsPatch(
            lines_per_claim=self.lines_per_claim,
            cooldown_minutes=self.cooldown_minutes,
        )

"""Sorter settings repository port.

One settings row per team, created lazily by the first write.
Writes are last-writer-wins upserts.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from src.domain.models.sorter_settings import SorterSettings, SorterSettingsPatch


@runtime_checkable
class SorterSettingsRepositoryProtocol(Protocol):
    """Protocol for per-team sorter settings persistence."""

    async def get(self, team_id: str) -> SorterSettings | None:
        """Return the stored settings row for a team, or None.

        Args:
            team_id: Team to look up.

        Returns:
            Stored SorterSettings, or None if never written.
        """
        ...

    async def upsert(
        self,
        team_id: str,
        patch: SorterSettingsPatch,
        updated_at: datetime,
    ) -> SorterSettings:
        """Create or merge the team's settings row in one atomic write.

        Fields absent from the patch keep their stored value, or the
        default when the row is created.

        Args:
            team_id: Team to update.
            patch: Already validated partial update.
            updated_at: Write timestamp.

        Returns:
            The settings as stored after the write.
        """
        ...

"""In-memory stub for SorterSettingsRepositoryProtocol.

Simulates the settings table: one row per team, created by the first
upsert, merged by later ones. Last writer wins.
"""

from __future__ import annotations

import asyncio
from datetime import datetime

from src.domain.models.sorter_settings import SorterSettings, SorterSettingsPatch


class SorterSettingsRepositoryStub:
    """In-memory stub implementation of SorterSettingsRepositoryProtocol.

    Attributes:
        _rows: Stored settings keyed by team_id.
        upsert_calls: Number of upserts performed (test inspection).
    """

    def __init__(self) -> None:
        """Initialize empty stub."""
        self._lock = asyncio.Lock()
        self._rows: dict[str, SorterSettings] = {}
        self.upsert_calls = 0

    async def get(self, team_id: str) -> SorterSettings | None:
        """Return the stored settings row for a team, or None."""
        async with self._lock:
            return self._rows.get(team_id)

    async def upsert(
        self,
        team_id: str,
        patch: SorterSettingsPatch,
        updated_at: datetime,
    ) -> SorterSettings:
        """Create or merge the team's settings row.

        Args:
            team_id: Team to update.
            patch: Already validated partial update.
            updated_at: Write timestamp.

        Returns:
            The settings as stored after the write.
        """
        async with self._lock:
            current = self._rows.get(team_id) or SorterSettings.defaults(team_id)
            stored = patch.apply_to(current, updated_at)
            self._rows[team_id] = stored
            self.upsert_calls += 1
            return stored

    # Test helper methods

    def set_settings(self, settings: SorterSettings) -> None:
        """Store a settings row directly (test helper)."""
        self._rows[settings.team_id] = settings

    def reset(self) -> None:
        """Reset all stored data (test helper)."""
        self._rows.clear()
        self.upsert_calls = 0

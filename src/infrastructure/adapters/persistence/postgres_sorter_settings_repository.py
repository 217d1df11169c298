"""PostgreSQL implementation of SorterSettingsRepositoryProtocol.

One row per team in ``sorter_settings``. Updates are a single upsert
that keeps stored values for fields the patch leaves unset; concurrent
updates resolve last-writer-wins.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from src.domain.errors import StorageUnavailableError
from src.domain.models.sorter_settings import (
    DEFAULT_COOLDOWN_MINUTES,
    DEFAULT_LINES_PER_CLAIM,
    SorterSettings,
    SorterSettingsPatch,
)

logger = get_logger(__name__)


class PostgresSorterSettingsRepository:
    """Per-team sorter settings stored in PostgreSQL."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize with a SQLAlchemy async session factory."""
        self._session_factory = session_factory

    async def get(self, team_id: str) -> SorterSettings | None:
        """Return the team's stored settings, or None if never set."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    text("""
                        SELECT team_id, lines_per_claim, cooldown_minutes, updated_at
                        FROM sorter_settings
                        WHERE team_id = :team_id
                    """),
                    {"team_id": team_id},
                )
                row = result.one_or_none()
        except SQLAlchemyError as exc:
            logger.error("sorter_settings_read_failed", team_id=team_id)
            raise StorageUnavailableError("get_settings") from exc

        if row is None:
            return None
        return SorterSettings(
            team_id=row.team_id,
            lines_per_claim=row.lines_per_claim,
            cooldown_minutes=row.cooldown_minutes,
            updated_at=row.updated_at,
        )

    async def upsert(
        self,
        team_id: str,
        patch: SorterSettingsPatch,
        updated_at: datetime,
    ) -> SorterSettings:
        """Merge ``patch`` into the team's row, creating it from defaults."""
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    text("""
                        INSERT INTO sorter_settings
                            (team_id, lines_per_claim, cooldown_minutes, updated_at)
                        VALUES (
                            :team_id,
                            COALESCE(CAST(:lines_per_claim AS INTEGER), :default_lines_per_claim),
                            COALESCE(CAST(:cooldown_minutes AS INTEGER), :default_cooldown_minutes),
                            :updated_at
                        )
                        ON CONFLICT (team_id) DO UPDATE SET
                            lines_per_claim = COALESCE(
                                CAST(:lines_per_claim AS INTEGER),
                                sorter_settings.lines_per_claim
                            ),
                            cooldown_minutes = COALESCE(
                                CAST(:cooldown_minutes AS INTEGER),
                                sorter_settings.cooldown_minutes
                            ),
                            updated_at = EXCLUDED.updated_at
                        RETURNING team_id, lines_per_claim, cooldown_minutes, updated_at
                    """),
                    {
                        "team_id": team_id,
                        "lines_per_claim": patch.lines_per_claim,
                        "cooldown_minutes": patch.cooldown_minutes,
                        "default_lines_per_claim": DEFAULT_LINES_PER_CLAIM,
                        "default_cooldown_minutes": DEFAULT_COOLDOWN_MINUTES,
                        "updated_at": updated_at,
                    },
                )
                row = result.one()
        except SQLAlchemyError as exc:
            logger.error("sorter_settings_write_failed", team_id=team_id)
            raise StorageUnavailableError("update_settings") from exc

        return SorterSettings(
            team_id=row.team_id,
            lines_per_claim=row.lines_per_claim,
            cooldown_minutes=row.cooldown_minutes,
            updated_at=row.updated_at,
        )

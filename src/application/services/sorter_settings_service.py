"""Sorter settings service.

Reads and updates the per-team claim policy (linesPerClaim,
cooldownMinutes).

Rules:
1. READS NEVER FAIL FOR A MISSING ROW - defaults are returned instead
2. ADMIN ONLY WRITES - non-admins get AdminRoleRequiredError
3. REJECT, DON'T CLAMP - out-of-range values fail with
   SettingsOutOfRangeError and nothing is written
4. UPSERT - the first write for a team creates the row atomically
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from structlog import get_logger

from src.application.ports.sorter_settings_repository import (
    SorterSettingsRepositoryProtocol,
)
from src.domain.errors import AdminRoleRequiredError, SettingsOutOfRangeError
from src.domain.models.caller_identity import CallerIdentity
from src.domain.models.sorter_settings import SorterSettings, SorterSettingsPatch

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SorterSettingsService:
    """Service for reading and updating per-team sorter settings.

    Example:
        >>> service = SorterSettingsService(repository=SorterSettingsRepositoryStub())
        >>> settings = await service.get_settings("team-1")
        >>> settings.lines_per_claim
        5
    """

    def __init__(
        self,
        repository: SorterSettingsRepositoryProtocol,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the settings service.

        Args:
            repository: Settings persistence.
            clock: Source of the current UTC time.
        """
        self._repository = repository
        self._clock = clock

    async def get_settings(self, team_id: str) -> SorterSettings:
        """Return the team's settings, or the defaults if none are stored.

        Args:
            team_id: Team to look up.

        Returns:
            Stored SorterSettings or SorterSettings.defaults(team_id).
        """
        stored = await self._repository.get(team_id)
        if stored is None:
            logger.debug("sorter_settings_defaulted", team_id=team_id)
            return SorterSettings.defaults(team_id)
        return stored

    async def update_settings(
        self,
        caller: CallerIdentity,
        patch: SorterSettingsPatch,
    ) -> SorterSettings:
        """Apply a partial settings update for the caller's team.

        An empty patch writes nothing and returns the current settings.

        Args:
            caller: Identity of the requesting user.
            patch: Fields to change; None fields are left as they are.

        Returns:
            The settings as stored after the update.

        Raises:
            AdminRoleRequiredError: Caller is not a team admin.
            SettingsOutOfRangeError: A provided value is out of range.
        """
        log = logger.bind(team_id=caller.team_id, user_id=caller.user_id)

        if not caller.is_admin:
            log.warning("sorter_settings_update_denied", role=caller.role.value)
            raise AdminRoleRequiredError(
                team_id=caller.team_id,
                user_id=caller.user_id,
                role=caller.role.value,
                operation="update sorter settings",
            )

        try:
            patch.validate()
        except SettingsOutOfRangeError as e:
            log.warning(
                "sorter_settings_update_rejected",
                field=e.field,
                value=e.value,
                minimum=e.minimum,
                maximum=e.maximum,
            )
            raise

        if patch.is_empty:
            log.debug("sorter_settings_update_empty")
            return await self.get_settings(caller.team_id)

        stored = await self._repository.upsert(
            team_id=caller.team_id,
            patch=patch,
            updated_at=self._clock(),
        )
        log.info(
            "sorter_settings_updated",
            lines_per_claim=stored.lines_per_claim,
            cooldown_minutes=stored.cooldown_minutes,
        )
        return stored

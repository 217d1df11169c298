"""Line claim service.

Moves the oldest lines of a team's queue into its history on behalf of
one user. Every claim follows the same steps:
1. Validate the requested count (1..15, and the team's linesPerClaim
   ceiling when enforced)
2. Reject early if the user is still cooling down
3. Select the oldest N queued lines
4. Transfer them atomically: conditional queue removal, history append
   and cooldown stamp commit together or not at all
5. On a lost race, re-select and retry up to claim_max_attempts

A line is handed to at most one claimant. Every entry of one claim
shares one claimed_at instant. A claim against a queue holding fewer
lines than requested succeeds with what is there.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from structlog import get_logger

from src.application.ports.claim_transfer import ClaimTransferProtocol
from src.application.ports.queue_store import QueueStoreProtocol
from src.application.services.sorter_settings_service import SorterSettingsService
from src.config.sorter_config import DEFAULT_SORTER_CONFIG, SorterServiceConfig
from src.domain.errors import (
    ClaimBatchLimitExceededError,
    ClaimConflictError,
    ClaimCountOutOfRangeError,
    ClaimRetriesExhaustedError,
    CooldownActiveError,
    NoLinesAvailableError,
)
from src.domain.models.caller_identity import CallerIdentity
from src.domain.models.history_entry import HistoryEntry
from src.domain.models.line_claim import (
    CLAIM_COUNT_MAX,
    CLAIM_COUNT_MIN,
    ClaimResult,
    CooldownStatus,
)

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LineClaimService:
    """Coordinates claims of queued lines into history.

    Example:
        >>> result = await service.claim(caller, requested_count=5)
        >>> [entry.content for entry in result.entries]
    """

    def __init__(
        self,
        queue_store: QueueStoreProtocol,
        claim_transfer: ClaimTransferProtocol,
        settings_service: SorterSettingsService,
        config: SorterServiceConfig = DEFAULT_SORTER_CONFIG,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the claim service.

        Args:
            queue_store: Team-scoped queue persistence (selection only).
            claim_transfer: Atomic queue-to-history transfer.
            settings_service: Source of linesPerClaim and cooldownMinutes.
            config: Retry and enforcement switches.
            clock: Source of the current UTC time.
        """
        self._queue_store = queue_store
        self._claim_transfer = claim_transfer
        self._settings_service = settings_service
        self._config = config
        self._clock = clock

    async def claim(self, caller: CallerIdentity, requested_count: int) -> ClaimResult:
        """Claim up to ``requested_count`` of the oldest queued lines.

        Args:
            caller: Identity of the claiming user.
            requested_count: Number of lines wanted, 1..15.

        Returns:
            ClaimResult with the created history entries in FIFO order.

        Raises:
            ClaimCountOutOfRangeError: Count outside 1..15.
            ClaimBatchLimitExceededError: Count above the team's linesPerClaim.
            CooldownActiveError: Caller claimed too recently.
            NoLinesAvailableError: Team queue is empty.
            ClaimRetriesExhaustedError: Every attempt lost a race.
            StorageUnavailableError: Storage failed; nothing was changed.
        """
        log = logger.bind(
            team_id=caller.team_id,
            user_id=caller.user_id,
            requested_count=requested_count,
        )

        # Step 1: Validate requested count
        if (
            isinstance(requested_count, bool)
            or not CLAIM_COUNT_MIN <= requested_count <= CLAIM_COUNT_MAX
        ):
            log.info("claim_rejected_count_out_of_range")
            raise ClaimCountOutOfRangeError(
                requested_count=requested_count,
                minimum=CLAIM_COUNT_MIN,
                maximum=CLAIM_COUNT_MAX,
            )

        settings = await self._settings_service.get_settings(caller.team_id)
        if (
            self._config.enforce_batch_ceiling
            and requested_count > settings.lines_per_claim
        ):
            log.info(
                "claim_rejected_batch_limit",
                lines_per_claim=settings.lines_per_claim,
            )
            raise ClaimBatchLimitExceededError(
                requested_count=requested_count,
                lines_per_claim=settings.lines_per_claim,
            )

        cooldown = settings.cooldown if self._config.enforce_cooldown else None

        # Step 2: Early cooldown check (the transfer re-checks atomically)
        if cooldown is not None:
            last_claim_at = await self._claim_transfer.get_last_claim_at(
                caller.team_id, caller.user_id
            )
            status = CooldownStatus.evaluate(last_claim_at, cooldown, self._clock())
            if status.active and status.last_claim_at and status.cooldown_until:
                log.info(
                    "claim_rejected_cooldown",
                    retry_after_seconds=status.remaining_seconds,
                )
                raise CooldownActiveError(
                    team_id=caller.team_id,
                    user_id=caller.user_id,
                    last_claim_at=status.last_claim_at,
                    cooldown_until=status.cooldown_until,
                    now=status.now,
                )

        # Steps 3-5: Select, transfer, retry on conflict
        for attempt in range(1, self._config.claim_max_attempts + 1):
            selected = await self._queue_store.select_oldest(
                caller.team_id, requested_count
            )
            if not selected:
                log.info("claim_rejected_empty_queue", attempt=attempt)
                raise NoLinesAvailableError(caller.team_id)

            claimed_at = self._clock()
            entries = tuple(
                HistoryEntry.from_claimed_line(line, caller, claimed_at)
                for line in selected
            )
            try:
                await self._claim_transfer.transfer(
                    team_id=caller.team_id,
                    user_id=caller.user_id,
                    line_ids=[line.id for line in selected],
                    entries=entries,
                    claimed_at=claimed_at,
                    cooldown=cooldown,
                )
            except ClaimConflictError as exc:
                log.info(
                    "claim_conflict_retrying",
                    attempt=attempt,
                    expected_count=exc.expected_count,
                    removed_count=exc.removed_count,
                )
                continue
            except CooldownActiveError:
                log.info("claim_rejected_cooldown_at_commit", attempt=attempt)
                raise

            result = ClaimResult(
                team_id=caller.team_id,
                claimed_by=caller.user_id,
                claimed_at=claimed_at,
                requested_count=requested_count,
                entries=entries,
                cooldown_until=claimed_at + cooldown if cooldown is not None else None,
            )
            log.info(
                "lines_claimed",
                claimed_count=result.claimed_count,
                partial=result.is_partial,
                attempt=attempt,
            )
            return result

        log.warning(
            "claim_retries_exhausted",
            attempts=self._config.claim_max_attempts,
        )
        raise ClaimRetriesExhaustedError(
            team_id=caller.team_id,
            attempts=self._config.claim_max_attempts,
            retry_after_seconds=self._config.conflict_retry_after_seconds,
        )

    async def cooldown_status(self, caller: CallerIdentity) -> CooldownStatus:
        """Return the caller's cooldown state.

        When cooldown enforcement is disabled the status is never active.
        """
        now = self._clock()
        last_claim_at = await self._claim_transfer.get_last_claim_at(
            caller.team_id, caller.user_id
        )
        if not self._config.enforce_cooldown:
            return CooldownStatus(last_claim_at=last_claim_at, cooldown_until=None, now=now)
        settings = await self._settings_service.get_settings(caller.team_id)
        return CooldownStatus.evaluate(last_claim_at, settings.cooldown, now)

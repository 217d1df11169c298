"""Line submission service.

Handles the submitter side of the queue:
- dedupe: filter raw input against the team's live queue and history
- enqueue: append lines to the team's queue
- list / remove / clear queued lines

Dedupe and enqueue are separate calls: dedupe reports what would be
accepted, enqueue stores exactly what it is given. Storage does not
enforce uniqueness, so two identical lines can coexist in the queue.

Reporting:
- No non-blank lines submitted -> NoLinesSubmittedError ("no lines entered")
- Lines submitted but all duplicates -> DedupOutcome.all_duplicates
  ("all lines already exist"), a success with an empty result
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from uuid import UUID

from structlog import get_logger

from src.application.ports.history_ledger import HistoryLedgerProtocol
from src.application.ports.queue_store import QueueStoreProtocol
from src.domain.errors import (
    AdminRoleRequiredError,
    EmptyLineBatchError,
    NoLinesSubmittedError,
    NulCharacterError,
)
from src.domain.models.caller_identity import CallerIdentity
from src.domain.models.queued_line import QueuedLine
from src.domain.services.line_dedup import DedupOutcome, analyze_submission

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _nul_positions(lines: Sequence[str]) -> list[int]:
    return [index for index, line in enumerate(lines) if "\x00" in line]


class LineSubmissionService:
    """Service for deduplicating, enqueuing and maintaining queued lines.

    Example:
        >>> outcome = await service.dedupe(caller, ["a", "b", "a"])
        >>> created = await service.enqueue(caller, list(outcome.lines))
    """

    def __init__(
        self,
        queue_store: QueueStoreProtocol,
        history_ledger: HistoryLedgerProtocol,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the submission service.

        Args:
            queue_store: Team-scoped queue persistence.
            history_ledger: Team-scoped claim history.
            clock: Source of the current UTC time.
        """
        self._queue_store = queue_store
        self._history_ledger = history_ledger
        self._clock = clock

    async def dedupe(
        self,
        caller: CallerIdentity,
        raw_lines: Sequence[str],
    ) -> DedupOutcome:
        """Deduplicate raw input against the caller team's queue and history.

        Does not enqueue anything.

        Args:
            caller: Identity of the submitting user.
            raw_lines: Lines as entered, blank lines allowed.

        Returns:
            DedupOutcome with accepted lines and rejection counts.

        Raises:
            NoLinesSubmittedError: Input had no non-blank lines.
            NulCharacterError: A line contains U+0000.
        """
        log = logger.bind(team_id=caller.team_id, user_id=caller.user_id)
        nul_positions = _nul_positions(raw_lines)
        if nul_positions:
            log.warning("lines_rejected_nul_character", positions=nul_positions)
            raise NulCharacterError("lines", nul_positions)

        if not any(line.strip() for line in raw_lines):
            log.info("dedupe_rejected_no_lines", raw_count=len(raw_lines))
            raise NoLinesSubmittedError()

        queue_contents = await self._queue_store.contents(caller.team_id)
        history_contents = await self._history_ledger.contents(caller.team_id)

        outcome = analyze_submission(raw_lines, queue_contents, history_contents)
        log.info(
            "dedupe_completed",
            submitted_count=outcome.submitted_count,
            unique_count=outcome.unique_count,
            batch_duplicates=outcome.batch_duplicates,
            queued_duplicates=outcome.queued_duplicates,
            history_duplicates=outcome.history_duplicates,
            all_duplicates=outcome.all_duplicates,
        )
        return outcome

    async def enqueue(
        self,
        caller: CallerIdentity,
        lines: Sequence[str],
    ) -> list[QueuedLine]:
        """Append lines to the caller team's queue.

        Args:
            caller: Identity of the submitting user.
            lines: Lines to store, typically a dedupe result.

        Returns:
            Created QueuedLine records in input order.

        Raises:
            EmptyLineBatchError: No lines, or a blank line in the batch.
            NulCharacterError: A line contains U+0000.
        """
        log = logger.bind(team_id=caller.team_id, user_id=caller.user_id)

        if not lines:
            log.warning("enqueue_rejected_empty_batch")
            raise EmptyLineBatchError()
        blank_positions = [index for index, line in enumerate(lines) if not line.strip()]
        if blank_positions:
            log.warning("enqueue_rejected_blank_lines", positions=blank_positions)
            raise EmptyLineBatchError(
                f"Lines must not be blank (positions {blank_positions})"
            )
        nul_positions = _nul_positions(lines)
        if nul_positions:
            log.warning("lines_rejected_nul_character", positions=nul_positions)
            raise NulCharacterError("lines", nul_positions)

        created = await self._queue_store.append(
            team_id=caller.team_id,
            lines=list(lines),
            added_by=caller.user_id,
            added_at=self._clock(),
        )
        log.info("lines_enqueued", count=len(created))
        return created

    async def list_queue(self, caller: CallerIdentity) -> list[QueuedLine]:
        """List the caller team's queued lines, newest first."""
        return await self._queue_store.list_lines(caller.team_id)

    async def queue_count(self, caller: CallerIdentity) -> int:
        """Return the number of lines queued for the caller's team."""
        return await self._queue_store.count(caller.team_id)

    async def remove_line(self, caller: CallerIdentity, line_id: UUID) -> None:
        """Delete one queued line from the caller's team.

        Args:
            caller: Identity of the requesting user.
            line_id: Line to delete.

        Raises:
            QueuedLineNotFoundError: No such line under the caller's team.
        """
        await self._queue_store.remove(caller.team_id, line_id)
        logger.info(
            "queued_line_removed",
            team_id=caller.team_id,
            user_id=caller.user_id,
            line_id=str(line_id),
        )

    async def clear_queue(self, caller: CallerIdentity) -> int:
        """Delete every queued line for the caller's team.

        Args:
            caller: Identity of the requesting user.

        Returns:
            Number of lines removed.

        Raises:
            AdminRoleRequiredError: Caller is not a team admin.
        """
        log = logger.bind(team_id=caller.team_id, user_id=caller.user_id)
        if not caller.is_admin:
            log.warning("queue_clear_denied", role=caller.role.value)
            raise AdminRoleRequiredError(
                team_id=caller.team_id,
                user_id=caller.user_id,
                role=caller.role.value,
                operation="clear the queue",
            )
        removed = await self._queue_store.clear(caller.team_id)
        log.info("queue_cleared", removed_count=removed)
        return removed

"""In-memory stubs for the queue store, history ledger and claim transfer.

The three ports share one TeamLineState, the way they would share one
database, so the claim transfer can touch the queue and the history
atomically. The stubs simulate:
- Team-scoped queues with store-assigned creation order
- Append-only history per team
- Per-(team, user) last claim timestamps
- Conditional removal of an exact id set (optimistic claim conflicts)

Every access runs under the state's asyncio.Lock, so the transfer is a
single critical section: readers never see a line both queued and
claimed.

Thread-safety note: These stubs are safe for concurrent coroutines on
one event loop. They are NOT thread-safe across event loops.

Usage:
    store = TeamLineStoreStub()
    service = LineClaimService(
        queue_store=store.queue_store,
        claim_transfer=store.claim_transfer,
        settings_service=settings_service,
    )
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timedelta
from uuid import UUID, uuid4

from structlog import get_logger

from src.domain.errors import (
    ClaimConflictError,
    CooldownActiveError,
    QueuedLineNotFoundError,
)
from src.domain.models.history_entry import HistoryEntry
from src.domain.models.queued_line import QueuedLine

logger = get_logger(__name__)

TransferHook = Callable[[str, Sequence[UUID]], Awaitable[None]]


class TeamLineState:
    """Shared in-memory tables for the three line stubs.

    Attributes:
        lock: Guards every read and write.
        queues: Per-team queued lines keyed by id, in insertion order.
        history: Per-team history entries in append order.
        last_claims: Last successful claim time per (team_id, user_id).
    """

    def __init__(self) -> None:
        """Initialize empty tables."""
        self.lock = asyncio.Lock()
        self.queues: dict[str, dict[UUID, QueuedLine]] = {}
        self.history: dict[str, list[HistoryEntry]] = {}
        self.last_claims: dict[tuple[str, str], datetime] = {}
        self._sequence = itertools.count(1)

    def next_sequence(self) -> int:
        """Return the next creation-order value."""
        return next(self._sequence)

    def append_history_locked(
        self, team_id: str, entries: Sequence[HistoryEntry]
    ) -> None:
        """Append entries; caller must hold ``lock``.

        Validates every entry before writing any, so a bad batch leaves
        the history untouched.

        Raises:
            ValueError: If an entry belongs to a different team.
        """
        for entry in entries:
            if entry.team_id != team_id:
                raise ValueError(
                    f"History entry {entry.id} belongs to team {entry.team_id}, "
                    f"not {team_id}"
                )
        self.history.setdefault(team_id, []).extend(entries)

    def reset(self) -> None:
        """Drop all data."""
        self.queues.clear()
        self.history.clear()
        self.last_claims.clear()
        self._sequence = itertools.count(1)


class QueueStoreStub:
    """In-memory implementation of QueueStoreProtocol."""

    def __init__(self, state: TeamLineState | None = None) -> None:
        """Initialize the stub.

        Args:
            state: Shared tables; a private one is created if omitted.
        """
        self._state = state or TeamLineState()

    async def append(
        self,
        team_id: str,
        lines: Sequence[str],
        added_by: str,
        added_at: datetime,
    ) -> list[QueuedLine]:
        """Append lines to the team's queue in the given order.

        Args:
            team_id: Owning team.
            lines: Line contents.
            added_by: Submitting user id.
            added_at: Timestamp stamped on every line of the batch.

        Returns:
            Created QueuedLine records in input order.
        """
        async with self._state.lock:
            queue = self._state.queues.setdefault(team_id, {})
            created = [
                QueuedLine(
                    id=uuid4(),
                    team_id=team_id,
                    content=content,
                    added_by=added_by,
                    added_at=added_at,
                    sequence=self._state.next_sequence(),
                )
                for content in lines
            ]
            for line in created:
                queue[line.id] = line
            return created

    async def list_lines(self, team_id: str) -> list[QueuedLine]:
        """List all queued lines for a team, newest first."""
        async with self._state.lock:
            lines = list(self._state.queues.get(team_id, {}).values())
        return sorted(lines, key=lambda line: line.sequence, reverse=True)

    async def select_oldest(self, team_id: str, limit: int) -> list[QueuedLine]:
        """Select up to ``limit`` lines for a team, oldest first."""
        async with self._state.lock:
            lines = list(self._state.queues.get(team_id, {}).values())
        lines.sort(key=lambda line: line.sequence)
        return lines[:limit]

    async def contents(self, team_id: str) -> list[str]:
        """Return the raw content of every queued line for the team."""
        async with self._state.lock:
            queue = self._state.queues.get(team_id, {})
            return [line.content for line in queue.values()]

    async def count(self, team_id: str) -> int:
        """Return the number of queued lines for the team."""
        async with self._state.lock:
            return len(self._state.queues.get(team_id, {}))

    async def remove(self, team_id: str, line_id: UUID) -> None:
        """Delete one line from the team's queue.

        Raises:
            QueuedLineNotFoundError: No such line under this team.
        """
        async with self._state.lock:
            queue = self._state.queues.get(team_id, {})
            if line_id not in queue:
                raise QueuedLineNotFoundError(team_id, str(line_id))
            del queue[line_id]

    async def clear(self, team_id: str) -> int:
        """Delete every queued line for the team."""
        async with self._state.lock:
            queue = self._state.queues.pop(team_id, {})
            return len(queue)


class HistoryLedgerStub:
    """In-memory implementation of HistoryLedgerProtocol."""

    def __init__(self, state: TeamLineState | None = None) -> None:
        """Initialize the stub.

        Args:
            state: Shared tables; a private one is created if omitted.
        """
        self._state = state or TeamLineState()

    async def append(self, team_id: str, entries: Sequence[HistoryEntry]) -> None:
        """Record entries for a team, all or nothing.

        Raises:
            ValueError: If an entry belongs to a different team.
        """
        async with self._state.lock:
            self._state.append_history_locked(team_id, entries)

    async def list_entries(
        self,
        team_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[HistoryEntry]:
        """List a team's history, newest claim first."""
        async with self._state.lock:
            entries = list(self._state.history.get(team_id, []))
        entries.reverse()
        end = None if limit is None else offset + limit
        return entries[offset:end]

    async def search(
        self,
        team_id: str,
        query: str,
        limit: int | None = None,
    ) -> list[HistoryEntry]:
        """Find entries whose content contains ``query``, ignoring case.

        Case is folded with ``lower()`` to match SQL ``lower()``.
        """
        needle = query.lower()
        async with self._state.lock:
            entries = list(self._state.history.get(team_id, []))
        matches = [
            entry for entry in reversed(entries) if needle in entry.content.lower()
        ]
        return matches if limit is None else matches[:limit]

    async def contents(self, team_id: str) -> list[str]:
        """Return the content of every history entry for the team."""
        async with self._state.lock:
            return [entry.content for entry in self._state.history.get(team_id, [])]

    async def count(self, team_id: str) -> int:
        """Return the number of history entries for the team."""
        async with self._state.lock:
            return len(self._state.history.get(team_id, []))


class ClaimTransferStub:
    """In-memory implementation of ClaimTransferProtocol.

    Runs the cooldown check, conditional queue removal, history append
    and cooldown stamp inside one critical section.
    """

    def __init__(self, state: TeamLineState | None = None) -> None:
        """Initialize the stub.

        Args:
            state: Shared tables; a private one is created if omitted.
        """
        self._state = state or TeamLineState()
        self._before_transfer: TransferHook | None = None
        self._fail_transfer_with: Exception | None = None

    async def get_last_claim_at(self, team_id: str, user_id: str) -> datetime | None:
        """Return when the user's last claim committed, or None."""
        async with self._state.lock:
            return self._state.last_claims.get((team_id, user_id))

    async def transfer(
        self,
        team_id: str,
        user_id: str,
        line_ids: Sequence[UUID],
        entries: Sequence[HistoryEntry],
        claimed_at: datetime,
        cooldown: timedelta | None,
    ) -> None:
        """Atomically move the selected lines into history.

        Raises:
            CooldownActiveError: The claimant is still cooling down.
            ClaimConflictError: Some selected line was already removed.
        """
        if self._before_transfer is not None:
            await self._before_transfer(team_id, line_ids)

        state = self._state
        async with state.lock:
            if self._fail_transfer_with is not None:
                raise self._fail_transfer_with

            last_claim_at = state.last_claims.get((team_id, user_id))
            if cooldown is not None and last_claim_at is not None:
                cooldown_until = last_claim_at + cooldown
                if cooldown_until > claimed_at:
                    raise CooldownActiveError(
                        team_id=team_id,
                        user_id=user_id,
                        last_claim_at=last_claim_at,
                        cooldown_until=cooldown_until,
                        now=claimed_at,
                    )

            queue = state.queues.get(team_id, {})
            present = [line_id for line_id in line_ids if line_id in queue]
            if len(present) != len(line_ids):
                logger.debug(
                    "stub_claim_transfer_conflict",
                    team_id=team_id,
                    expected=len(line_ids),
                    present=len(present),
                )
                raise ClaimConflictError(
                    team_id=team_id,
                    expected_count=len(line_ids),
                    removed_count=len(present),
                )

            state.append_history_locked(team_id, entries)
            for line_id in line_ids:
                del queue[line_id]
            state.last_claims[(team_id, user_id)] = claimed_at

    # Test helper methods

    def set_before_transfer_hook(self, hook: TransferHook | None) -> None:
        """Run ``hook`` just before each transfer takes the lock (test helper).

        Lets tests change the queue between selection and transfer to
        force an optimistic-concurrency conflict.

        Args:
            hook: Async callable receiving (team_id, line_ids), or None.
        """
        self._before_transfer = hook

    def fail_transfers_with(self, error: Exception | None) -> None:
        """Make every transfer raise ``error`` before writing (test helper).

        Args:
            error: Exception to raise, or None to restore normal behavior.
        """
        self._fail_transfer_with = error

    def set_last_claim_at(self, team_id: str, user_id: str, at: datetime) -> None:
        """Set a user's last claim time (test helper)."""
        self._state.last_claims[(team_id, user_id)] = at


class TeamLineStoreStub:
    """Bundle of the three line stubs over one shared state.

    Attributes:
        state: Shared in-memory tables.
        queue_store: QueueStoreProtocol implementation.
        history_ledger: HistoryLedgerProtocol implementation.
        claim_transfer: ClaimTransferProtocol implementation.
    """

    def __init__(self) -> None:
        """Initialize empty stores."""
        self.state = TeamLineState()
        self.queue_store = QueueStoreStub(self.state)
        self.history_ledger = HistoryLedgerStub(self.state)
        self.claim_transfer = ClaimTransferStub(self.state)

    # Test helper methods

    def queued_ids(self, team_id: str) -> set[UUID]:
        """Return ids currently queued for the team."""
        return set(self.state.queues.get(team_id, {}))

    def history_source_ids(self, team_id: str) -> set[UUID]:
        """Return queued-line ids recorded in the team's history."""
        return {
            entry.source_line_id
            for entry in self.state.history.get(team_id, [])
            if entry.source_line_id is not None
        }

    def reset(self) -> None:
        """Reset all stored data and test hooks."""
        self.state.reset()
        self.claim_transfer.set_before_transfer_hook(None)
        self.claim_transfer.fail_transfers_with(None)

"""PostgreSQL queue store, history ledger and claim transfer.

Tables (see migrations/001_line_sorter.sql):
- queued_lines: live queue, creation order from ``seq``
- claim_history: append-only claimed lines
- claim_cooldowns: last claim instant per (team_id, user_id)

The claim transfer runs in one transaction:
    INSERT INTO claim_cooldowns ... ON CONFLICT DO NOTHING
    SELECT last_claim_at, now() ... FOR UPDATE
    DELETE FROM queued_lines WHERE id = ANY(:ids) AND team_id = :team_id RETURNING id
    INSERT INTO claim_history ...
    UPDATE claim_cooldowns SET last_claim_at = <database now> ...

The cooldown is compared and stamped with the database clock (now(),
the transaction start), never an app server clock. History entries keep
the caller-supplied claimed_at.

If the DELETE returns fewer rows than were selected, a concurrent claim
won the race: the transaction rolls back and ClaimConflictError is raised.
Driver failures surface as StorageUnavailableError.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from src.domain.errors import (
    ClaimConflictError,
    CooldownActiveError,
    QueuedLineNotFoundError,
    StorageUnavailableError,
)
from src.domain.models.history_entry import HistoryEntry
from src.domain.models.queued_line import QueuedLine

logger = get_logger(__name__)

_QUEUED_LINE_COLUMNS = "id, seq, team_id, content, added_by, added_at"
_HISTORY_COLUMNS = (
    "id, team_id, content, claimed_by, claimed_by_name, claimed_at, "
    "original_added_by, original_added_at, source_line_id"
)


@asynccontextmanager
async def _storage_errors(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error(
            "storage_operation_failed",
            operation=operation,
            error_type=type(exc).__name__,
        )
        raise StorageUnavailableError(operation) from exc


def _row_to_queued_line(row: Any) -> QueuedLine:
    return QueuedLine(
        id=row.id,
        team_id=row.team_id,
        content=row.content,
        added_by=row.added_by,
        added_at=row.added_at,
        sequence=row.seq,
    )


def _row_to_history_entry(row: Any) -> HistoryEntry:
    return HistoryEntry(
        id=row.id,
        team_id=row.team_id,
        content=row.content,
        claimed_by=row.claimed_by,
        claimed_by_name=row.claimed_by_name,
        claimed_at=row.claimed_at,
        original_added_by=row.original_added_by,
        original_added_at=row.original_added_at,
        source_line_id=row.source_line_id,
    )


def _history_params(entry: HistoryEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "team_id": entry.team_id,
        "content": entry.content,
        "claimed_by": entry.claimed_by,
        "claimed_by_name": entry.claimed_by_name,
        "claimed_at": entry.claimed_at,
        "original_added_by": entry.original_added_by,
        "original_added_at": entry.original_added_at,
        "source_line_id": entry.source_line_id,
    }


_INSERT_HISTORY = text(f"""
    INSERT INTO claim_history ({_HISTORY_COLUMNS})
    VALUES (:id, :team_id, :content, :claimed_by, :claimed_by_name, :claimed_at,
            :original_added_by, :original_added_at, :source_line_id)
""")


class PostgresQueueStore:
    """PostgreSQL implementation of QueueStoreProtocol."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize with a SQLAlchemy async session factory."""
        self._session_factory = session_factory

    async def append(
        self,
        team_id: str,
        lines: Sequence[str],
        added_by: str,
        added_at: datetime,
    ) -> list[QueuedLine]:
        """Insert lines in the given order within one transaction."""
        created: list[QueuedLine] = []
        async with _storage_errors("enqueue"):
            async with self._session_factory() as session, session.begin():
                for content in lines:
                    result = await session.execute(
                        text(f"""
                            INSERT INTO queued_lines (id, team_id, content, added_by, added_at)
                            VALUES (:id, :team_id, :content, :added_by, :added_at)
                            RETURNING {_QUEUED_LINE_COLUMNS}
                        """),
                        {
                            "id": uuid4(),
                            "team_id": team_id,
                            "content": content,
                            "added_by": added_by,
                            "added_at": added_at,
                        },
                    )
                    created.append(_row_to_queued_line(result.one()))
        return created

    async def list_lines(self, team_id: str) -> list[QueuedLine]:
        """List the team's queued lines, newest first."""
        async with _storage_errors("list_queue"):
            async with self._session_factory() as session:
                result = await session.execute(
                    text(f"""
                        SELECT {_QUEUED_LINE_COLUMNS}
                        FROM queued_lines
                        WHERE team_id = :team_id
                        ORDER BY seq DESC
                    """),
                    {"team_id": team_id},
                )
                return [_row_to_queued_line(row) for row in result]

    async def select_oldest(self, team_id: str, limit: int) -> list[QueuedLine]:
        """Select up to ``limit`` of the team's oldest lines without locking."""
        async with _storage_errors("select_oldest"):
            async with self._session_factory() as session:
                result = await session.execute(
                    text(f"""
                        SELECT {_QUEUED_LINE_COLUMNS}
                        FROM queued_lines
                        WHERE team_id = :team_id
                        ORDER BY seq ASC
                        LIMIT :limit
                    """),
                    {"team_id": team_id, "limit": limit},
                )
                return [_row_to_queued_line(row) for row in result]

    async def contents(self, team_id: str) -> list[str]:
        """Return the content of every queued line for the team."""
        async with _storage_errors("queue_contents"):
            async with self._session_factory() as session:
                result = await session.execute(
                    text("SELECT content FROM queued_lines WHERE team_id = :team_id"),
                    {"team_id": team_id},
                )
                return list(result.scalars())

    async def count(self, team_id: str) -> int:
        """Return the number of queued lines for the team."""
        async with _storage_errors("queue_count"):
            async with self._session_factory() as session:
                result = await session.execute(
                    text("SELECT COUNT(*) FROM queued_lines WHERE team_id = :team_id"),
                    {"team_id": team_id},
                )
                return result.scalar() or 0

    async def remove(self, team_id: str, line_id: UUID) -> None:
        """Delete one line from the team's queue.

        Raises:
            QueuedLineNotFoundError: No such line under this team.
        """
        async with _storage_errors("remove_line"):
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    text("""
                        DELETE FROM queued_lines
                        WHERE id = :id AND team_id = :team_id
                        RETURNING id
                    """),
                    {"id": line_id, "team_id": team_id},
                )
                removed = result.scalar_one_or_none()
        if removed is None:
            raise QueuedLineNotFoundError(team_id, str(line_id))

    async def clear(self, team_id: str) -> int:
        """Delete every queued line for the team."""
        async with _storage_errors("clear_queue"):
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    text("DELETE FROM queued_lines WHERE team_id = :team_id RETURNING id"),
                    {"team_id": team_id},
                )
                return len(result.all())


class PostgresHistoryLedger:
    """PostgreSQL implementation of HistoryLedgerProtocol."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize with a SQLAlchemy async session factory."""
        self._session_factory = session_factory

    async def append(self, team_id: str, entries: Sequence[HistoryEntry]) -> None:
        """Insert entries for a team in one transaction.

        Raises:
            ValueError: If an entry belongs to a different team.
        """
        for entry in entries:
            if entry.team_id != team_id:
                raise ValueError(
                    f"History entry {entry.id} belongs to team {entry.team_id}, "
                    f"not {team_id}"
                )
        if not entries:
            return
        async with _storage_errors("append_history"):
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    _INSERT_HISTORY, [_history_params(entry) for entry in entries]
                )

    async def list_entries(
        self,
        team_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[HistoryEntry]:
        """List the team's history, newest claim first."""
        async with _storage_errors("list_history"):
            async with self._session_factory() as session:
                result = await session.execute(
                    text(f"""
                        SELECT {_HISTORY_COLUMNS}
                        FROM claim_history
                        WHERE team_id = :team_id
                        ORDER BY claimed_at DESC, seq DESC
                        LIMIT :limit OFFSET :offset
                    """),
                    {"team_id": team_id, "limit": limit, "offset": offset},
                )
                return [_row_to_history_entry(row) for row in result]

    async def search(
        self,
        team_id: str,
        query: str,
        limit: int | None = None,
    ) -> list[HistoryEntry]:
        """Find entries whose content contains ``query``, ignoring case."""
        async with _storage_errors("search_history"):
            async with self._session_factory() as session:
                result = await session.execute(
                    text(f"""
                        SELECT {_HISTORY_COLUMNS}
                        FROM claim_history
                        WHERE team_id = :team_id
                          AND strpos(lower(content), lower(CAST(:query AS TEXT))) > 0
                        ORDER BY claimed_at DESC, seq DESC
                        LIMIT :limit
                    """),
                    {"team_id": team_id, "query": query, "limit": limit},
                )
                return [_row_to_history_entry(row) for row in result]

    async def contents(self, team_id: str) -> list[str]:
        """Return the content of every history entry for the team."""
        async with _storage_errors("history_contents"):
            async with self._session_factory() as session:
                result = await session.execute(
                    text("SELECT content FROM claim_history WHERE team_id = :team_id"),
                    {"team_id": team_id},
                )
                return list(result.scalars())

    async def count(self, team_id: str) -> int:
        """Return the number of history entries for the team."""
        async with _storage_errors("history_count"):
            async with self._session_factory() as session:
                result = await session.execute(
                    text("SELECT COUNT(*) FROM claim_history WHERE team_id = :team_id"),
                    {"team_id": team_id},
                )
                return result.scalar() or 0


class PostgresClaimTransfer:
    """PostgreSQL implementation of ClaimTransferProtocol."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize with a SQLAlchemy async session factory."""
        self._session_factory = session_factory

    async def get_last_claim_at(self, team_id: str, user_id: str) -> datetime | None:
        """Return when the user's last claim committed, or None."""
        async with _storage_errors("get_last_claim_at"):
            async with self._session_factory() as session:
                result = await session.execute(
                    text("""
                        SELECT last_claim_at
                        FROM claim_cooldowns
                        WHERE team_id = :team_id AND user_id = :user_id
                    """),
                    {"team_id": team_id, "user_id": user_id},
                )
                return result.scalar_one_or_none()

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
            StorageUnavailableError: The transaction failed; nothing changed.
        """
        log = logger.bind(team_id=team_id, user_id=user_id, selected=len(line_ids))
        keys = {"team_id": team_id, "user_id": user_id}

        async with _storage_errors("claim_transfer"):
            async with self._session_factory() as session, session.begin():
                # Lock the claimant's cooldown row for the whole transaction
                await session.execute(
                    text("""
                        INSERT INTO claim_cooldowns (team_id, user_id, last_claim_at)
                        VALUES (:team_id, :user_id, NULL)
                        ON CONFLICT (team_id, user_id) DO NOTHING
                    """),
                    keys,
                )
                locked = await session.execute(
                    text("""
                        SELECT last_claim_at, now() AS db_now
                        FROM claim_cooldowns
                        WHERE team_id = :team_id AND user_id = :user_id
                        FOR UPDATE
                    """),
                    keys,
                )
                lock_row = locked.one()
                last_claim_at, db_now = lock_row.last_claim_at, lock_row.db_now
                if cooldown is not None and last_claim_at is not None:
                    cooldown_until = last_claim_at + cooldown
                    if cooldown_until > db_now:
                        raise CooldownActiveError(
                            team_id=team_id,
                            user_id=user_id,
                            last_claim_at=last_claim_at,
                            cooldown_until=cooldown_until,
                            now=db_now,
                        )

                removed = await session.execute(
                    text("""
                        DELETE FROM queued_lines
                        WHERE id = ANY(CAST(:ids AS uuid[])) AND team_id = :team_id
                        RETURNING id
                    """),
                    {"ids": list(line_ids), "team_id": team_id},
                )
                removed_count = len(removed.all())
                if removed_count != len(line_ids):
                    log.debug("claim_transfer_conflict", removed=removed_count)
                    raise ClaimConflictError(
                        team_id=team_id,
                        expected_count=len(line_ids),
                        removed_count=removed_count,
                    )

                await session.execute(
                    _INSERT_HISTORY, [_history_params(entry) for entry in entries]
                )
                await session.execute(
                    text("""
                        UPDATE claim_cooldowns
                        SET last_claim_at = :stamped_at
                        WHERE team_id = :team_id AND user_id = :user_id
                    """),
                    {**keys, "stamped_at": db_now},
                )


class PostgresLineStore:
    """Bundle of the PostgreSQL line adapters over one session factory.

    Attributes:
        queue_store: QueueStoreProtocol implementation.
        history_ledger: HistoryLedgerProtocol implementation.
        claim_transfer: ClaimTransferProtocol implementation.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the adapters."""
        self.queue_store = PostgresQueueStore(session_factory)
        self.history_ledger = PostgresHistoryLedger(session_factory)
        self.claim_transfer = PostgresClaimTransfer(session_factory)

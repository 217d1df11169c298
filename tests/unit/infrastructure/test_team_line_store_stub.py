"""Unit tests for the in-memory line store stubs."""

import asyncio
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from src.application.ports.claim_transfer import ClaimTransferProtocol
from src.application.ports.history_ledger import HistoryLedgerProtocol
from src.application.ports.queue_store import QueueStoreProtocol
from src.domain.errors import (
    ClaimConflictError,
    CooldownActiveError,
    QueuedLineNotFoundError,
)
from src.domain.models.caller_identity import CallerIdentity
from src.domain.models.history_entry import HistoryEntry
from src.infrastructure.stubs.team_line_store_stub import TeamLineStoreStub

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
CLAIMANT = CallerIdentity(user_id="user-1", team_id="team-a")


@pytest.fixture
def store() -> TeamLineStoreStub:
    return TeamLineStoreStub()


def test_stubs_satisfy_protocols(store: TeamLineStoreStub) -> None:
    assert isinstance(store.queue_store, QueueStoreProtocol)
    assert isinstance(store.history_ledger, HistoryLedgerProtocol)
    assert isinstance(store.claim_transfer, ClaimTransferProtocol)


class TestQueueStoreStub:
    async def test_select_oldest_and_list_newest(self, store: TeamLineStoreStub) -> None:
        await store.queue_store.append("team-a", ["a", "b", "c"], "u", NOW)

        oldest = await store.queue_store.select_oldest("team-a", 2)
        newest = await store.queue_store.list_lines("team-a")

        assert [line.content for line in oldest] == ["a", "b"]
        assert [line.content for line in newest] == ["c", "b", "a"]

    async def test_select_does_not_remove(self, store: TeamLineStoreStub) -> None:
        await store.queue_store.append("team-a", ["a"], "u", NOW)

        await store.queue_store.select_oldest("team-a", 5)

        assert await store.queue_store.count("team-a") == 1

    async def test_remove_scoped_by_team(self, store: TeamLineStoreStub) -> None:
        created = await store.queue_store.append("team-a", ["a"], "u", NOW)

        with pytest.raises(QueuedLineNotFoundError):
            await store.queue_store.remove("team-b", created[0].id)

    async def test_clear_returns_count(self, store: TeamLineStoreStub) -> None:
        await store.queue_store.append("team-a", ["a", "b"], "u", NOW)

        assert await store.queue_store.clear("team-a") == 2
        assert await store.queue_store.clear("team-a") == 0


class TestHistoryLedgerStub:
    async def test_rejects_foreign_entries_atomically(
        self, store: TeamLineStoreStub
    ) -> None:
        lines = await store.queue_store.append("team-a", ["a"], "u", NOW)
        good = HistoryEntry.from_claimed_line(lines[0], CLAIMANT, NOW)
        foreign = HistoryEntry(
            id=uuid4(),
            team_id="team-b",
            content="b",
            claimed_by="x",
            claimed_by_name="x",
            claimed_at=NOW,
            original_added_by="x",
            original_added_at=NOW,
        )

        with pytest.raises(ValueError, match="belongs to team"):
            await store.history_ledger.append("team-a", [good, foreign])

        assert await store.history_ledger.count("team-a") == 0

    async def test_search_limit(self, store: TeamLineStoreStub) -> None:
        lines = await store.queue_store.append(
            "team-a", ["Apple", "apple pie", "pear"], "u", NOW
        )
        await store.history_ledger.append(
            "team-a",
            [HistoryEntry.from_claimed_line(line, CLAIMANT, NOW) for line in lines],
        )

        results = await store.history_ledger.search("team-a", "APPLE", limit=1)

        assert [entry.content for entry in results] == ["apple pie"]

    async def test_search_lowercases_like_sql(self, store: TeamLineStoreStub) -> None:
        lines = await store.queue_store.append("team-a", ["Straße"], "u", NOW)
        await store.history_ledger.append(
            "team-a",
            [HistoryEntry.from_claimed_line(line, CLAIMANT, NOW) for line in lines],
        )

        assert await store.history_ledger.search("team-a", "strasse") == []
        assert len(await store.history_ledger.search("team-a", "STRAßE")) == 1


class TestClaimTransferStub:
    async def _select(self, store: TeamLineStoreStub, count: int):
        selected = await store.queue_store.select_oldest("team-a", count)
        entries = [
            HistoryEntry.from_claimed_line(line, CLAIMANT, NOW) for line in selected
        ]
        return [line.id for line in selected], entries

    async def test_transfer_moves_lines(self, store: TeamLineStoreStub) -> None:
        await store.queue_store.append("team-a", ["a", "b"], "u", NOW)
        ids, entries = await self._select(store, 2)

        await store.claim_transfer.transfer(
            "team-a", "user-1", ids, entries, NOW, timedelta(minutes=5)
        )

        assert store.queued_ids("team-a") == set()
        assert store.history_source_ids("team-a") == set(ids)
        assert await store.claim_transfer.get_last_claim_at("team-a", "user-1") == NOW

    async def test_conflict_changes_nothing(self, store: TeamLineStoreStub) -> None:
        await store.queue_store.append("team-a", ["a", "b"], "u", NOW)
        ids, entries = await self._select(store, 2)
        await store.queue_store.remove("team-a", ids[1])

        with pytest.raises(ClaimConflictError) as exc_info:
            await store.claim_transfer.transfer(
                "team-a", "user-1", ids, entries, NOW, None
            )

        assert exc_info.value.removed_count == 1
        assert store.queued_ids("team-a") == {ids[0]}
        assert await store.history_ledger.count("team-a") == 0

    async def test_cooldown_checked_at_commit(self, store: TeamLineStoreStub) -> None:
        await store.queue_store.append("team-a", ["a"], "u", NOW)
        store.claim_transfer.set_last_claim_at("team-a", "user-1", NOW - timedelta(minutes=1))
        ids, entries = await self._select(store, 1)

        with pytest.raises(CooldownActiveError):
            await store.claim_transfer.transfer(
                "team-a", "user-1", ids, entries, NOW, timedelta(minutes=5)
            )

        assert store.queued_ids("team-a") == set(ids)

    async def test_concurrent_transfers_hand_out_each_line_once(
        self, store: TeamLineStoreStub
    ) -> None:
        await store.queue_store.append("team-a", ["a", "b", "c"], "u", NOW)
        ids, entries = await self._select(store, 3)

        results = await asyncio.gather(
            store.claim_transfer.transfer("team-a", "user-1", ids, entries, NOW, None),
            store.claim_transfer.transfer("team-a", "user-2", ids, entries, NOW, None),
            return_exceptions=True,
        )

        assert sum(isinstance(r, ClaimConflictError) for r in results) == 1
        assert await store.history_ledger.count("team-a") == 3

    async def test_reset_clears_hooks(self, store: TeamLineStoreStub) -> None:
        store.claim_transfer.fail_transfers_with(RuntimeError("boom"))
        await store.queue_store.append("team-a", ["a"], "u", NOW)

        store.reset()

        assert await store.queue_store.count("team-a") == 0
        await store.queue_store.append("team-a", ["a"], "u", NOW)
        ids, entries = await self._select(store, 1)
        await store.claim_transfer.transfer("team-a", "user-1", ids, entries, NOW, None)

"""Unit tests for HistoryQueryService."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from src.application.services.history_query_service import HistoryQueryService
from src.config.sorter_config import TEST_SORTER_CONFIG
from src.domain.errors import NulCharacterError
from src.domain.models.caller_identity import CallerIdentity
from src.domain.models.history_entry import HistoryEntry
from src.infrastructure.stubs.team_line_store_stub import TeamLineStoreStub

BASE = datetime(2026, 1, 15, 9, 0, tzinfo=timezone.utc)


def _entry(content: str, minutes: int, team_id: str = "team-a") -> HistoryEntry:
    return HistoryEntry(
        id=uuid4(),
        team_id=team_id,
        content=content,
        claimed_by="user-1",
        claimed_by_name="Ada",
        claimed_at=BASE + timedelta(minutes=minutes),
        original_added_by="submitter",
        original_added_at=BASE,
    )


@pytest.fixture
async def store() -> TeamLineStoreStub:
    store = TeamLineStoreStub()
    await store.history_ledger.append(
        "team-a",
        [_entry(f"Entry {index}", minutes=index) for index in range(30)],
    )
    await store.history_ledger.append("team-b", [_entry("Entry b", 0, "team-b")])
    return store


@pytest.fixture
def service(store: TeamLineStoreStub) -> HistoryQueryService:
    return HistoryQueryService(store.history_ledger, config=TEST_SORTER_CONFIG)


class TestListHistory:
    async def test_default_page_newest_first(
        self, service: HistoryQueryService, member: CallerIdentity
    ) -> None:
        entries = await service.list_history(member)

        assert len(entries) == 10
        assert entries[0].content == "Entry 29"
        assert entries[-1].content == "Entry 20"

    async def test_offset(
        self, service: HistoryQueryService, member: CallerIdentity
    ) -> None:
        entries = await service.list_history(member, limit=5, offset=25)

        assert [entry.content for entry in entries] == [
            "Entry 4",
            "Entry 3",
            "Entry 2",
            "Entry 1",
            "Entry 0",
        ]

    async def test_limit_capped(
        self, service: HistoryQueryService, member: CallerIdentity
    ) -> None:
        entries = await service.list_history(member, limit=1000)

        assert len(entries) == 30

    async def test_count_is_team_scoped(
        self,
        service: HistoryQueryService,
        member: CallerIdentity,
        outsider: CallerIdentity,
    ) -> None:
        assert await service.history_count(member) == 30
        assert await service.history_count(outsider) == 1


class TestSearchHistory:
    async def test_case_insensitive_substring(
        self, service: HistoryQueryService, member: CallerIdentity
    ) -> None:
        results = await service.search_history(member, "ENTRY 2")

        assert [entry.content for entry in results][:2] == ["Entry 29", "Entry 28"]
        assert all("entry 2" in entry.content.lower() for entry in results)
        assert len(results) == 10

    async def test_blank_query_lists_newest(
        self, service: HistoryQueryService, member: CallerIdentity
    ) -> None:
        results = await service.search_history(member, "   ", limit=3)

        assert [entry.content for entry in results] == [
            "Entry 29",
            "Entry 28",
            "Entry 27",
        ]

    async def test_search_is_team_scoped(
        self, service: HistoryQueryService, member: CallerIdentity
    ) -> None:
        assert await service.search_history(member, "entry b") == []

    async def test_nul_character_in_query_rejected(
        self, service: HistoryQueryService, member: CallerIdentity
    ) -> None:
        with pytest.raises(NulCharacterError) as exc_info:
            await service.search_history(member, "entry\x00")

        assert exc_info.value.field == "query"

"""Unit tests for line sorter domain models."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from src.domain.errors import SettingsOutOfRangeError
from src.domain.models.caller_identity import CallerIdentity, TeamRole
from src.domain.models.history_entry import HistoryEntry
from src.domain.models.line_claim import ClaimResult, CooldownStatus
from src.domain.models.queued_line import QueuedLine
from src.domain.models.sorter_settings import (
    DEFAULT_COOLDOWN_MINUTES,
    DEFAULT_LINES_PER_CLAIM,
    SorterSettings,
    SorterSettingsPatch,
)

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _queued_line(content: str = "hello", team_id: str = "team-a") -> QueuedLine:
    return QueuedLine(
        id=uuid4(),
        team_id=team_id,
        content=content,
        added_by="submitter",
        added_at=NOW - timedelta(hours=1),
        sequence=7,
    )


class TestCallerIdentity:
    """Tests for CallerIdentity."""

    def test_defaults_to_member(self) -> None:
        caller = CallerIdentity(user_id="u", team_id="t")
        assert caller.role == TeamRole.MEMBER
        assert caller.is_admin is False

    def test_admin_role(self) -> None:
        caller = CallerIdentity(user_id="u", team_id="t", role=TeamRole.ADMIN)
        assert caller.is_admin is True

    def test_claim_name_prefers_display_name(self) -> None:
        assert CallerIdentity("u", "t", display_name="Ada").claim_name == "Ada"
        assert CallerIdentity("u", "t").claim_name == "u"

    @pytest.mark.parametrize("user_id,team_id", [("", "t"), ("u", "  ")])
    def test_blank_ids_rejected(self, user_id: str, team_id: str) -> None:
        with pytest.raises(ValueError):
            CallerIdentity(user_id=user_id, team_id=team_id)


class TestQueuedLine:
    """Tests for QueuedLine."""

    def test_naive_timestamp_rejected(self) -> None:
        with pytest.raises(ValueError, match="timezone-aware"):
            QueuedLine(
                id=uuid4(),
                team_id="t",
                content="c",
                added_by="u",
                added_at=datetime(2026, 1, 1),
            )

    def test_to_dict(self) -> None:
        line = _queued_line()
        data = line.to_dict()
        assert data["id"] == str(line.id)
        assert data["content"] == "hello"
        assert data["added_at"] == line.added_at.isoformat()


class TestHistoryEntry:
    """Tests for HistoryEntry."""

    def test_from_claimed_line_preserves_origin(self) -> None:
        line = _queued_line("  Original Text ")
        claimant = CallerIdentity("user-1", "team-a", display_name="Ada")

        entry = HistoryEntry.from_claimed_line(line, claimant, NOW)

        assert entry.content == "  Original Text "
        assert entry.team_id == "team-a"
        assert entry.claimed_by == "user-1"
        assert entry.claimed_by_name == "Ada"
        assert entry.claimed_at == NOW
        assert entry.original_added_by == "submitter"
        assert entry.original_added_at == line.added_at
        assert entry.source_line_id == line.id
        assert entry.id != line.id

    def test_to_dict_serializes_source_line(self) -> None:
        line = _queued_line()
        entry = HistoryEntry.from_claimed_line(line, CallerIdentity("u", "team-a"), NOW)
        assert entry.to_dict()["source_line_id"] == str(line.id)


class TestSorterSettings:
    """Tests for SorterSettings and SorterSettingsPatch."""

    def test_defaults(self) -> None:
        settings = SorterSettings.defaults("team-a")
        assert settings.lines_per_claim == DEFAULT_LINES_PER_CLAIM == 5
        assert settings.cooldown_minutes == DEFAULT_COOLDOWN_MINUTES == 5
        assert settings.is_default is True
        assert settings.cooldown == timedelta(minutes=5)

    @pytest.mark.parametrize(
        "lines_per_claim,cooldown_minutes",
        [(1, 1), (15, 1440), (7, 30)],
    )
    def test_bounds_inclusive(self, lines_per_claim: int, cooldown_minutes: int) -> None:
        settings = SorterSettings("t", lines_per_claim, cooldown_minutes)
        assert settings.lines_per_claim == lines_per_claim

    @pytest.mark.parametrize(
        "lines_per_claim,cooldown_minutes,field",
        [
            (0, 5, "lines_per_claim"),
            (16, 5, "lines_per_claim"),
            (5, 0, "cooldown_minutes"),
            (5, 1441, "cooldown_minutes"),
        ],
    )
    def test_out_of_range_rejected(
        self, lines_per_claim: int, cooldown_minutes: int, field: str
    ) -> None:
        with pytest.raises(SettingsOutOfRangeError) as exc_info:
            SorterSettings("t", lines_per_claim, cooldown_minutes)
        assert exc_info.value.field == field

    def test_bool_is_not_an_int_setting(self) -> None:
        with pytest.raises(SettingsOutOfRangeError):
            SorterSettingsPatch(lines_per_claim=True).validate()

    def test_patch_applies_only_provided_fields(self) -> None:
        current = SorterSettings("t", lines_per_claim=3, cooldown_minutes=10)
        updated = SorterSettingsPatch(cooldown_minutes=60).apply_to(current, NOW)
        assert updated.lines_per_claim == 3
        assert updated.cooldown_minutes == 60
        assert updated.updated_at == NOW

    def test_empty_patch(self) -> None:
        assert SorterSettingsPatch().is_empty is True
        assert SorterSettingsPatch(lines_per_claim=2).is_empty is False


class TestCooldownStatus:
    """Tests for CooldownStatus."""

    def test_never_claimed_is_inactive(self) -> None:
        status = CooldownStatus.evaluate(None, timedelta(minutes=5), NOW)
        assert status.active is False
        assert status.cooldown_until is None
        assert status.remaining_seconds == 0

    def test_active_within_window(self) -> None:
        last = NOW - timedelta(minutes=2)
        status = CooldownStatus.evaluate(last, timedelta(minutes=5), NOW)
        assert status.active is True
        assert status.cooldown_until == last + timedelta(minutes=5)
        assert status.remaining_seconds == 180

    def test_remaining_rounds_up(self) -> None:
        last = NOW - timedelta(minutes=5) + timedelta(milliseconds=200)
        status = CooldownStatus.evaluate(last, timedelta(minutes=5), NOW)
        assert status.remaining_seconds == 1

    def test_expired_exactly_at_boundary(self) -> None:
        last = NOW - timedelta(minutes=5)
        status = CooldownStatus.evaluate(last, timedelta(minutes=5), NOW)
        assert status.active is False


class TestClaimResult:
    """Tests for ClaimResult."""

    def test_partial_claim(self) -> None:
        entry = HistoryEntry.from_claimed_line(
            _queued_line(), CallerIdentity("u", "team-a"), NOW
        )
        result = ClaimResult(
            team_id="team-a",
            claimed_by="u",
            claimed_at=NOW,
            requested_count=3,
            entries=(entry,),
        )
        assert result.claimed_count == 1
        assert result.is_partial is True

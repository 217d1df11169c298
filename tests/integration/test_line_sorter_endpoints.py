"""Integration tests for the line sorter HTTP API.

Runs the real FastAPI app over the in-memory stores with a frozen
clock injected through dependency overrides.
"""

from collections.abc import Generator
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies.line_sorter import (
    get_history_query_service,
    get_line_claim_service,
    get_line_submission_service,
    get_sorter_settings_service,
    reset_line_sorter_dependencies,
)
from src.api.main import app
from src.application.services.history_query_service import HistoryQueryService
from src.application.services.line_claim_service import LineClaimService
from src.application.services.line_submission_service import LineSubmissionService
from src.application.services.sorter_settings_service import SorterSettingsService
from src.config.sorter_config import SorterServiceConfig
from src.infrastructure.stubs.sorter_settings_repository_stub import (
    SorterSettingsRepositoryStub,
)
from src.infrastructure.stubs.team_line_store_stub import TeamLineStoreStub
from tests.helpers.fake_clock import FakeClock

MEMBER = {"X-User-Id": "user-1", "X-Team-Id": "team-a", "X-User-Name": "Ada"}
OTHER_MEMBER = {"X-User-Id": "user-2", "X-Team-Id": "team-a"}
ADMIN = {"X-User-Id": "admin-1", "X-Team-Id": "team-a", "X-User-Role": "admin"}
OUTSIDER = {"X-User-Id": "user-9", "X-Team-Id": "team-b"}


@pytest.fixture
def store() -> TeamLineStoreStub:
    return TeamLineStoreStub()


@pytest.fixture
def client(store: TeamLineStoreStub, clock: FakeClock) -> Generator[TestClient, None, None]:
    config = SorterServiceConfig(environment="development")
    settings_service = SorterSettingsService(SorterSettingsRepositoryStub(), clock=clock)
    submission_service = LineSubmissionService(
        store.queue_store, store.history_ledger, clock=clock
    )
    claim_service = LineClaimService(
        queue_store=store.queue_store,
        claim_transfer=store.claim_transfer,
        settings_service=settings_service,
        config=config,
        clock=clock,
    )
    history_service = HistoryQueryService(store.history_ledger, config=config)

    app.dependency_overrides[get_sorter_settings_service] = lambda: settings_service
    app.dependency_overrides[get_line_submission_service] = lambda: submission_service
    app.dependency_overrides[get_line_claim_service] = lambda: claim_service
    app.dependency_overrides[get_history_query_service] = lambda: history_service
    yield TestClient(app)
    app.dependency_overrides.clear()
    reset_line_sorter_dependencies()


def _enqueue(client: TestClient, lines: list[str], headers: dict = MEMBER) -> list[dict]:
    response = client.post("/v1/queue/lines", json={"lines": lines}, headers=headers)
    assert response.status_code == 201
    return response.json()["lines"]


class TestHealth:
    def test_health(self, client: TestClient, project_version: str) -> None:
        response = client.get("/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["version"] == project_version

    def test_correlation_id_echoed(self, client: TestClient) -> None:
        response = client.get("/v1/health", headers={"X-Correlation-ID": "req-42"})

        assert response.headers["X-Correlation-ID"] == "req-42"


class TestDedupeAndEnqueue:
    def test_requires_identity(self, client: TestClient) -> None:
        response = client.post("/v1/queue/dedupe", json={"lines": ["a"]})

        assert response.status_code == 401

    def test_dedupe_pasted_text(self, client: TestClient) -> None:
        _enqueue(client, ["already here"])

        response = client.post(
            "/v1/queue/dedupe",
            json={"text": "Already Here\n\nnew one\nNEW ONE\nsecond"},
            headers=MEMBER,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["lines"] == ["new one", "second"]
        assert body["submittedCount"] == 4
        assert body["queuedDuplicates"] == 1
        assert body["batchDuplicates"] == 1
        assert body["allDuplicates"] is False

    def test_dedupe_only_blank_lines(self, client: TestClient) -> None:
        response = client.post(
            "/v1/queue/dedupe", json={"lines": ["", "  "]}, headers=MEMBER
        )

        assert response.status_code == 400
        assert (
            response.json()["detail"]["type"] == "urn:line-sorter:queue:no-lines-entered"
        )

    def test_dedupe_all_duplicates(self, client: TestClient) -> None:
        _enqueue(client, ["dup"])

        response = client.post("/v1/queue/dedupe", json={"lines": ["DUP"]}, headers=MEMBER)

        assert response.status_code == 200
        assert response.json()["lines"] == []
        assert response.json()["allDuplicates"] is True

    def test_enqueue_returns_camel_case(self, client: TestClient) -> None:
        lines = _enqueue(client, ["hello"])

        assert lines[0]["content"] == "hello"
        assert lines[0]["addedBy"] == "user-1"
        assert lines[0]["addedAt"].endswith("Z")

    def test_enqueue_blank_line_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/v1/queue/lines", json={"lines": ["ok", " "]}, headers=MEMBER
        )

        assert response.status_code == 400

    def test_enqueue_empty_list_rejected(self, client: TestClient) -> None:
        response = client.post("/v1/queue/lines", json={"lines": []}, headers=MEMBER)

        assert response.status_code == 422

    def test_nul_character_is_invalid_request(self, client: TestClient) -> None:
        dedupe = client.post(
            "/v1/queue/dedupe", json={"lines": ["abc\x00def"]}, headers=MEMBER
        )
        enqueue = client.post(
            "/v1/queue/lines", json={"lines": ["abc\x00def"]}, headers=MEMBER
        )

        assert dedupe.status_code == 400
        assert enqueue.status_code == 400
        assert "Retry-After" not in enqueue.headers
        assert (
            enqueue.json()["detail"]["type"] == "urn:line-sorter:queue:nul-character"
        )


class TestQueueMaintenance:
    def test_list_is_team_scoped(self, client: TestClient) -> None:
        _enqueue(client, ["a", "b"])
        _enqueue(client, ["c"], headers=OUTSIDER)

        response = client.get("/v1/queue/lines", headers=MEMBER)

        assert [line["content"] for line in response.json()["lines"]] == ["b", "a"]
        assert response.json()["count"] == 2

    def test_count_is_team_scoped(self, client: TestClient) -> None:
        _enqueue(client, ["a", "b"])
        _enqueue(client, ["c"], headers=OUTSIDER)

        response = client.get("/v1/queue/count", headers=MEMBER)

        assert response.status_code == 200
        assert response.json() == {"count": 2}

    def test_remove_line(self, client: TestClient) -> None:
        lines = _enqueue(client, ["a"])

        response = client.delete(f"/v1/queue/lines/{lines[0]['id']}", headers=MEMBER)
        again = client.delete(f"/v1/queue/lines/{lines[0]['id']}", headers=MEMBER)

        assert response.status_code == 204
        assert again.status_code == 404

    def test_remove_other_team_line_not_found(self, client: TestClient) -> None:
        lines = _enqueue(client, ["theirs"], headers=OUTSIDER)

        response = client.delete(f"/v1/queue/lines/{lines[0]['id']}", headers=MEMBER)

        assert response.status_code == 404

    def test_clear_requires_admin(self, client: TestClient) -> None:
        _enqueue(client, ["a", "b"])

        denied = client.delete("/v1/queue/lines", headers=MEMBER)
        cleared = client.delete("/v1/queue/lines", headers=ADMIN)

        assert denied.status_code == 403
        assert cleared.status_code == 200
        assert cleared.json() == {"removedCount": 2}


class TestClaim:
    def test_claim_moves_oldest_lines(self, client: TestClient) -> None:
        _enqueue(client, ["one", "two", "three"])

        response = client.post(
            "/v1/queue/claim", json={"requestedCount": 2}, headers=MEMBER
        )

        assert response.status_code == 200
        body = response.json()
        assert body["claimedCount"] == 2
        assert [line["content"] for line in body["lines"]] == ["one", "two"]
        assert {line["claimedAt"] for line in body["lines"]} == {body["claimedAt"]}
        assert body["lines"][0]["claimedByName"] == "Ada"
        assert body["cooldownUntil"] is not None

        queue = client.get("/v1/queue/lines", headers=MEMBER).json()
        assert [line["content"] for line in queue["lines"]] == ["three"]

    @pytest.mark.parametrize("count", [0, 16])
    def test_count_out_of_range(self, client: TestClient, count: int) -> None:
        _enqueue(client, ["a"])

        response = client.post(
            "/v1/queue/claim", json={"requestedCount": count}, headers=MEMBER
        )

        assert response.status_code == 400

    def test_count_must_be_integer(self, client: TestClient) -> None:
        response = client.post(
            "/v1/queue/claim", json={"requestedCount": "3"}, headers=MEMBER
        )

        assert response.status_code == 422

    def test_count_above_lines_per_claim(self, client: TestClient) -> None:
        _enqueue(client, [f"line {i}" for i in range(10)])

        response = client.post(
            "/v1/queue/claim", json={"requestedCount": 6}, headers=MEMBER
        )

        assert response.status_code == 400
        assert response.json()["detail"]["lines_per_claim"] == 5

    def test_empty_queue_conflict(self, client: TestClient) -> None:
        response = client.post(
            "/v1/queue/claim", json={"requestedCount": 1}, headers=MEMBER
        )

        assert response.status_code == 409

    def test_cooldown_returns_retry_after(
        self, client: TestClient, clock: FakeClock
    ) -> None:
        _enqueue(client, ["a", "b", "c"])
        client.post("/v1/queue/claim", json={"requestedCount": 1}, headers=MEMBER)
        clock.advance(minutes=4)

        response = client.post(
            "/v1/queue/claim", json={"requestedCount": 1}, headers=MEMBER
        )
        other = client.post(
            "/v1/queue/claim", json={"requestedCount": 1}, headers=OTHER_MEMBER
        )

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"
        assert other.status_code == 200

        status = client.get("/v1/sorter/cooldown", headers=MEMBER).json()
        assert status["active"] is True
        assert status["remainingSeconds"] == 60

    def test_retries_exhausted_is_service_unavailable(
        self, client: TestClient, store: TeamLineStoreStub
    ) -> None:
        _enqueue(client, [f"line {i}" for i in range(5)])

        async def steal(team_id, line_ids) -> None:
            await store.queue_store.remove(team_id, line_ids[0])

        store.claim_transfer.set_before_transfer_hook(steal)

        response = client.post(
            "/v1/queue/claim", json={"requestedCount": 1}, headers=MEMBER
        )

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"


class TestHistory:
    def test_history_and_search(self, client: TestClient, clock: FakeClock) -> None:
        _enqueue(client, ["Red apple", "green pear", "apple pie"])
        client.post("/v1/queue/claim", json={"requestedCount": 2}, headers=MEMBER)
        clock.advance(minutes=10)
        client.post("/v1/queue/claim", json={"requestedCount": 1}, headers=MEMBER)

        listing = client.get("/v1/history", params={"limit": 2}, headers=MEMBER).json()
        found = client.get(
            "/v1/history/search", params={"q": "APPLE"}, headers=MEMBER
        ).json()

        assert [entry["content"] for entry in listing["entries"]] == [
            "apple pie",
            "green pear",
        ]
        assert listing["total"] == 3
        assert [entry["content"] for entry in found["entries"]] == [
            "apple pie",
            "Red apple",
        ]

    def test_history_is_team_scoped(self, client: TestClient) -> None:
        _enqueue(client, ["secret"])
        client.post("/v1/queue/claim", json={"requestedCount": 1}, headers=MEMBER)

        response = client.get("/v1/history", headers=OUTSIDER)

        assert response.json()["entries"] == []

    def test_search_nul_character_rejected(self, client: TestClient) -> None:
        response = client.get(
            "/v1/history/search", params={"q": "a\x00"}, headers=MEMBER
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "query"


class TestSettings:
    def test_defaults(self, client: TestClient) -> None:
        response = client.get("/v1/sorter/settings", headers=MEMBER)

        assert response.json()["linesPerClaim"] == 5
        assert response.json()["cooldownMinutes"] == 5

    def test_member_cannot_update(self, client: TestClient) -> None:
        response = client.patch(
            "/v1/sorter/settings", json={"linesPerClaim": 10}, headers=MEMBER
        )

        assert response.status_code == 403

    def test_empty_update_returns_current_settings(self, client: TestClient) -> None:
        response = client.patch("/v1/sorter/settings", json={}, headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["linesPerClaim"] == 5

    def test_out_of_range_rejected(self, client: TestClient) -> None:
        response = client.patch(
            "/v1/sorter/settings", json={"cooldownMinutes": 1441}, headers=ADMIN
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "cooldown_minutes"

    def test_update_changes_claim_policy(
        self, client: TestClient, clock: FakeClock
    ) -> None:
        response = client.patch(
            "/v1/sorter/settings",
            json={"linesPerClaim": 15, "cooldownMinutes": 1},
            headers=ADMIN,
        )
        assert response.status_code == 200
        _enqueue(client, [f"line {i}" for i in range(20)])

        first = client.post(
            "/v1/queue/claim", json={"requestedCount": 15}, headers=MEMBER
        )
        clock.advance(timedelta(minutes=1))
        second = client.post(
            "/v1/queue/claim", json={"requestedCount": 15}, headers=MEMBER
        )

        assert first.json()["claimedCount"] == 15
        assert second.json()["claimedCount"] == 5

"""
Pytest configuration and shared fixtures for line sorter tests.

Testing Standards:
- Async tests run under pytest-asyncio (auto mode enabled in pyproject.toml)
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

import pytest

from src.domain.models.caller_identity import CallerIdentity, TeamRole
from tests.helpers.fake_clock import FakeClock


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from src import __version__

    return __version__


@pytest.fixture
def clock() -> FakeClock:
    """Provide a clock frozen at 2026-01-15T12:00Z."""
    return FakeClock()


@pytest.fixture
def member() -> CallerIdentity:
    """Provide a member of team-a."""
    return CallerIdentity(user_id="user-1", team_id="team-a", display_name="Ada")


@pytest.fixture
def other_member() -> CallerIdentity:
    """Provide a second member of team-a."""
    return CallerIdentity(user_id="user-2", team_id="team-a")


@pytest.fixture
def admin() -> CallerIdentity:
    """Provide an admin of team-a."""
    return CallerIdentity(user_id="admin-1", team_id="team-a", role=TeamRole.ADMIN)


@pytest.fixture
def outsider() -> CallerIdentity:
    """Provide a member of team-b."""
    return CallerIdentity(user_id="user-9", team_id="team-b")

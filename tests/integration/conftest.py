"""
Integration test configuration with testcontainers.

Provides a session-scoped PostgreSQL 16 container and a per-test
session factory with the line sorter schema applied and every table
truncated, so each test starts from empty storage.

Usage:
    @pytest.mark.integration
    async def test_example(session_factory: async_sessionmaker[AsyncSession]) -> None:
        store = PostgresLineStore(session_factory)
        ...

Note: Docker must be running for these fixtures to work; without it the
postgres-backed tests are skipped.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.bootstrap.database import apply_schema, create_session_factory, to_async_url

LINE_SORTER_TABLES = ("queued_lines", "claim_history", "claim_cooldowns", "sorter_settings")


@pytest.fixture(scope="session")
def postgres_container() -> Generator:
    """Session-scoped PostgreSQL 16 container, started once."""
    testcontainers_postgres = pytest.importorskip("testcontainers.postgres")
    try:
        container = testcontainers_postgres.PostgresContainer("postgres:16-alpine")
        container.start()
    except Exception as exc:  # docker missing or unreachable
        pytest.skip(f"PostgreSQL container unavailable: {exc}")
    try:
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="session")
def postgres_async_url(postgres_container) -> str:
    """Async (asyncpg) URL for the session container."""
    return to_async_url(postgres_container.get_connection_url())


@pytest.fixture
async def session_factory(
    postgres_async_url: str,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Per-test session factory over freshly truncated tables."""
    engine = create_async_engine(postgres_async_url, echo=False)
    factory = create_session_factory(engine)
    await apply_schema(factory)
    async with factory() as session, session.begin():
        await session.execute(
            text(f"TRUNCATE {', '.join(LINE_SORTER_TABLES)} RESTART IDENTITY")
        )
    yield factory
    await engine.dispose()

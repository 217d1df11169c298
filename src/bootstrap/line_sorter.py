"""Bootstrap wiring for line sorter storage.

Selects the adapters behind the queue, history, claim transfer and
settings ports from ``SorterServiceConfig.storage_backend``:
- memory: TeamLineStoreStub and SorterSettingsRepositoryStub
- postgres: PostgresLineStore and PostgresSorterSettingsRepository over
  the DATABASE_URL session factory

The postgres backend never falls back to memory: a missing
DATABASE_URL fails startup instead of silently losing data.
"""

from __future__ import annotations

from structlog import get_logger

from src.application.ports.claim_transfer import ClaimTransferProtocol
from src.application.ports.history_ledger import HistoryLedgerProtocol
from src.application.ports.queue_store import QueueStoreProtocol
from src.application.ports.sorter_settings_repository import (
    SorterSettingsRepositoryProtocol,
)
from src.config.sorter_config import SorterServiceConfig
from src.infrastructure.stubs.sorter_settings_repository_stub import (
    SorterSettingsRepositoryStub,
)
from src.infrastructure.stubs.team_line_store_stub import TeamLineStoreStub

logger = get_logger()

_config: SorterServiceConfig | None = None
_line_store: TeamLineStoreStub | None = None
_postgres_line_store = None
_settings_repository: SorterSettingsRepositoryProtocol | None = None


def get_sorter_config() -> SorterServiceConfig:
    """Get service configuration, read from the environment once."""
    global _config
    if _config is None:
        _config = SorterServiceConfig.from_environment()
    return _config


def _line_store_bundle():  # type: ignore[no-untyped-def]
    global _line_store, _postgres_line_store
    if get_sorter_config().storage_backend == "postgres":
        if _postgres_line_store is None:
            from src.bootstrap.database import get_session_factory
            from src.infrastructure.adapters.persistence import PostgresLineStore

            _postgres_line_store = PostgresLineStore(get_session_factory())
            logger.info("line_store_initialized", backend="postgres")
        return _postgres_line_store

    if _line_store is None:
        _line_store = TeamLineStoreStub()
        logger.warning(
            "line_store_initialized",
            backend="memory",
            message="In-memory store - data will not persist",
        )
    return _line_store


def get_queue_store() -> QueueStoreProtocol:
    """Get the queue store for the configured backend."""
    return _line_store_bundle().queue_store


def get_history_ledger() -> HistoryLedgerProtocol:
    """Get the history ledger for the configured backend."""
    return _line_store_bundle().history_ledger


def get_claim_transfer() -> ClaimTransferProtocol:
    """Get the claim transfer for the configured backend."""
    return _line_store_bundle().claim_transfer


def get_settings_repository() -> SorterSettingsRepositoryProtocol:
    """Get the sorter settings repository for the configured backend."""
    global _settings_repository
    if _settings_repository is None:
        if get_sorter_config().storage_backend == "postgres":
            from src.bootstrap.database import get_session_factory
            from src.infrastructure.adapters.persistence import (
                PostgresSorterSettingsRepository,
            )

            _settings_repository = PostgresSorterSettingsRepository(
                get_session_factory()
            )
        else:
            _settings_repository = SorterSettingsRepositoryStub()
    return _settings_repository


def set_sorter_config(config: SorterServiceConfig) -> None:
    """Replace the configuration (testing helper).

    Call ``reset_line_sorter_bootstrap`` first so stores are rebuilt.
    """
    global _config
    _config = config


def reset_line_sorter_bootstrap() -> None:
    """Reset all singletons for testing."""
    global _config, _line_store, _postgres_line_store, _settings_repository
    _config = None
    _line_store = None
    _postgres_line_store = None
    _settings_repository = None

"""PostgreSQL persistence adapters (SQLAlchemy async + asyncpg)."""

from src.infrastructure.adapters.persistence.postgres_line_store import (
    PostgresClaimTransfer,
    PostgresHistoryLedger,
    PostgresLineStore,
    PostgresQueueStore,
)
from src.infrastructure.adapters.persistence.postgres_sorter_settings_repository import (
    PostgresSorterSettingsRepository,
)

__all__: list[str] = [
    "PostgresClaimTransfer",
    "PostgresHistoryLedger",
    "PostgresLineStore",
    "PostgresQueueStore",
    "PostgresSorterSettingsRepository",
]

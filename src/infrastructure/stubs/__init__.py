"""Infrastructure stubs for development and testing.

Available stubs:
- TeamLineStoreStub: Queue, history and claim transfer over shared memory
- SorterSettingsRepositoryStub: In-memory per-team settings
"""

from src.infrastructure.stubs.sorter_settings_repository_stub import (
    SorterSettingsRepositoryStub,
)
from src.infrastructure.stubs.team_line_store_stub import (
    ClaimTransferStub,
    HistoryLedgerStub,
    QueueStoreStub,
    TeamLineState,
    TeamLineStoreStub,
)

__all__: list[str] = [
    "ClaimTransferStub",
    "HistoryLedgerStub",
    "QueueStoreStub",
    "SorterSettingsRepositoryStub",
    "TeamLineState",
    "TeamLineStoreStub",
]

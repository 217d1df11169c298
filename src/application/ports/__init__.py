"""Application ports - Abstract interfaces for infrastructure adapters.

Available ports:
- QueueStoreProtocol: Team-scoped queued lines
- HistoryLedgerProtocol: Append-only claim history
- ClaimTransferProtocol: Atomic queue-to-history transfer with cooldown
- SorterSettingsRepositoryProtocol: Per-team sorter settings
"""

from src.application.ports.claim_transfer import ClaimTransferProtocol
from src.application.ports.history_ledger import HistoryLedgerProtocol
from src.application.ports.queue_store import QueueStoreProtocol
from src.application.ports.sorter_settings_repository import (
    SorterSettingsRepositoryProtocol,
)

__all__: list[str] = [
    "ClaimTransferProtocol",
    "HistoryLedgerProtocol",
    "QueueStoreProtocol",
    "SorterSettingsRepositoryProtocol",
]

"""
API models (Pydantic DTOs) for the line sorter.
"""

from src.api.models.claim import ClaimRequest, ClaimResponse, CooldownStatusResponse
from src.api.models.common import ProblemDetail
from src.api.models.health import HealthResponse
from src.api.models.history import HistoryEntryResponse, HistoryListResponse
from src.api.models.queue import (
    ClearQueueResponse,
    DedupeRequest,
    DedupeResponse,
    EnqueueRequest,
    QueueCountResponse,
    QueuedLineResponse,
    QueuedLinesResponse,
)
from src.api.models.sorter_settings import (
    SorterSettingsResponse,
    SorterSettingsUpdateRequest,
)

__all__: list[str] = [
    "ClaimRequest",
    "ClaimResponse",
    "ClearQueueResponse",
    "CooldownStatusResponse",
    "DedupeRequest",
    "DedupeResponse",
    "EnqueueRequest",
    "HealthResponse",
    "HistoryEntryResponse",
    "HistoryListResponse",
    "ProblemDetail",
    "QueueCountResponse",
    "QueuedLineResponse",
    "QueuedLinesResponse",
    "SorterSettingsResponse",
    "SorterSettingsUpdateRequest",
]

"""Domain models for the line sorter.

These models are immutable and contain no infrastructure dependencies.
"""

from src.domain.models.caller_identity import CallerIdentity, TeamRole
from src.domain.models.history_entry import HistoryEntry
from src.domain.models.line_claim import (
    CLAIM_COUNT_MAX,
    CLAIM_COUNT_MIN,
    ClaimResult,
    CooldownStatus,
)
from src.domain.models.queued_line import QueuedLine
from src.domain.models.sorter_settings import (
    COOLDOWN_MINUTES_MAX,
    COOLDOWN_MINUTES_MIN,
    DEFAULT_COOLDOWN_MINUTES,
    DEFAULT_LINES_PER_CLAIM,
    LINES_PER_CLAIM_MAX,
    LINES_PER_CLAIM_MIN,
    SorterSettings,
    SorterSettingsPatch,
)

__all__: list[str] = [
    "CLAIM_COUNT_MAX",
    "CLAIM_COUNT_MIN",
    "COOLDOWN_MINUTES_MAX",
    "COOLDOWN_MINUTES_MIN",
    "DEFAULT_COOLDOWN_MINUTES",
    "DEFAULT_LINES_PER_CLAIM",
    "LINES_PER_CLAIM_MAX",
    "LINES_PER_CLAIM_MIN",
    "CallerIdentity",
    "ClaimResult",
    "CooldownStatus",
    "HistoryEntry",
    "QueuedLine",
    "SorterSettings",
    "SorterSettingsPatch",
    "TeamRole",
]

"""Domain errors for Line Sorter.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from SorterError through one category class.
"""

from src.domain.errors.categories import (
    ConflictError,
    NoLinesAvailableError,
    NotFoundError,
    PermissionDeniedError,
    ProblemDetailsMixin,
    ValidationError,
)
from src.domain.errors.claim import (
    ClaimBatchLimitExceededError,
    ClaimConflictError,
    ClaimCountOutOfRangeError,
    ClaimRetriesExhaustedError,
    CooldownActiveError,
)
from src.domain.errors.queue import (
    EmptyLineBatchError,
    NoLinesSubmittedError,
    NulCharacterError,
    QueuedLineNotFoundError,
)
from src.domain.errors.sorter_settings import (
    AdminRoleRequiredError,
    SettingsOutOfRangeError,
)
from src.domain.errors.storage import StorageUnavailableError

__all__: list[str] = [
    "AdminRoleRequiredError",
    "ClaimBatchLimitExceededError",
    "ClaimConflictError",
    "ClaimCountOutOfRangeError",
    "ClaimRetriesExhaustedError",
    "ConflictError",
    "CooldownActiveError",
    "EmptyLineBatchError",
    "NoLinesAvailableError",
    "NoLinesSubmittedError",
    "NotFoundError",
    "NulCharacterError",
    "PermissionDeniedError",
    "ProblemDetailsMixin",
    "QueuedLineNotFoundError",
    "SettingsOutOfRangeError",
    "StorageUnavailableError",
    "ValidationError",
]

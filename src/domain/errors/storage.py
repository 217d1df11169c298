"""Storage infrastructure failure.

Adapters wrap driver-level faults (connectivity, aborted transactions)
in StorageUnavailableError so callers can tell "your request was
invalid" apart from "the system could not complete a valid request".
"""

from __future__ import annotations

from src.domain.errors.categories import ProblemDetailsMixin
from src.domain.exceptions import SorterError


class StorageUnavailableError(ProblemDetailsMixin, SorterError):
    """Raised when the backing store cannot complete an operation.

    HTTP Status: 503 Service Unavailable

    Attributes:
        operation: Store operation that failed.
        retry_after_seconds: Suggested client retry delay.
    """

    problem_type = "urn:line-sorter:storage-unavailable"
    title = "Storage Unavailable"
    status = 503

    def __init__(self, operation: str, retry_after_seconds: int = 5) -> None:
        """Initialize the error.

        Args:
            operation: Store operation that failed.
            retry_after_seconds: Suggested client retry delay.
        """
        self.operation = operation
        self.retry_after_seconds = retry_after_seconds
        super().__init__(f"Storage unavailable during {operation}")

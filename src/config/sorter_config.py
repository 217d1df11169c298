"""Line sorter service configuration.

This module defines configuration for storage selection, claim policy
enforcement and history paging, with environment variable overrides for
production tuning.

Environment Variables (Service):
- ENVIRONMENT: "production" (JSON logs) or "development" (console logs)
- SORTER_STORAGE_BACKEND: "memory" (default) or "postgres"

Environment Variables (Claim):
- SORTER_CLAIM_MAX_ATTEMPTS: Optimistic claim attempts before giving up (default: 3)
- SORTER_ENFORCE_BATCH_CEILING: Reject claims above linesPerClaim (default: true)
- SORTER_ENFORCE_COOLDOWN: Reject claims during a user's cooldown (default: true)
- SORTER_CONFLICT_RETRY_AFTER: Retry-After seconds once attempts run out (default: 1)

Environment Variables (History):
- SORTER_HISTORY_PAGE_LIMIT: Default page size (default: 100)
- SORTER_HISTORY_MAX_PAGE_LIMIT: Largest page a caller may ask for (default: 500)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

STORAGE_BACKENDS = ("memory", "postgres")
ENVIRONMENTS = ("production", "development")


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean environment variable with default.

    Accepts 1/true/yes/on and 0/false/no/off, case-insensitive.

    Args:
        key: Environment variable name.
        default: Default value if not set or unrecognised.

    Returns:
        Parsed boolean value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    return default


@dataclass(frozen=True)
class SorterServiceConfig:
    """Configuration for the line sorter service.

    All values can be overridden via environment variables.

    Attributes:
        environment: Log rendering mode ("production" or "development").
        storage_backend: "memory" for the in-process store, "postgres"
            for the SQLAlchemy-backed store (requires DATABASE_URL).
        claim_max_attempts: How many times a claim re-selects lines after
            losing a race to a concurrent claim. Default: 3.
        enforce_batch_ceiling: Treat the team's linesPerClaim as a hard
            ceiling on requestedCount. Default: True.
        enforce_cooldown: Reject a user's claim until cooldownMinutes have
            passed since their last claim. Default: True.
        conflict_retry_after_seconds: Retry-After sent when claim attempts
            run out. Default: 1.
        history_page_limit: Default history page size. Default: 100.
        history_max_page_limit: Largest history page allowed. Default: 500.
    """

    environment: str = "production"
    storage_backend: str = "memory"
    claim_max_attempts: int = 3
    enforce_batch_ceiling: bool = True
    enforce_cooldown: bool = True
    conflict_retry_after_seconds: int = 1
    history_page_limit: int = 100
    history_max_page_limit: int = 500

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {ENVIRONMENTS}, got {self.environment!r}"
            )
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"storage_backend must be one of {STORAGE_BACKENDS}, "
                f"got {self.storage_backend!r}"
            )
        if self.claim_max_attempts < 1:
            raise ValueError(
                f"claim_max_attempts must be at least 1, got {self.claim_max_attempts}"
            )
        if self.conflict_retry_after_seconds < 1:
            raise ValueError(
                "conflict_retry_after_seconds must be at least 1, "
                f"got {self.conflict_retry_after_seconds}"
            )
        if self.history_page_limit < 1:
            raise ValueError(
                f"history_page_limit must be positive, got {self.history_page_limit}"
            )
        if self.history_max_page_limit < self.history_page_limit:
            raise ValueError(
                f"history_max_page_limit ({self.history_max_page_limit}) must be at "
                f"least history_page_limit ({self.history_page_limit})"
            )

    @classmethod
    def from_environment(cls) -> "SorterServiceConfig":
        """Create config from environment variables with defaults.

        Returns:
            SorterServiceConfig with values from environment or defaults.
        """
        return cls(
            environment=os.environ.get("ENVIRONMENT", "production").strip().lower(),
            storage_backend=os.environ.get("SORTER_STORAGE_BACKEND", "memory")
            .strip()
            .lower(),
            claim_max_attempts=_get_int_env("SORTER_CLAIM_MAX_ATTEMPTS", 3),
            enforce_batch_ceiling=_get_bool_env("SORTER_ENFORCE_BATCH_CEILING", True),
            enforce_cooldown=_get_bool_env("SORTER_ENFORCE_COOLDOWN", True),
            conflict_retry_after_seconds=_get_int_env(
                "SORTER_CONFLICT_RETRY_AFTER", 1
            ),
            history_page_limit=_get_int_env("SORTER_HISTORY_PAGE_LIMIT", 100),
            history_max_page_limit=_get_int_env("SORTER_HISTORY_MAX_PAGE_LIMIT", 500),
        )


# Default production config
DEFAULT_SORTER_CONFIG = SorterServiceConfig()

# Testing config: console logs, no cooldown, advisory batch size
TEST_SORTER_CONFIG = SorterServiceConfig(
    environment="development",
    enforce_batch_ceiling=False,
    enforce_cooldown=False,
    history_page_limit=10,
    history_max_page_limit=50,
)

"""Claim errors.

Raised by the claim service when a claim request is out of range,
blocked by the caller's cooldown, or loses an optimistic race.

Propagation rules:
- ClaimConflictError is internal: the claim service retries it a bounded
  number of times and only surfaces ClaimRetriesExhaustedError.
- CooldownActiveError carries the remaining wait so the API can set
  Retry-After.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from src.domain.errors.categories import (
    ConflictError,
    ProblemDetailsMixin,
    ValidationError,
)
from src.domain.exceptions import SorterError


class ClaimCountOutOfRangeError(ValidationError):
    """Raised when the requested claim count is outside the allowed range.

    Attributes:
        requested_count: Count the caller asked for.
        minimum: Smallest permitted count.
        maximum: Largest permitted count.
    """

    problem_type = "urn:line-sorter:claim:count-out-of-range"
    title = "Claim Count Out Of Range"

    def __init__(self, requested_count: int, minimum: int, maximum: int) -> None:
        """Initialize the error.

        Args:
            requested_count: Count the caller asked for.
            minimum: Smallest permitted count.
            maximum: Largest permitted count.
        """
        self.requested_count = requested_count
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Requested claim count {requested_count} must be between "
            f"{minimum} and {maximum}"
        )

    def problem_extensions(self) -> dict[str, Any]:
        """Return the requested count and bounds."""
        return {
            "requested_count": self.requested_count,
            "minimum": self.minimum,
            "maximum": self.maximum,
        }


class ClaimBatchLimitExceededError(ValidationError):
    """Raised when a claim asks for more lines than the team allows per claim.

    Attributes:
        requested_count: Count the caller asked for.
        lines_per_claim: Team's configured per-claim ceiling.
    """

    problem_type = "urn:line-sorter:claim:batch-limit-exceeded"
    title = "Claim Batch Limit Exceeded"

    def __init__(self, requested_count: int, lines_per_claim: int) -> None:
        """Initialize the error.

        Args:
            requested_count: Count the caller asked for.
            lines_per_claim: Team's configured per-claim ceiling.
        """
        self.requested_count = requested_count
        self.lines_per_claim = lines_per_claim
        super().__init__(
            f"Requested {requested_count} lines but this team allows at most "
            f"{lines_per_claim} per claim"
        )

    def problem_extensions(self) -> dict[str, Any]:
        """Return the requested count and configured ceiling."""
        return {
            "requested_count": self.requested_count,
            "lines_per_claim": self.lines_per_claim,
        }


class CooldownActiveError(ProblemDetailsMixin, SorterError):
    """Raised when a user claims again before their cooldown has elapsed.

    HTTP Status: 429 Too Many Requests, with Retry-After.

    Attributes:
        team_id: Team of the caller.
        user_id: User still cooling down.
        last_claim_at: When the user's previous claim committed (UTC).
        cooldown_until: When the user may claim again (UTC).
        retry_after_seconds: Whole seconds left, at least 1.
    """

    problem_type = "urn:line-sorter:claim:cooldown-active"
    title = "Cooldown Active"
    status = 429

    def __init__(
        self,
        team_id: str,
        user_id: str,
        last_claim_at: datetime,
        cooldown_until: datetime,
        now: datetime,
    ) -> None:
        """Initialize the error.

        Args:
            team_id: Team of the caller.
            user_id: User still cooling down.
            last_claim_at: When the previous claim committed.
            cooldown_until: When the user may claim again.
            now: Reference instant used to compute the remaining wait.
        """
        self.team_id = team_id
        self.user_id = user_id
        self.last_claim_at = last_claim_at
        self.cooldown_until = cooldown_until
        remaining = (cooldown_until - now).total_seconds()
        self.retry_after_seconds = max(1, math.ceil(remaining))
        super().__init__(
            f"User {user_id} must wait until {cooldown_until.isoformat()} "
            f"({self.retry_after_seconds}s) before claiming again"
        )

    def problem_extensions(self) -> dict[str, Any]:
        """Return cooldown timing details."""
        return {
            "cooldown_until": self.cooldown_until.isoformat(),
            "retry_after_seconds": self.retry_after_seconds,
        }


class ClaimConflictError(ConflictError):
    """Raised when selected lines were taken by a concurrent claim.

    This is a recoverable error - the claim service re-reads the queue
    and retries with a fresh selection.

    Attributes:
        team_id: Team whose queue changed underneath the claim.
        expected_count: Number of lines the claim selected.
        removed_count: Number of those lines still present at write time.
    """

    problem_type = "urn:line-sorter:claim:conflict"
    title = "Claim Conflict"

    def __init__(self, team_id: str, expected_count: int, removed_count: int) -> None:
        """Initialize the error.

        Args:
            team_id: Team whose queue changed underneath the claim.
            expected_count: Number of lines the claim selected.
            removed_count: Number of those lines still present at write time.
        """
        self.team_id = team_id
        self.expected_count = expected_count
        self.removed_count = removed_count
        super().__init__(
            f"Concurrent claim detected for team {team_id}: selected "
            f"{expected_count} lines but only {removed_count} were still queued"
        )


class ClaimRetriesExhaustedError(ConflictError):
    """Raised when a claim keeps losing races after all retry attempts.

    Transient: the caller should re-read queue and history before retrying,
    since claim is not idempotent.

    Attributes:
        team_id: Team of the caller.
        attempts: Number of attempts made.
        retry_after_seconds: Suggested client retry delay.
    """

    problem_type = "urn:line-sorter:claim:retries-exhausted"
    title = "Claim Contention"

    def __init__(self, team_id: str, attempts: int, retry_after_seconds: int = 1) -> None:
        """Initialize the error.

        Args:
            team_id: Team of the caller.
            attempts: Number of attempts made.
            retry_after_seconds: Suggested client retry delay.
        """
        self.team_id = team_id
        self.attempts = attempts
        self.retry_after_seconds = retry_after_seconds
        super().__init__(
            f"Claim for team {team_id} did not complete after {attempts} "
            "attempts due to concurrent claims"
        )

    def problem_extensions(self) -> dict[str, Any]:
        """Return retry guidance."""
        return {
            "attempts": self.attempts,
            "retry_after_seconds": self.retry_after_seconds,
        }

"""Error categories for the Line Sorter domain.

Every concrete domain error inherits from exactly one category below.
The API layer maps categories to HTTP statuses, so a new error only
has to pick the right parent to be reported correctly.

Category -> HTTP status:
- ValidationError -> 400
- PermissionDeniedError -> 403
- NotFoundError -> 404
- NoLinesAvailableError -> 409
- CooldownActiveError -> 429 (see src.domain.errors.claim)
- ConflictError -> 503 once internal retries are exhausted
- StorageUnavailableError -> 503 (see src.domain.errors.storage)
"""

from __future__ import annotations

from typing import Any

from src.domain.exceptions import SorterError


class ProblemDetailsMixin:
    """Serialize an error to RFC 7807 problem details.

    Subclasses set ``problem_type``, ``title`` and ``status`` and may
    extend ``problem_extensions`` with error-specific fields.
    """

    problem_type: str = "urn:line-sorter:error"
    title: str = "Line Sorter Error"
    status: int = 500

    def problem_extensions(self) -> dict[str, Any]:
        """Return error-specific RFC 7807 extension members."""
        return {}

    def to_rfc7807_dict(self) -> dict[str, Any]:
        """Serialize to RFC 7807 problem details format.

        Returns:
            Dictionary with type, title, status, detail and extensions.
        """
        result: dict[str, Any] = {
            "type": self.problem_type,
            "title": self.title,
            "status": self.status,
            "detail": str(self),
        }
        result.update(self.problem_extensions())
        return result


class ValidationError(ProblemDetailsMixin, SorterError):
    """Malformed or out-of-range input."""

    problem_type = "urn:line-sorter:validation"
    title = "Invalid Request"
    status = 400


class PermissionDeniedError(ProblemDetailsMixin, SorterError):
    """Caller's role does not allow the operation."""

    problem_type = "urn:line-sorter:permission-denied"
    title = "Permission Denied"
    status = 403


class NotFoundError(ProblemDetailsMixin, SorterError):
    """Target record does not exist under the caller's team."""

    problem_type = "urn:line-sorter:not-found"
    title = "Not Found"
    status = 404


class NoLinesAvailableError(ProblemDetailsMixin, SorterError):
    """Claim attempted against an empty team queue.

    Attributes:
        team_id: Team whose queue was empty.
    """

    problem_type = "urn:line-sorter:claim:no-lines-available"
    title = "No Lines Available"
    status = 409

    def __init__(self, team_id: str) -> None:
        """Initialize the error.

        Args:
            team_id: Team whose queue was empty.
        """
        self.team_id = team_id
        super().__init__(f"No lines available to claim for team {team_id}")


class ConflictError(ProblemDetailsMixin, SorterError):
    """Concurrent modification detected by an optimistic write."""

    problem_type = "urn:line-sorter:conflict"
    title = "Concurrent Modification"
    status = 503

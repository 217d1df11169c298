"""Queue submission and maintenance errors.

Raised by the submission and queue maintenance services when a batch
of lines is unusable or a line id does not belong to the caller's team.
"""

from __future__ import annotations

from typing import Any

from src.domain.errors.categories import NotFoundError, ValidationError


class EmptyLineBatchError(ValidationError):
    """Raised when an enqueue request carries no usable lines.

    Attributes:
        reason: Why the batch was rejected.
    """

    problem_type = "urn:line-sorter:queue:empty-batch"
    title = "Empty Line Batch"

    def __init__(self, reason: str = "At least one line is required") -> None:
        """Initialize the error.

        Args:
            reason: Why the batch was rejected.
        """
        self.reason = reason
        super().__init__(reason)


class NoLinesSubmittedError(ValidationError):
    """Raised when a dedupe request contains no non-blank lines.

    Distinct from an all-duplicate batch, which is a successful dedupe
    with an empty result.
    """

    problem_type = "urn:line-sorter:queue:no-lines-entered"
    title = "No Lines Entered"

    def __init__(self) -> None:
        """Initialize the error."""
        super().__init__("No lines entered: the submission contained only blank lines")


class QueuedLineNotFoundError(NotFoundError):
    """Raised when a queued line does not exist under the caller's team.

    The same error is raised whether the line was never created, has
    already been claimed, or belongs to another team.

    Attributes:
        team_id: Team the caller acted for.
        line_id: Identifier the caller supplied.
    """

    problem_type = "urn:line-sorter:queue:line-not-found"
    title = "Queued Line Not Found"

    def __init__(self, team_id: str, line_id: str) -> None:
        """Initialize the error.

        Args:
            team_id: Team the caller acted for.
            line_id: Identifier the caller supplied.
        """
        self.team_id = team_id
        self.line_id = line_id
        super().__init__(f"Queued line {line_id} not found for team {team_id}")

    def problem_extensions(self) -> dict[str, Any]:
        """Return the missing line id."""
        return {"line_id": self.line_id}


class NulCharacterError(ValidationError):
    """Raised when submitted text contains a NUL character.

    Stored text cannot hold U+0000, so such a line or search query is
    rejected as invalid input rather than failing in storage.

    Attributes:
        field: Which input carried the character ("lines" or "query").
        positions: Offending line positions, empty for a query.
    """

    problem_type = "urn:line-sorter:queue:nul-character"
    title = "NUL Character Not Allowed"

    def __init__(self, field: str, positions: list[int] | None = None) -> None:
        """Initialize the error.

        Args:
            field: Which input carried the character.
            positions: Offending line positions, if any.
        """
        self.field = field
        self.positions = positions or []
        detail = f"{field} must not contain NUL characters"
        if self.positions:
            detail = f"{detail} (positions {self.positions})"
        super().__init__(detail)

    def problem_extensions(self) -> dict[str, Any]:
        """Return the offending field and positions."""
        return {"field": self.field, "positions": self.positions}

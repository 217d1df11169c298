"""Sorter settings errors.

Settings changes are admin-only and range-checked; out-of-range values
are rejected, never clamped silently.
"""

from __future__ import annotations

from typing import Any

from src.domain.errors.categories import PermissionDeniedError, ValidationError


class AdminRoleRequiredError(PermissionDeniedError):
    """Raised when a non-admin attempts an admin-only operation.

    Attributes:
        team_id: Team the caller acted for.
        user_id: Caller's user id.
        role: Caller's actual role.
        operation: Name of the rejected operation.
    """

    problem_type = "urn:line-sorter:admin-role-required"
    title = "Admin Role Required"

    def __init__(self, team_id: str, user_id: str, role: str, operation: str) -> None:
        """Initialize the error.

        Args:
            team_id: Team the caller acted for.
            user_id: Caller's user id.
            role: Caller's actual role.
            operation: Name of the rejected operation.
        """
        self.team_id = team_id
        self.user_id = user_id
        self.role = role
        self.operation = operation
        super().__init__(f"Only admins can {operation} (caller role: {role})")

    def problem_extensions(self) -> dict[str, Any]:
        """Return the rejected operation and caller role."""
        return {"operation": self.operation, "role": self.role}


class SettingsOutOfRangeError(ValidationError):
    """Raised when a settings value falls outside its declared range.

    Attributes:
        field: Name of the offending setting.
        value: Rejected value.
        minimum: Smallest permitted value.
        maximum: Largest permitted value.
    """

    problem_type = "urn:line-sorter:settings:out-of-range"
    title = "Setting Out Of Range"

    def __init__(self, field: str, value: int, minimum: int, maximum: int) -> None:
        """Initialize the error.

        Args:
            field: Name of the offending setting.
            value: Rejected value.
            minimum: Smallest permitted value.
            maximum: Largest permitted value.
        """
        self.field = field
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(f"{field} must be between {minimum} and {maximum}, got {value}")

    def problem_extensions(self) -> dict[str, Any]:
        """Return the offending field and its bounds."""
        return {
            "field": self.field,
            "value": self.value,
            "minimum": self.minimum,
            "maximum": self.maximum,
        }

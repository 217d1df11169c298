"""Caller identity supplied by the authentication collaborator.

Authentication and team membership live outside this service; every
request arrives with a verified (team_id, user_id, role) triple and an
optional display name. All queue, history and settings operations are
scoped by the caller's team_id.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TeamRole(str, Enum):
    """Role of a user within their team."""

    ADMIN = "admin"
    MEMBER = "member"


@dataclass(frozen=True)
class CallerIdentity:
    """Identity context for a single request.

    Attributes:
        user_id: Identifier of the acting user.
        team_id: Tenant boundary; all data access is scoped to it.
        role: The user's role within the team.
        display_name: Human-readable name recorded on claims.
    """

    user_id: str
    team_id: str
    role: TeamRole = TeamRole.MEMBER
    display_name: str | None = None

    def __post_init__(self) -> None:
        """Validate identity fields.

        Raises:
            ValueError: If user_id or team_id is blank.
        """
        if not self.user_id or not self.user_id.strip():
            raise ValueError("user_id must not be empty")
        if not self.team_id or not self.team_id.strip():
            raise ValueError("team_id must not be empty")

    @property
    def is_admin(self) -> bool:
        """True if the caller is an admin of their team."""
        return self.role == TeamRole.ADMIN

    @property
    def claim_name(self) -> str:
        """Name stamped on history entries as claimedByName."""
        return self.display_name or self.user_id

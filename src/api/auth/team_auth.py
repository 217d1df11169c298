"""Caller identity from upstream authentication headers.

The authentication collaborator in front of this service resolves the
session and forwards the caller as headers:
- X-User-Id: user id (required)
- X-Team-Id: team id (required)
- X-User-Role: "admin" or "member" (defaults to member)
- X-User-Name: display name recorded on claims (optional)

Every operation is scoped to the team taken from these headers.
"""

from typing import Annotated

import structlog
from fastapi import Header, HTTPException, Request, status

from src.domain.models.caller_identity import CallerIdentity, TeamRole

logger = structlog.get_logger(__name__)


def get_caller_identity(
    request: Request,
    x_user_id: Annotated[
        str | None,
        Header(description="Authenticated user id."),
    ] = None,
    x_team_id: Annotated[
        str | None,
        Header(description="Team the user is acting for."),
    ] = None,
    x_user_role: Annotated[
        str | None,
        Header(description="Team role: 'admin' or 'member'."),
    ] = None,
    x_user_name: Annotated[
        str | None,
        Header(description="Display name recorded on claims."),
    ] = None,
) -> CallerIdentity:
    """Build the caller identity from request headers.

    Args:
        request: FastAPI request object for logging.
        x_user_id: User id from X-User-Id.
        x_team_id: Team id from X-Team-Id.
        x_user_role: Role from X-User-Role.
        x_user_name: Display name from X-User-Name.

    Returns:
        CallerIdentity for the request.

    Raises:
        HTTPException 401: User or team header missing or blank.
        HTTPException 400: Unknown role.
    """
    log = logger.bind(component="team_auth", path=request.url.path)

    if not x_user_id or not x_user_id.strip():
        log.warning("auth_failed", reason="missing_user_id")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header is required",
        )
    if not x_team_id or not x_team_id.strip():
        log.warning("auth_failed", reason="missing_team_id", user_id=x_user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Team-Id header is required",
        )

    try:
        role = TeamRole((x_user_role or TeamRole.MEMBER.value).strip().lower())
    except ValueError:
        log.warning("auth_failed", reason="invalid_role", provided_role=x_user_role)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid X-User-Role '{x_user_role}'. "
            f"Allowed roles: {', '.join(r.value for r in TeamRole)}",
        ) from None

    display_name = x_user_name.strip() if x_user_name and x_user_name.strip() else None
    return CallerIdentity(
        user_id=x_user_id.strip(),
        team_id=x_team_id.strip(),
        role=role,
        display_name=display_name,
    )

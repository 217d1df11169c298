"""Sorter settings and cooldown API routes."""

from fastapi import APIRouter, Depends, Request

from src.api.auth.team_auth import get_caller_identity
from src.api.dependencies.line_sorter import (
    get_line_claim_service,
    get_sorter_settings_service,
)
from src.api.models.claim import CooldownStatusResponse
from src.api.models.common import ProblemDetail
from src.api.models.sorter_settings import (
    SorterSettingsResponse,
    SorterSettingsUpdateRequest,
)
from src.api.problem_details import problem_exception
from src.application.services.line_claim_service import LineClaimService
from src.application.services.sorter_settings_service import SorterSettingsService
from src.domain.errors import (
    AdminRoleRequiredError,
    SettingsOutOfRangeError,
    StorageUnavailableError,
)
from src.domain.models.caller_identity import CallerIdentity

router = APIRouter(prefix="/v1/sorter", tags=["sorter-settings"])


@router.get(
    "/settings",
    response_model=SorterSettingsResponse,
    responses={503: {"model": ProblemDetail, "description": "Storage unavailable"}},
    summary="Get the team's sorter settings",
)
async def get_sorter_settings(
    request: Request,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: SorterSettingsService = Depends(get_sorter_settings_service),
) -> SorterSettingsResponse:
    """Return the caller team's settings, or the defaults if never set."""
    try:
        settings = await service.get_settings(caller.team_id)
    except StorageUnavailableError as e:
        raise problem_exception(e, request) from None
    return SorterSettingsResponse.from_domain(settings)


@router.patch(
    "/settings",
    response_model=SorterSettingsResponse,
    responses={
        400: {"model": ProblemDetail, "description": "Value out of range"},
        403: {"model": ProblemDetail, "description": "Team admin role required"},
        503: {"model": ProblemDetail, "description": "Storage unavailable"},
    },
    summary="Update the team's sorter settings (admin)",
)
async def update_sorter_settings(
    request_data: SorterSettingsUpdateRequest,
    request: Request,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: SorterSettingsService = Depends(get_sorter_settings_service),
) -> SorterSettingsResponse:
    """Apply a partial settings update.

    Raises:
        HTTPException 400: linesPerClaim outside 1..15 or cooldownMinutes
            outside 1..1440
        HTTPException 403: Caller is not a team admin
        HTTPException 503: Storage unavailable
    """
    try:
        settings = await service.update_settings(caller, request_data.to_patch())
    except (
        AdminRoleRequiredError,
        SettingsOutOfRangeError,
        StorageUnavailableError,
    ) as e:
        raise problem_exception(e, request) from None
    return SorterSettingsResponse.from_domain(settings)


@router.get(
    "/cooldown",
    response_model=CooldownStatusResponse,
    responses={503: {"model": ProblemDetail, "description": "Storage unavailable"}},
    summary="Get the caller's claim cooldown",
)
async def get_cooldown_status(
    request: Request,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: LineClaimService = Depends(get_line_claim_service),
) -> CooldownStatusResponse:
    """Report whether the caller may claim now."""
    try:
        status = await service.cooldown_status(caller)
    except StorageUnavailableError as e:
        raise problem_exception(e, request) from None
    return CooldownStatusResponse(
        active=status.active,
        last_claim_at=status.last_claim_at,
        cooldown_until=status.cooldown_until if status.active else None,
        remaining_seconds=status.remaining_seconds,
    )

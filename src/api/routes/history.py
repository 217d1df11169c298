"""History API routes.

Read-only view of a team's claimed lines: paged listing and
case-insensitive substring search, both newest claim first.
"""

from fastapi import APIRouter, Depends, Query, Request

from src.api.auth.team_auth import get_caller_identity
from src.api.dependencies.line_sorter import get_history_query_service
from src.api.models.common import ProblemDetail
from src.api.models.history import HistoryEntryResponse, HistoryListResponse
from src.api.problem_details import problem_exception
from src.application.services.history_query_service import HistoryQueryService
from src.domain.errors import NulCharacterError, StorageUnavailableError
from src.domain.models.caller_identity import CallerIdentity

router = APIRouter(prefix="/v1/history", tags=["history"])


@router.get(
    "",
    response_model=HistoryListResponse,
    responses={503: {"model": ProblemDetail, "description": "Storage unavailable"}},
    summary="List claim history, newest first",
)
async def list_history(
    request: Request,
    limit: int | None = Query(default=None, ge=1, description="Page size"),
    offset: int = Query(default=0, ge=0, description="Entries to skip"),
    caller: CallerIdentity = Depends(get_caller_identity),
    service: HistoryQueryService = Depends(get_history_query_service),
) -> HistoryListResponse:
    """List one page of the caller team's history."""
    try:
        entries = await service.list_history(caller, limit=limit, offset=offset)
        total = await service.history_count(caller)
    except StorageUnavailableError as e:
        raise problem_exception(e, request) from None
    return HistoryListResponse(
        entries=[HistoryEntryResponse.from_domain(entry) for entry in entries],
        count=len(entries),
        total=total,
    )


@router.get(
    "/search",
    response_model=HistoryListResponse,
    responses={
        400: {"model": ProblemDetail, "description": "NUL character in query"},
        503: {"model": ProblemDetail, "description": "Storage unavailable"},
    },
    summary="Search claim history by content",
)
async def search_history(
    request: Request,
    q: str = Query(default="", description="Case-insensitive substring"),
    limit: int | None = Query(default=None, ge=1, description="Maximum results"),
    caller: CallerIdentity = Depends(get_caller_identity),
    service: HistoryQueryService = Depends(get_history_query_service),
) -> HistoryListResponse:
    """Search the caller team's history. A blank query lists the newest entries."""
    try:
        entries = await service.search_history(caller, q, limit=limit)
    except (NulCharacterError, StorageUnavailableError) as e:
        raise problem_exception(e, request) from None
    return HistoryListResponse(
        entries=[HistoryEntryResponse.from_domain(entry) for entry in entries],
        count=len(entries),
    )

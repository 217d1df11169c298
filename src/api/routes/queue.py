"""Queue API routes.

Submission, listing and maintenance of a team's line queue, plus the
claim operation that moves the oldest lines into history.

Every route is scoped to the caller's team from the identity headers.
Errors are RFC 7807 bodies; 429 and 503 carry Retry-After.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response

from src.api.auth.team_auth import get_caller_identity
from src.api.dependencies.line_sorter import (
    get_line_claim_service,
    get_line_submission_service,
)
from src.api.models.claim import ClaimRequest, ClaimResponse
from src.api.models.common import ProblemDetail
from src.api.models.queue import (
    ClearQueueResponse,
    DedupeRequest,
    DedupeResponse,
    EnqueueRequest,
    QueueCountResponse,
    QueuedLineResponse,
    QueuedLinesResponse,
)
from src.api.problem_details import problem_exception
from src.application.services.line_claim_service import LineClaimService
from src.application.services.line_submission_service import LineSubmissionService
from src.domain.errors import (
    AdminRoleRequiredError,
    ClaimBatchLimitExceededError,
    ClaimCountOutOfRangeError,
    ClaimRetriesExhaustedError,
    CooldownActiveError,
    EmptyLineBatchError,
    NoLinesAvailableError,
    NoLinesSubmittedError,
    NulCharacterError,
    QueuedLineNotFoundError,
    StorageUnavailableError,
)
from src.domain.models.caller_identity import CallerIdentity

router = APIRouter(prefix="/v1/queue", tags=["queue"])

_STORAGE_RESPONSE = {
    503: {"model": ProblemDetail, "description": "Storage unavailable"},
}


@router.post(
    "/dedupe",
    response_model=DedupeResponse,
    responses={
        400: {"model": ProblemDetail, "description": "No lines or NUL character"},
        **_STORAGE_RESPONSE,
    },
    summary="Deduplicate submitted lines",
    description=(
        "Drop blank lines, repeats within the submission (first 15 words, "
        "case-insensitive) and lines already queued or claimed. Nothing is "
        "enqueued."
    ),
)
async def dedupe_lines(
    request_data: DedupeRequest,
    request: Request,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: LineSubmissionService = Depends(get_line_submission_service),
) -> DedupeResponse:
    """Deduplicate raw input against the caller team's queue and history.

    Raises:
        HTTPException 400: No non-blank lines submitted, or a NUL character
        HTTPException 503: Storage unavailable
    """
    try:
        outcome = await service.dedupe(caller, request_data.raw_lines())
    except (
        NoLinesSubmittedError,
        NulCharacterError,
        StorageUnavailableError,
    ) as e:
        raise problem_exception(e, request) from None
    return DedupeResponse.from_outcome(outcome)


@router.post(
    "/lines",
    response_model=QueuedLinesResponse,
    status_code=201,
    responses={
        400: {"model": ProblemDetail, "description": "Blank or NUL in batch"},
        **_STORAGE_RESPONSE,
    },
    summary="Enqueue lines",
)
async def enqueue_lines(
    request_data: EnqueueRequest,
    request: Request,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: LineSubmissionService = Depends(get_line_submission_service),
) -> QueuedLinesResponse:
    """Append lines to the caller team's queue as given.

    Raises:
        HTTPException 400: Empty batch, blank line or NUL character
        HTTPException 503: Storage unavailable
    """
    try:
        created = await service.enqueue(caller, request_data.lines)
    except (EmptyLineBatchError, NulCharacterError, StorageUnavailableError) as e:
        raise problem_exception(e, request) from None
    return QueuedLinesResponse(
        lines=[QueuedLineResponse.from_domain(line) for line in created],
        count=len(created),
    )


@router.get(
    "/lines",
    response_model=QueuedLinesResponse,
    responses=_STORAGE_RESPONSE,
    summary="List queued lines, newest first",
)
async def list_queued_lines(
    request: Request,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: LineSubmissionService = Depends(get_line_submission_service),
) -> QueuedLinesResponse:
    """List the caller team's queue, newest first."""
    try:
        lines = await service.list_queue(caller)
    except StorageUnavailableError as e:
        raise problem_exception(e, request) from None
    return QueuedLinesResponse(
        lines=[QueuedLineResponse.from_domain(line) for line in lines],
        count=len(lines),
    )


@router.get(
    "/count",
    response_model=QueueCountResponse,
    responses=_STORAGE_RESPONSE,
    summary="Count queued lines",
)
async def count_queued_lines(
    request: Request,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: LineSubmissionService = Depends(get_line_submission_service),
) -> QueueCountResponse:
    """Return how many lines the caller's team has queued."""
    try:
        count = await service.queue_count(caller)
    except StorageUnavailableError as e:
        raise problem_exception(e, request) from None
    return QueueCountResponse(count=count)


@router.delete(
    "/lines/{line_id}",
    status_code=204,
    responses={
        404: {"model": ProblemDetail, "description": "Line not queued for this team"},
        **_STORAGE_RESPONSE,
    },
    summary="Remove one queued line",
)
async def remove_queued_line(
    line_id: UUID,
    request: Request,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: LineSubmissionService = Depends(get_line_submission_service),
) -> Response:
    """Delete one line from the caller team's queue.

    Raises:
        HTTPException 404: No such line under the caller's team
        HTTPException 503: Storage unavailable
    """
    try:
        await service.remove_line(caller, line_id)
    except (QueuedLineNotFoundError, StorageUnavailableError) as e:
        raise problem_exception(e, request) from None
    return Response(status_code=204)


@router.delete(
    "/lines",
    response_model=ClearQueueResponse,
    responses={
        403: {"model": ProblemDetail, "description": "Team admin role required"},
        **_STORAGE_RESPONSE,
    },
    summary="Clear the team's queue (admin)",
)
async def clear_queue(
    request: Request,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: LineSubmissionService = Depends(get_line_submission_service),
) -> ClearQueueResponse:
    """Delete every queued line for the caller's team.

    Raises:
        HTTPException 403: Caller is not a team admin
        HTTPException 503: Storage unavailable
    """
    try:
        removed = await service.clear_queue(caller)
    except (AdminRoleRequiredError, StorageUnavailableError) as e:
        raise problem_exception(e, request) from None
    return ClearQueueResponse(removed_count=removed)


@router.post(
    "/claim",
    response_model=ClaimResponse,
    responses={
        400: {"model": ProblemDetail, "description": "Requested count out of range"},
        409: {"model": ProblemDetail, "description": "Queue is empty"},
        429: {"model": ProblemDetail, "description": "Cooldown active"},
        503: {
            "model": ProblemDetail,
            "description": "Concurrent claims or storage unavailable, retry",
        },
    },
    summary="Claim the oldest queued lines",
    description=(
        "Move up to requestedCount of the oldest lines into history. "
        "Not idempotent: re-read queue and history before retrying."
    ),
)
async def claim_lines(
    request_data: ClaimRequest,
    request: Request,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: LineClaimService = Depends(get_line_claim_service),
) -> ClaimResponse:
    """Claim lines for the caller.

    Raises:
        HTTPException 400: Count outside 1..15 or above linesPerClaim
        HTTPException 409: No lines available
        HTTPException 429: Cooldown active
        HTTPException 503: Retries exhausted or storage unavailable
    """
    try:
        result = await service.claim(caller, request_data.requested_count)
    except (
        ClaimCountOutOfRangeError,
        ClaimBatchLimitExceededError,
        NoLinesAvailableError,
        CooldownActiveError,
        ClaimRetriesExhaustedError,
        StorageUnavailableError,
    ) as e:
        raise problem_exception(e, request) from None
    return ClaimResponse.from_result(result)

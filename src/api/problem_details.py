"""Translate domain errors into RFC 7807 HTTP errors."""

from fastapi import HTTPException, Request

from src.domain.errors.categories import ProblemDetailsMixin


def problem_exception(error: ProblemDetailsMixin, request: Request) -> HTTPException:
    """Build the HTTPException for a domain error.

    The body is the error's RFC 7807 dict plus ``instance``. Errors that
    carry ``retry_after_seconds`` also set the Retry-After header.

    Args:
        error: Domain error with problem details.
        request: Current request, for ``instance``.

    Returns:
        HTTPException ready to raise.
    """
    detail = error.to_rfc7807_dict()
    detail["instance"] = str(request.url)

    headers = None
    retry_after = getattr(error, "retry_after_seconds", None)
    if retry_after is not None:
        headers = {"Retry-After": str(retry_after)}

    return HTTPException(status_code=error.status, detail=detail, headers=headers)

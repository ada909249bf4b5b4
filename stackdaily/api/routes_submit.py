from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Request, status
from fastapi.responses import JSONResponse

from ..config import settings
from ..rate_limit import check_rate_limit, client_identifier
from ..schemas import SubmitResponse
from ..security.sanitize import validate_submission
from ..storage import persist_submission
from ..titles import calculate_title

logger = logging.getLogger("stackdaily.api.submit")

router = APIRouter(prefix="/api", tags=["submissions"])


def _error(status_code: int, message: str) -> JSONResponse:
    body = SubmitResponse(success=False, error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post("/submit", response_model=SubmitResponse)
def submit(request: Request, payload: Any = Body(default=None)):
    """Accept one onboarding form submission.

    Pipeline: rate-limit check → sanitize/validate → dual write. Storage
    failures are logged and do not fail the request.
    """
    ip = client_identifier(request)
    if not check_rate_limit(ip, settings.submit_max_requests, settings.submit_window_seconds):
        logger.info("Submission rate-limited for %s", ip)
        return _error(status.HTTP_429_TOO_MANY_REQUESTS, "Too many requests. Please try again later.")

    submission = validate_submission(payload)
    if submission is None:
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid input. Please check all required fields.")

    try:
        persist_submission(submission)
        title = calculate_title(submission.experience_level, submission.biggest_win)
    except Exception:
        logger.exception("Submission failed unexpectedly")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Submission failed. Please try again.")

    return SubmitResponse(success=True, title=title)

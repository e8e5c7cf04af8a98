"""Exception handlers that render every API error in one JSON envelope.

    {"success": false,
     "error": {"code", "message", "request_id", "details"?},
     "timestamp"}
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from stars_manager.middleware.error_codes import ErrorCode, get_error_code
from stars_manager.services.github.exceptions import GithubError, GithubRateLimitError

logger = logging.getLogger("stars_manager.exception")


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def error_envelope(
    request: Request,
    status_code: int,
    code: ErrorCode,
    message: str,
    details: Optional[List[Dict[str, Any]]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    error: Dict[str, Any] = {
        "code": code.value,
        "message": message,
        "request_id": _request_id(request),
    }
    if details:
        error["details"] = details
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    # Sync failures surface here as 500/502/429 from StarSyncService
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} -> {exc.status_code}: {exc.detail}")
    return error_envelope(
        request,
        exc.status_code,
        get_error_code(exc.status_code),
        str(exc.detail),
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Bad request bodies, e.g. an empty token or a non-numeric repo id."""
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    return error_envelope(
        request, 422, ErrorCode.VALIDATION_ERROR, "Invalid request", details=details
    )


async def github_exception_handler(request: Request, exc: GithubError) -> JSONResponse:
    """GitHub failures raised outside a sync run (token login, user lookup)."""
    logger.warning(f"GitHub error on {request.url.path}: {exc}")
    if isinstance(exc, GithubRateLimitError):
        return error_envelope(
            request, 429, ErrorCode.RATE_LIMITED, "GitHub rate limit reached, try again later"
        )
    return error_envelope(
        request, 502, ErrorCode.UPSTREAM_ERROR, f"GitHub request failed: {exc}"
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path} request_id={_request_id(request)}")
    return error_envelope(
        request, 500, ErrorCode.INTERNAL_ERROR, "An unexpected error occurred"
    )

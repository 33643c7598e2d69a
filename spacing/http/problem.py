"""Problem+JSON utilities and global exception handlers.

Every error response is an `application/problem+json` document with
`title`, `status`, `detail` and `code`, plus an `error` member carrying the
human readable message. Extension members (`invalidSizes`, `unknownFields`,
`user`) are added where the failure has structured detail.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from spacing.errors import MissingRequiredFieldError, StoreError, ValidationError

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem_response(status: int, title: str, detail: str, code: str, **extensions: Any) -> JSONResponse:
    body: dict[str, Any] = {
        "title": title,
        "status": status,
        "detail": detail,
        "code": code,
        "error": detail,
    }
    body.update(extensions)
    return JSONResponse(body, status_code=status, media_type=PROBLEM_MEDIA_TYPE)


def vote_not_found(voter: str) -> JSONResponse:
    return problem_response(404, "Not Found", f"No vote for {voter}", "VOTE_NOT_FOUND", user=voter)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # noqa: D401
    status = int(exc.status_code)
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    response = problem_response(status, "Error", detail, f"HTTP_{status}")
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def _is_body_shape_error(error: dict) -> bool:
    loc = tuple(error.get("loc") or ())
    return len(loc) == 1 and loc[0] == "body" and str(error.get("type", "")).endswith("_type")


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    errors = list(exc.errors())
    if any(str(e.get("type", "")) == "json_invalid" for e in errors):
        logger.info("request.body.invalid_json path=%s", request.url.path)
        return problem_response(400, "Invalid Request", "Invalid JSON body", "REQUEST_BODY_INVALID_JSON")
    if any(_is_body_shape_error(e) for e in errors):
        logger.info("request.body.not_an_object path=%s", request.url.path)
        return problem_response(
            400, "Invalid Request", "JSON body must be an object", "REQUEST_BODY_NOT_OBJECT"
        )
    return problem_response(
        422,
        "Invalid Request",
        "Request validation failed",
        "REQUEST_VALIDATION_FAILED",
        errors=[{k: e.get(k) for k in ("loc", "msg", "type")} for e in errors],
    )


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:  # noqa: D401
    extensions: dict[str, Any] = {}
    if exc.invalid_sizes:
        extensions["invalidSizes"] = exc.invalid_sizes
    if exc.unknown_fields:
        extensions["unknownFields"] = exc.unknown_fields
    code = "VOTE_INVALID_SIZES" if exc.invalid_sizes else "VOTE_UNKNOWN_FIELDS"
    return problem_response(400, "Invalid Vote", exc.message, code, **extensions)


async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:  # noqa: D401
    code = "STORE_MISSING_REQUIRED_FIELD" if isinstance(exc, MissingRequiredFieldError) else "STORE_ERROR"
    logger.warning("store_error code=%s path=%s message=%s", code, request.url.path, exc.message)
    return problem_response(400, "Database Error", exc.message, code)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return problem_response(500, "Internal Server Error", "Internal server error", "INTERNAL_ERROR")


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem_response",
    "vote_not_found",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_validation_error",
    "handle_store_error",
    "handle_unexpected_error",
]

"""
Network Design Planner - Error Response Handlers
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Exception handlers and error response formatting.
"""

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from .exceptions import InternalError, PlannerException, UnavailableError, ValidationError
from .logging import log_database_failure

logger = logging.getLogger(__name__)

# Map error codes to HTTP status codes
ERROR_CODE_STATUS_MAP: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "AUTH_REQUIRED": 401,
    "UNAUTHORIZED": 403,
    "NOT_FOUND": 404,
    "CONFLICT": 409,
    "INTERNAL_ERROR": 500,
    "UNAVAILABLE": 503,
}

USER_MESSAGES: dict[str, str] = {
    "VALIDATION_ERROR": "The information provided is incomplete or incorrect. Please check your input.",
    "AUTH_REQUIRED": "Please sign in to continue.",
    "UNAUTHORIZED": "You do not have permission to change this item.",
    "NOT_FOUND": "The requested item was not found. It may have been removed.",
    "CONFLICT": "This item was changed by another action. Refresh and try again.",
    "INTERNAL_ERROR": "An unexpected error occurred. If this persists, contact support.",
    "UNAVAILABLE": "The service is temporarily unavailable. Please try again shortly.",
}


def get_user_message(error_code: str) -> str:
    """Get a display-friendly message for an error code."""
    return USER_MESSAGES.get(error_code, "An error occurred. Please try again.")


def get_request_id(request: Request) -> str:
    """Get or generate request ID for tracing."""
    return getattr(request.state, "request_id", str(uuid4()))


def build_error_response(
    error: PlannerException,
    request_id: str | None = None
) -> dict[str, Any]:
    """Build standardized error response envelope."""
    error_dict = error.to_dict()
    error_dict["user_message"] = get_user_message(error.code)

    return {
        "error": error_dict,
        "meta": {
            "timestamp": datetime.now(UTC).isoformat(),
            "request_id": request_id or str(uuid4()),
        }
    }


def build_success_response(
    data: Any,
    request_id: str | None = None,
    meta: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Build standardized success response envelope."""
    response = {"data": data}

    response_meta = {
        "timestamp": datetime.now(UTC).isoformat(),
    }
    if request_id:
        response_meta["request_id"] = request_id
    if meta:
        response_meta.update(meta)

    response["meta"] = response_meta
    return response


async def planner_exception_handler(request: Request, exc: PlannerException) -> JSONResponse:
    """Handle PlannerException and return formatted error response."""
    status_code = ERROR_CODE_STATUS_MAP.get(exc.code, 500)
    request_id = get_request_id(request)

    return JSONResponse(
        status_code=status_code,
        content=build_error_response(exc, request_id)
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report pydantic request validation failures as VALIDATION_ERROR (400)."""
    errors = []
    for err in exc.errors():
        errors.append({
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        })

    error = ValidationError("Request validation failed", details={"errors": errors})
    return JSONResponse(
        status_code=400,
        content=build_error_response(error, get_request_id(request))
    )


async def database_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Pass store outages through as UNAVAILABLE without leaking driver details."""
    log_database_failure(exc)
    return JSONResponse(
        status_code=503,
        content=build_error_response(UnavailableError(), get_request_id(request))
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    request_id = get_request_id(request)
    logger.error(f"Unhandled exception (request_id={request_id}): {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content=build_error_response(InternalError(), request_id)
    )


DATABASE_UNAVAILABLE_ERRORS = (OperationalError, PoolTimeoutError)

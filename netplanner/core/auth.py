"""
Network Design Planner - Caller Identity
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Authentication is delegated to an external identity provider that sits in
front of the API. It forwards the authenticated user id in a request header
(X-User-Id unless NDP_IDENTITY_HEADER says otherwise). Every planner
operation is scoped to that caller id.
"""

from fastapi import Request

from .config import settings
from .exceptions import AuthRequiredError
from .logging import get_logger

logger = get_logger(__name__)


def get_caller_id_from_request(request: Request) -> str | None:
    """Read the forwarded caller id, or None when absent or blank."""
    value = request.headers.get(settings.identity.HEADER)
    if value is None:
        return None
    value = value.strip()
    return value or None


async def require_caller(request: Request) -> str:
    """
    Dependency for every planner endpoint - requires an identified caller.

    Raises AuthRequiredError (401) when the identity header is missing.
    Returns the caller id for ownership scoping and audit logging.
    """
    caller_id = get_caller_id_from_request(request)
    if not caller_id:
        logger.warning(
            "Request rejected - no caller identity",
            extra={"operation": f"{request.method} {request.url.path}"}
        )
        raise AuthRequiredError()

    request.state.caller_id = caller_id
    return caller_id

"""
Network Design Planner - Custom Exceptions
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Standardized exception classes for planner operations.
All exceptions follow the response envelope pattern.
"""

from typing import Any


class PlannerException(Exception):
    """Base exception for all planner errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        recoverable: bool = True,
        suggested_action: str | None = None
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        self.suggested_action = suggested_action

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to error response dictionary."""
        result = {
            "code": self.code,
            "message": self.message,
            "recoverable": self.recoverable,
        }
        if self.details:
            result["details"] = self.details
        if self.suggested_action:
            result["suggested_action"] = self.suggested_action
        return result


class ValidationError(PlannerException):
    """Request or template validation failed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            details=details,
            recoverable=True,
            suggested_action="Check request parameters and try again"
        )


class NotFoundError(PlannerException):
    """
    Entity is absent or not visible to the caller.

    Ownership failures share this error so that callers cannot tell
    other users' records from missing ones.
    """

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} '{identifier}' not found"
        details = {"resource": resource}
        if identifier is not None:
            details["id"] = identifier
        super().__init__(
            code="NOT_FOUND",
            message=message,
            details=details,
            recoverable=True,
            suggested_action=f"Verify the {resource.lower()} identifier"
        )


class ConflictError(PlannerException):
    """Operation conflicts with the current state of a record."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="CONFLICT",
            message=message,
            details=details,
            recoverable=True,
            suggested_action="Reload the resource and retry"
        )


class UnauthorizedError(PlannerException):
    """Caller is authenticated but may not act on this resource."""

    def __init__(self, resource: str, identifier: Any = None):
        details = {"resource": resource}
        if identifier is not None:
            details["id"] = identifier
        super().__init__(
            code="UNAUTHORIZED",
            message=f"Not allowed to modify this {resource.lower()}",
            details=details,
            recoverable=False,
            suggested_action="Ask the owner to perform this action"
        )


class UnavailableError(PlannerException):
    """Store or dependent service did not answer."""

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(
            code="UNAVAILABLE",
            message=message,
            details={},
            recoverable=True,
            suggested_action="Retry after a short delay"
        )


class InternalError(PlannerException):
    """Unexpected server error."""

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            details={},
            recoverable=False,
            suggested_action="Contact system administrator"
        )


class AuthRequiredError(PlannerException):
    """No caller identity was forwarded by the identity provider."""

    def __init__(self):
        super().__init__(
            code="AUTH_REQUIRED",
            message="Authentication required",
            details={},
            recoverable=True,
            suggested_action="Sign in through the identity provider and retry"
        )

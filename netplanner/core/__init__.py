"""
Network Design Planner - Core Module
Error handling, exceptions, and logging utilities
"""

from .exceptions import (
    PlannerException,
    ValidationError,
    NotFoundError,
    ConflictError,
    UnauthorizedError,
    UnavailableError,
    AuthRequiredError,
    InternalError,
)
from .errors import ERROR_CODE_STATUS_MAP

__all__ = [
    "PlannerException",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "UnauthorizedError",
    "UnavailableError",
    "AuthRequiredError",
    "InternalError",
    "ERROR_CODE_STATUS_MAP",
]

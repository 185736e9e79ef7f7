"""
Network Design Planner - Common Schemas
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Shared Pydantic models used across all endpoints.
"""

import re
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo
from pydantic.alias_generators import to_camel

SEMVER_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


class RequestModel(BaseModel):
    """
    Base for request bodies.

    Clients send camelCase (designId, variableValues); snake_case is
    accepted as well.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def reject_null(value: Any, info: ValidationInfo) -> Any:
    """
    Field validator body for partial updates.

    Omitted fields keep their stored value, but an explicit null cannot
    clear a column that must always hold a value.
    """
    if value is None:
        raise ValueError(f"{info.field_name} cannot be null")
    return value


class RecordModel(BaseModel):
    """Base for responses built from ORM rows."""

    model_config = ConfigDict(from_attributes=True)


class ResponseMeta(BaseModel):
    """Metadata included in all API responses."""

    timestamp: datetime = Field(description="Response timestamp in ISO 8601 format")
    request_id: Optional[str] = Field(None, description="Unique request identifier for tracing")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error context")
    recoverable: bool = Field(True, description="Whether client can retry the operation")
    suggested_action: Optional[str] = Field(None, description="Suggested resolution")
    user_message: Optional[str] = Field(None, description="Message suitable for display")


class ErrorResponse(BaseModel):
    """Standard error response envelope."""

    error: ErrorDetail
    meta: ResponseMeta


class PaginationMeta(BaseModel):
    """Pagination information for list responses."""

    total: int = Field(description="Total number of items")
    offset: int = Field(0, description="Current offset")
    limit: int = Field(description="Items per page")
    has_more: bool = Field(False, description="Whether more items exist")


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation error"},
    401: {"model": ErrorResponse, "description": "Caller identity missing"},
    404: {"model": ErrorResponse, "description": "Not found or not visible"},
    503: {"model": ErrorResponse, "description": "Store unavailable"},
}

"""
Network Design Planner - Design Version Schemas
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import Field, field_validator

from ..models.version import ChangeOperation
from .common import RecordModel, RequestModel

IMPACT_LEVELS = ("low", "medium", "high", "critical")


class ChangeEntry(RequestModel):
    """One recorded change between two design states."""

    path: str = Field(min_length=1, description="Dotted path of the changed field")
    operation: str = Field(description="added, removed or modified")
    old_value: Any = Field(None, description="Value before the change")
    new_value: Any = Field(None, description="Value after the change")
    impact: str = Field("medium", description="low, medium, high or critical")
    description: Optional[str] = Field(None, description="Human-readable summary")

    @field_validator("operation")
    @classmethod
    def validate_operation(cls, v: str) -> str:
        if v not in ChangeOperation.ALL:
            raise ValueError(f"operation must be one of: {', '.join(ChangeOperation.ALL)}")
        return v

    @field_validator("impact")
    @classmethod
    def validate_impact(cls, v: str) -> str:
        if v not in IMPACT_LEVELS:
            raise ValueError(f"impact must be one of: {', '.join(IMPACT_LEVELS)}")
        return v


class VersionCreate(RequestModel):
    """Request to snapshot the current design state."""

    version_bump: str = Field("patch", description="major, minor or patch")
    changes: Optional[List[ChangeEntry]] = Field(None, description="Omit to derive from the previous version")
    notes: Optional[str] = Field(None, max_length=500, description="Release notes")
    tags: List[str] = Field(default_factory=list, description="Free-form labels")
    parent_version: Optional[int] = Field(None, description="Version this one builds on")


class VersionResponse(RecordModel):
    """A design version record."""

    id: int = Field(description="Version ID")
    design_id: int = Field(description="Owning design")
    version: str = Field(description="Semantic version")
    snapshot: Dict[str, Any] = Field(description="Design document at capture time")
    created_by: str = Field(description="User who created the version")
    changes: List[Dict[str, Any]] = Field(description="Recorded changes")
    notes: Optional[str] = Field(None, description="Release notes")
    tags: List[str] = Field(description="Free-form labels")
    parent_version_id: Optional[int] = Field(None, description="Version this one builds on")
    is_published: bool = Field(description="Published versions stay published")
    published_at: Optional[datetime] = Field(None, description="Publication timestamp")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")


class VersionSummary(RecordModel):
    """Version as shown in comparisons."""

    id: int
    version: str
    created_at: Optional[datetime] = None
    is_published: bool

"""
Network Design Planner - Generated Configuration Schemas
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later
"""

from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import Field, field_validator

from ..models.template import ConfigType
from .common import RecordModel, RequestModel


class GenerateRequest(RequestModel):
    """Request to render a template for a design/equipment target."""

    design_id: int = Field(description="Target design")
    equipment_id: int = Field(description="Target equipment")
    config_type: str = Field(description="Configuration type")
    variable_values: Dict[str, Any] = Field(default_factory=dict, description="Variable overrides")

    @field_validator("config_type")
    @classmethod
    def validate_config_type(cls, v: str) -> str:
        if v not in ConfigType.ALL:
            raise ValueError(f"config_type must be one of: {', '.join(ConfigType.ALL)}")
        return v


class RegenerateRequest(RequestModel):
    """New overrides merged over the source record's values."""

    variable_values: Dict[str, Any] = Field(default_factory=dict, description="Variable overrides")


class ApplyRequest(RequestModel):
    """Mark a generated configuration as applied."""

    notes: Optional[str] = Field(None, description="Application notes")


class GeneratedConfigResponse(RecordModel):
    """A rendered configuration record."""

    id: int = Field(description="Generated configuration ID")
    template_id: int = Field(description="Source template")
    design_id: int = Field(description="Target design")
    equipment_id: Optional[int] = Field(None, description="Target equipment")
    config_type: Optional[str] = Field(None, description="Configuration type")
    variable_values: Dict[str, Any] = Field(description="Values used for the render")
    configuration: str = Field(description="Rendered configuration text")
    generated_by: str = Field(description="User who generated the record")
    generated_at: Optional[datetime] = Field(None, description="Generation timestamp")
    is_applied: bool = Field(description="Applied records are immutable")
    applied_at: Optional[datetime] = Field(None, description="First application timestamp")
    notes: Optional[str] = Field(None, description="Application notes")
    parent_config_id: Optional[int] = Field(None, description="Record this one was regenerated from")

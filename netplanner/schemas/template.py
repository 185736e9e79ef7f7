"""
Network Design Planner - Configuration Template Schemas
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Pydantic models for configuration templates and device deployments.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import Field, field_validator

from ..models.equipment import EquipmentCategory
from ..models.template import ConfigSourceType, ConfigType, DeploymentStatus
from .common import SEMVER_PATTERN, RecordModel, RequestModel, reject_null


def _check_choice(value: Optional[str], choices: tuple, label: str) -> Optional[str]:
    if value is not None and value not in choices:
        raise ValueError(f"{label} must be one of: {', '.join(choices)}")
    return value


class VariableDefinition(RequestModel):
    """A named, typed slot declared on a template."""

    name: str = Field(min_length=1, max_length=64, description="Placeholder name used as {{name}}")
    description: Optional[str] = Field(None, description="What the variable controls")
    required: bool = Field(False, description="Generation fails if no value or default exists")
    default_value: Optional[str] = Field(None, description="Value used when none is supplied")
    data_type: str = Field("string", description="string, number, ip, cidr, boolean or select")
    validation_regex: Optional[str] = Field(None, description="Pattern values must fully match")
    options: List[str] = Field(default_factory=list, description="Allowed values for select")
    example: Optional[str] = Field(None, description="Example value for form hints")
    scope: str = Field("global", description="global, device or interface")


class ConfigFileRef(RequestModel):
    """Reference to an uploaded configuration file."""

    url: str = Field(min_length=1, description="Location of the stored file")
    original_name: str = Field(min_length=1, description="File name as uploaded")
    size: Optional[int] = Field(None, ge=0, description="Size in bytes")
    mime_type: Optional[str] = Field(None, description="Content type")


class TemplateCreate(RequestModel):
    """Request to create a configuration template."""

    name: str = Field(min_length=1, max_length=128, description="Template name, unique per owner")
    description: Optional[str] = Field(None, description="Description")
    vendor: str = Field(min_length=1, max_length=64, description="Target vendor")
    model: Optional[str] = Field(None, max_length=64, description="Target model; omit to match any")
    equipment_category: str = Field(description="Target equipment category")
    config_type: str = Field(description="Configuration type")
    version: str = Field("1.0.0", description="Template version (MAJOR.MINOR.PATCH)")
    config_source_type: str = Field(ConfigSourceType.TEMPLATE, description="template or file")
    template: Optional[str] = Field(None, description="Body with {{name}} placeholders")
    config_file: Optional[ConfigFileRef] = Field(None, description="Uploaded file reference")
    variables: List[VariableDefinition] = Field(default_factory=list, description="Variable definitions")
    is_active: bool = Field(True, description="Whether the template is offered for use")

    @field_validator("equipment_category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return _check_choice(v, EquipmentCategory.ALL, "equipment_category")

    @field_validator("config_type")
    @classmethod
    def validate_config_type(cls, v: str) -> str:
        return _check_choice(v, ConfigType.ALL, "config_type")

    @field_validator("config_source_type")
    @classmethod
    def validate_source_type(cls, v: str) -> str:
        return _check_choice(v, ConfigSourceType.ALL, "config_source_type")

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        if not SEMVER_PATTERN.match(v):
            raise ValueError("version must be in MAJOR.MINOR.PATCH format")
        return v


class TemplateUpdate(RequestModel):
    """Partial update of a template; omitted fields are kept."""

    name: Optional[str] = Field(None, min_length=1, max_length=128)
    description: Optional[str] = None
    vendor: Optional[str] = Field(None, min_length=1, max_length=64)
    model: Optional[str] = Field(None, max_length=64)
    equipment_category: Optional[str] = None
    config_type: Optional[str] = None
    version: Optional[str] = None
    config_source_type: Optional[str] = None
    template: Optional[str] = None
    config_file: Optional[ConfigFileRef] = None
    variables: Optional[List[VariableDefinition]] = None
    is_active: Optional[bool] = None

    check_not_null = field_validator(
        "name", "vendor", "equipment_category", "config_type", "version",
        "config_source_type", "variables", "is_active",
    )(reject_null)

    @field_validator("equipment_category")
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        return _check_choice(v, EquipmentCategory.ALL, "equipment_category")

    @field_validator("config_type")
    @classmethod
    def validate_config_type(cls, v: Optional[str]) -> Optional[str]:
        return _check_choice(v, ConfigType.ALL, "config_type")

    @field_validator("config_source_type")
    @classmethod
    def validate_source_type(cls, v: Optional[str]) -> Optional[str]:
        return _check_choice(v, ConfigSourceType.ALL, "config_source_type")

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not SEMVER_PATTERN.match(v):
            raise ValueError("version must be in MAJOR.MINOR.PATCH format")
        return v


class DeployRequest(RequestModel):
    """Request to deploy a template to a device."""

    device_id: int = Field(description="Equipment ID of the target device")
    variables: Dict[str, Any] = Field(default_factory=dict, description="Variable overrides")
    notes: Optional[str] = Field(None, description="Deployment notes")


class DeploymentStatusUpdate(RequestModel):
    """Operator-reported deployment status."""

    status: str = Field(description="pending, active, failed or rolled-back")
    notes: Optional[str] = Field(None, description="Appended to the deployment notes")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return _check_choice(v, DeploymentStatus.ALL, "status")


class DeploymentResponse(RecordModel):
    """A template deployment record."""

    id: int = Field(description="Deployment ID")
    template_id: int = Field(description="Deployed template")
    device_id: int = Field(description="Target equipment")
    deployed_by: str = Field(description="User who deployed")
    status: str = Field(description="Deployment status")
    variables: Dict[str, Any] = Field(description="Values used for the render")
    rendered_config: Optional[str] = Field(None, description="Resolved configuration text")
    notes: Optional[str] = Field(None, description="Operator notes")
    deployed_at: Optional[datetime] = Field(None, description="Deployment timestamp")
    activated_at: Optional[datetime] = Field(None, description="When status first became active")
    updated_at: Optional[datetime] = Field(None, description="Last status change")


class TemplateResponse(RecordModel):
    """Configuration template response."""

    id: int = Field(description="Template ID")
    owner_id: str = Field(description="Owning user")
    name: str = Field(description="Template name")
    description: Optional[str] = Field(None, description="Description")
    vendor: str = Field(description="Target vendor")
    model: Optional[str] = Field(None, description="Target model")
    equipment_category: str = Field(description="Target equipment category")
    config_type: str = Field(description="Configuration type")
    version: str = Field(description="Template version")
    config_source_type: str = Field(description="template or file")
    template: Optional[str] = Field(None, description="Template body")
    config_file: Optional[Dict[str, Any]] = Field(None, description="Uploaded file reference")
    variables: List[Dict[str, Any]] = Field(description="Variable definitions")
    is_active: bool = Field(description="Whether the template is offered for use")
    is_system_template: bool = Field(description="Built-in template visible to everyone")
    last_updated_by: Optional[str] = Field(None, description="User who last changed the template")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")


class TemplateDetailResponse(TemplateResponse):
    """Template with its deployment history."""

    deployments: List[DeploymentResponse] = Field(default_factory=list, description="Deployments of this template")

"""
Network Design Planner - Pydantic Schemas
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later
"""

from .common import ErrorResponse, PaginationMeta, RecordModel, RequestModel, ResponseMeta
from .design import DesignCreate, DesignUpdate, Requirements, Segment
from .generated_config import (
    ApplyRequest,
    GenerateRequest,
    GeneratedConfigResponse,
    RegenerateRequest,
)
from .template import (
    ConfigFileRef,
    DeploymentResponse,
    DeploymentStatusUpdate,
    DeployRequest,
    TemplateCreate,
    TemplateDetailResponse,
    TemplateResponse,
    TemplateUpdate,
    VariableDefinition,
)
from .version import ChangeEntry, VersionCreate, VersionResponse, VersionSummary

__all__ = [
    "ApplyRequest",
    "ChangeEntry",
    "ConfigFileRef",
    "DeployRequest",
    "DeploymentResponse",
    "DeploymentStatusUpdate",
    "DesignCreate",
    "DesignUpdate",
    "ErrorResponse",
    "GenerateRequest",
    "GeneratedConfigResponse",
    "PaginationMeta",
    "RecordModel",
    "RegenerateRequest",
    "RequestModel",
    "Requirements",
    "ResponseMeta",
    "Segment",
    "TemplateCreate",
    "TemplateDetailResponse",
    "TemplateResponse",
    "TemplateUpdate",
    "VariableDefinition",
    "VersionCreate",
    "VersionResponse",
    "VersionSummary",
]

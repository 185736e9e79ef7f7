"""
Network Design Planner - Network Design Schemas
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Pydantic models for network design documents.
"""

from typing import List, Optional
from pydantic import Field, field_validator

from ..models.design import DesignStatus
from .common import RequestModel, reject_null

TOTAL_USERS_CHOICES = ("1-50", "51-200", "201-500", "500+")
SEGMENT_TYPES = ("department", "function", "security")
PRIORITIES = ("low", "medium", "high", "critical")
PRIVATE_RANGES = ("10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16")


class Segment(RequestModel):
    """A network segment (department, function or security zone)."""

    name: str = Field(min_length=1, description="Segment name")
    type: Optional[str] = Field(None, description="department, function or security")
    users: Optional[int] = Field(None, ge=0, description="Users in the segment")
    bandwidth_priority: Optional[str] = Field(None, description="low, medium, high or critical")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in SEGMENT_TYPES:
            raise ValueError(f"type must be one of: {', '.join(SEGMENT_TYPES)}")
        return v

    @field_validator("bandwidth_priority")
    @classmethod
    def validate_priority(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in PRIORITIES:
            raise ValueError(f"bandwidth_priority must be one of: {', '.join(PRIORITIES)}")
        return v


class Requirements(RequestModel):
    """What the network has to support."""

    total_users: Optional[str] = Field(None, description="User count bracket")
    wired_users: Optional[int] = Field(None, ge=0)
    wireless_users: Optional[int] = Field(None, ge=0)
    network_segmentation: bool = False
    segments: List[Segment] = Field(default_factory=list)
    bandwidth: Optional[float] = Field(None, ge=0, description="Bandwidth in Mbps")
    cloud_services: bool = False
    local_erp: bool = False
    dhcp_server: bool = False
    dns_server: bool = False
    preferred_private_ip: Optional[str] = Field(None, description="Preferred RFC 1918 range")
    public_ips: int = Field(0, ge=0)
    physical_servers: int = Field(0, ge=0)
    dedicated_firewall: bool = False

    @field_validator("total_users")
    @classmethod
    def validate_total_users(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in TOTAL_USERS_CHOICES:
            raise ValueError(f"total_users must be one of: {', '.join(TOTAL_USERS_CHOICES)}")
        return v

    @field_validator("preferred_private_ip")
    @classmethod
    def validate_private_ip(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in PRIVATE_RANGES:
            raise ValueError(f"preferred_private_ip must be one of: {', '.join(PRIVATE_RANGES)}")
        return v


class ExistingNetworkDetails(RequestModel):
    """Description of the network being replaced or extended."""

    current_topology: Optional[str] = None
    current_issues: List[str] = Field(default_factory=list)
    current_ip_scheme: Optional[str] = None


class DesignCreate(RequestModel):
    """Request to create a network design."""

    design_name: str = Field(min_length=1, max_length=128, description="Design name")
    description: Optional[str] = Field(None, description="Description")
    status: str = Field(DesignStatus.DRAFT, description="Design status")
    is_existing_network: bool = Field(False, description="Whether an existing network is involved")
    existing_network_details: Optional[ExistingNetworkDetails] = None
    requirements: Requirements = Field(default_factory=Requirements)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in DesignStatus.ALL:
            raise ValueError(f"status must be one of: {', '.join(DesignStatus.ALL)}")
        return v


class DesignUpdate(RequestModel):
    """Partial update of a design; omitted fields are kept."""

    design_name: Optional[str] = Field(None, min_length=1, max_length=128)
    description: Optional[str] = None
    status: Optional[str] = None
    is_existing_network: Optional[bool] = None
    existing_network_details: Optional[ExistingNetworkDetails] = None
    requirements: Optional[Requirements] = None

    check_not_null = field_validator(
        "design_name", "status", "is_existing_network", "requirements",
    )(reject_null)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in DesignStatus.ALL:
            raise ValueError(f"status must be one of: {', '.join(DesignStatus.ALL)}")
        return v

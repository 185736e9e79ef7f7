"""
Network Design Planner - Configuration Template Models
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

SQLAlchemy models for configuration templates and their device deployments.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class ConfigSourceType:
    """Where a template's body comes from (mutually exclusive)."""

    TEMPLATE = "template"
    FILE = "file"

    ALL = (TEMPLATE, FILE)


class ConfigType:
    """Configuration type constants."""

    BASIC = "basic"
    VLAN = "vlan"
    ROUTING = "routing"
    SECURITY = "security"
    QOS = "qos"
    HA = "ha"

    ALL = (BASIC, VLAN, ROUTING, SECURITY, QOS, HA)


class DeploymentStatus:
    """
    Deployment status constants.

    Status is reported by operators and may be set to any value from any
    value; see core/state_machine.py.
    """

    PENDING = "pending"
    ACTIVE = "active"
    FAILED = "failed"
    ROLLED_BACK = "rolled-back"

    ALL = (PENDING, ACTIVE, FAILED, ROLLED_BACK)


class ConfigurationTemplate(Base):
    """
    Reusable configuration text with {{name}} placeholders.

    `variables` holds the ordered variable definitions:
    [{name, description, required, default_value, data_type,
      validation_regex, options, example, scope}, ...]
    """

    __tablename__ = "configuration_templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(128), nullable=False, index=True)
    name = Column(String(128), nullable=False)
    description = Column(Text, nullable=True)

    # Target device specifications
    vendor = Column(String(64), nullable=False)
    model = Column(String(64), nullable=True)
    equipment_category = Column(String(16), nullable=False)
    config_type = Column(String(16), nullable=False)
    version = Column(String(32), nullable=False, default="1.0.0")

    # Body: either template text or an uploaded file reference
    config_source_type = Column(String(16), nullable=False, default=ConfigSourceType.TEMPLATE)
    template = Column(Text, nullable=True)
    config_file = Column(JSON, nullable=True)
    variables = Column(JSON, nullable=False, default=list)

    is_active = Column(Boolean, nullable=False, default=True)
    is_system_template = Column(Boolean, nullable=False, default=False)
    last_updated_by = Column(String(128), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Read projection of the standalone deployment records
    deployments = relationship(
        "TemplateDeployment",
        back_populates="template",
        order_by="TemplateDeployment.id",
    )

    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_template_owner_name"),
        Index("ix_configuration_templates_vendor_model", "vendor", "model"),
    )

    @property
    def variable_names(self) -> list[str]:
        return [v["name"] for v in (self.variables or [])]

    def __repr__(self) -> str:
        return f"<ConfigurationTemplate(id={self.id}, name='{self.name}', version='{self.version}')>"


class TemplateDeployment(Base):
    """A rendered template pushed to a specific device."""

    __tablename__ = "template_deployments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    template_id = Column(
        Integer, ForeignKey("configuration_templates.id"), nullable=False, index=True
    )
    device_id = Column(Integer, ForeignKey("equipment.id"), nullable=False, index=True)
    deployed_by = Column(String(128), nullable=False)

    status = Column(String(16), nullable=False, default=DeploymentStatus.PENDING)
    variables = Column(JSON, nullable=False, default=dict)
    rendered_config = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    deployed_at = Column(DateTime(timezone=True), default=utcnow)
    activated_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    template = relationship("ConfigurationTemplate", back_populates="deployments")

"""
Network Design Planner - Database Models
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

SQLAlchemy models for the planner database.
"""

from .base import Base, SessionLocal, engine, get_db
from .design import DesignStatus, NetworkDesign
from .equipment import Equipment, EquipmentCategory
from .generated_config import GeneratedConfiguration
from .template import (
    ConfigSourceType,
    ConfigType,
    ConfigurationTemplate,
    DeploymentStatus,
    TemplateDeployment,
)
from .version import ChangeOperation, DesignVersion, VersionBump

__all__ = [
    "Base",
    "ChangeOperation",
    "ConfigSourceType",
    "ConfigType",
    "ConfigurationTemplate",
    "DeploymentStatus",
    "DesignStatus",
    "DesignVersion",
    "Equipment",
    "EquipmentCategory",
    "GeneratedConfiguration",
    "NetworkDesign",
    "SessionLocal",
    "TemplateDeployment",
    "VersionBump",
    "engine",
    "get_db",
]

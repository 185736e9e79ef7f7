"""
Network Design Planner - Services Layer
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Business logic for templates, generated configurations, designs and versions.
"""

from .config_service import ConfigService, get_config_service
from .design_service import DesignService, get_design_service
from .version_service import VersionService, get_version_service

__all__ = [
    "ConfigService",
    "DesignService",
    "VersionService",
    "get_config_service",
    "get_design_service",
    "get_version_service",
]

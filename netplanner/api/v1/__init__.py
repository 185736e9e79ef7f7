"""
Network Design Planner - API v1 Module
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later
"""

from fastapi import APIRouter

from ...schemas.common import ERROR_RESPONSES
from .configs import router as configs_router
from .designs import router as designs_router
from .equipment import router as equipment_router
from .templates import router as templates_router
from .versions import router as versions_router

api_router = APIRouter(responses=ERROR_RESPONSES)

# Resource routes
api_router.include_router(templates_router, prefix="/templates", tags=["Configuration Templates"])
api_router.include_router(configs_router, prefix="/configs", tags=["Generated Configurations"])
api_router.include_router(equipment_router, prefix="/equipment", tags=["Equipment"])
api_router.include_router(designs_router, prefix="/designs", tags=["Network Designs"])
api_router.include_router(versions_router, prefix="/versions", tags=["Design Versions"])

__all__ = ["api_router"]

"""
Network Design Planner - Design Version Endpoints
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from ...core.auth import require_caller
from ...core.errors import build_success_response
from ...models.base import get_db
from ...schemas.version import VersionResponse, VersionSummary
from ...services.version_service import get_version_service

router = APIRouter()


@router.get("/compare")
async def compare_versions(
    version1: str = Query(..., description="Version string (1.2.0) or version ID"),
    version2: str = Query(..., description="Version string (1.2.0) or version ID"),
    design_id: int = Query(..., alias="designId", description="Design the versions belong to"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Structural diff between two versions, older to newer.
    """
    comparison = get_version_service(db).compare(design_id, caller_id, version1, version2)
    return build_success_response({
        "version1": VersionSummary.model_validate(comparison["version1"]).model_dump(),
        "version2": VersionSummary.model_validate(comparison["version2"]).model_dump(),
        "changes": comparison["changes"],
        "summary": comparison["summary"],
    })


@router.get("/{version_id}")
async def get_version(
    version_id: int = Path(..., description="Version ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Get a version of one of the caller's designs.
    """
    version = get_version_service(db).get_version(version_id, caller_id)
    return build_success_response(VersionResponse.model_validate(version).model_dump())


@router.patch("/{version_id}/publish")
async def publish_version(
    version_id: int = Path(..., description="Version ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Publish a version. Already-published versions are returned unchanged.
    """
    version = get_version_service(db).publish(version_id, caller_id)
    return build_success_response(VersionResponse.model_validate(version).model_dump())


@router.post("/{version_id}/restore")
async def restore_version(
    version_id: int = Path(..., description="Version ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Overwrite the live design with the version's snapshot.
    """
    design = get_version_service(db).restore(version_id, caller_id)
    return build_success_response(design.to_document())

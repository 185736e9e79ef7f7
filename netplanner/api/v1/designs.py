"""
Network Design Planner - Network Design Endpoints
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Owner-scoped design documents and their version history.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from ...core.auth import require_caller
from ...core.config import settings
from ...core.errors import build_success_response
from ...models.base import get_db
from ...schemas.design import DesignCreate, DesignUpdate
from ...schemas.version import VersionCreate, VersionResponse
from ...services.design_service import get_design_service
from ...services.version_service import get_version_service

router = APIRouter()


@router.post("", status_code=201)
async def create_design(
    request: DesignCreate,
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Create a network design owned by the caller.
    """
    design = get_design_service(db).create_design(caller_id, request)
    return build_success_response(design.to_document())


@router.get("")
async def list_designs(
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    List the caller's designs, most recently updated first.
    """
    designs = get_design_service(db).list_designs(caller_id)
    result = [design.to_document() for design in designs]
    return build_success_response(result, meta={"total": len(result)})


@router.get("/{design_id}")
async def get_design(
    design_id: int = Path(..., description="Design ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Get a design owned by the caller.
    """
    design = get_design_service(db).get_owned_design(design_id, caller_id)
    return build_success_response(design.to_document())


@router.put("/{design_id}")
async def update_design(
    request: DesignUpdate,
    design_id: int = Path(..., description="Design ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Update a design owned by the caller. Omitted fields are kept.
    """
    design = get_design_service(db).update_design(design_id, caller_id, request)
    return build_success_response(design.to_document())


@router.post("/{design_id}/versions", status_code=201)
async def create_version(
    request: VersionCreate,
    design_id: int = Path(..., description="Design ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Snapshot the current design as a new semantic version.
    """
    version = get_version_service(db).create_version(design_id, caller_id, request)
    return build_success_response(VersionResponse.model_validate(version).model_dump())


@router.get("/{design_id}/versions")
async def list_versions(
    design_id: int = Path(..., description="Design ID"),
    published_only: bool = Query(False, alias="publishedOnly", description="Only published versions"),
    sort: str = Query("-version", description="version, -version, created_at or -created_at"),
    limit: int = Query(settings.pagination.DEFAULT_PAGE_SIZE, ge=1, le=settings.pagination.MAX_PAGE_SIZE),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    List versions of a design.
    """
    versions = get_version_service(db).list_versions(
        design_id, caller_id, published_only=published_only, sort=sort, limit=limit
    )
    result = [VersionResponse.model_validate(v).model_dump() for v in versions]
    return build_success_response(result, meta={"total": len(result)})


@router.get("/{design_id}/versions/next")
async def get_next_version(
    design_id: int = Path(..., description="Design ID"),
    bump: str = Query("patch", description="major, minor or patch"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Preview the version number the next snapshot would take.
    """
    version = get_version_service(db).get_next_version(design_id, caller_id, bump)
    return build_success_response({"design_id": design_id, "bump": bump, "version": version})

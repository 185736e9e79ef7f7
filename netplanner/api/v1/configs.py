"""
Network Design Planner - Generated Configuration Endpoints
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Generate, regenerate, apply and delete rendered configurations, and
record deployment status reported by operators.

Note: Business logic is delegated to ConfigService.
Route handlers remain thin and declarative.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.orm import Session

from ...core.auth import require_caller
from ...core.config import settings
from ...core.errors import build_success_response
from ...models.base import get_db
from ...schemas.common import PaginationMeta
from ...schemas.generated_config import (
    ApplyRequest,
    GenerateRequest,
    GeneratedConfigResponse,
    RegenerateRequest,
)
from ...schemas.template import DeploymentResponse, DeploymentStatusUpdate
from ...services.config_service import get_config_service

router = APIRouter()


@router.get("")
async def list_configs(
    design_id: Optional[int] = Query(None, alias="designId", description="Filter by design"),
    equipment_id: Optional[int] = Query(None, alias="equipmentId", description="Filter by equipment"),
    template_id: Optional[int] = Query(None, alias="templateId", description="Filter by template"),
    applied: Optional[bool] = Query(None, description="Filter by applied flag"),
    config_type: Optional[str] = Query(None, alias="configType", description="Filter by configuration type"),
    limit: int = Query(settings.pagination.DEFAULT_PAGE_SIZE, ge=1, le=settings.pagination.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    List the caller's generated configurations, newest first.
    """
    records, total = get_config_service(db).list_configs(
        caller_id,
        design_id=design_id,
        equipment_id=equipment_id,
        template_id=template_id,
        applied=applied,
        config_type=config_type,
        limit=limit,
        offset=offset,
    )
    result = [GeneratedConfigResponse.model_validate(r).model_dump() for r in records]
    pagination = PaginationMeta(
        total=total, offset=offset, limit=limit, has_more=offset + len(result) < total
    )
    return build_success_response(result, meta={"pagination": pagination.model_dump()})


@router.get("/{config_id}")
async def get_config(
    config_id: int = Path(..., description="Generated configuration ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Get a generated configuration owned by the caller.
    """
    record = get_config_service(db).get_config(config_id, caller_id)
    return build_success_response(GeneratedConfigResponse.model_validate(record).model_dump())


@router.post("/{template_id}/generate", status_code=201)
async def generate_config(
    request: GenerateRequest,
    template_id: int = Path(..., description="Template ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Render a template for a design/equipment target.
    """
    record = get_config_service(db).generate(template_id, caller_id, request)
    return build_success_response(GeneratedConfigResponse.model_validate(record).model_dump())


@router.post("/{config_id}/regenerate", status_code=201)
async def regenerate_config(
    request: Optional[RegenerateRequest] = None,
    config_id: int = Path(..., description="Generated configuration ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Re-render with new overrides into a new record linked to the source.
    """
    overrides = request.variable_values if request else {}
    record = get_config_service(db).regenerate(config_id, caller_id, overrides)
    return build_success_response(GeneratedConfigResponse.model_validate(record).model_dump())


@router.patch("/{config_id}/apply")
async def apply_config(
    request: Optional[ApplyRequest] = None,
    config_id: int = Path(..., description="Generated configuration ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Mark a generated configuration as applied (idempotent).
    """
    notes = request.notes if request else None
    record = get_config_service(db).apply(config_id, caller_id, notes)
    return build_success_response(GeneratedConfigResponse.model_validate(record).model_dump())


@router.delete("/{config_id}", status_code=204)
async def delete_config(
    config_id: int = Path(..., description="Generated configuration ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Response:
    """
    Delete an unapplied generated configuration.
    """
    get_config_service(db).delete_config(config_id, caller_id)
    return Response(status_code=204)


@router.patch("/{template_id}/deployments/{deployment_id}")
async def update_deployment_status(
    request: DeploymentStatusUpdate,
    template_id: int = Path(..., description="Template ID"),
    deployment_id: int = Path(..., description="Deployment ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Record a deployment status reported by an operator.

    Any status may follow any other; notes are appended.
    """
    deployment = get_config_service(db).update_deployment_status(
        template_id, deployment_id, caller_id, request.status, request.notes
    )
    return build_success_response(DeploymentResponse.model_validate(deployment).model_dump())

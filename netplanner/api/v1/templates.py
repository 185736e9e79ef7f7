"""
Network Design Planner - Configuration Template Endpoints
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Template CRUD and device deployment endpoints.

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
from ...models.template import ConfigurationTemplate
from ...schemas.common import PaginationMeta
from ...schemas.template import (
    DeploymentResponse,
    DeployRequest,
    TemplateCreate,
    TemplateDetailResponse,
    TemplateResponse,
    TemplateUpdate,
)
from ...services.config_service import get_config_service

router = APIRouter()


def template_detail(template: ConfigurationTemplate) -> Dict[str, Any]:
    """Template with deployments read from the deployment records."""
    return TemplateDetailResponse.model_validate(template).model_dump()


@router.get("")
async def list_templates(
    equipment_category: Optional[str] = Query(None, description="Filter by equipment category"),
    config_type: Optional[str] = Query(None, description="Filter by configuration type"),
    vendor: Optional[str] = Query(None, description="Filter by vendor (case-insensitive)"),
    active: Optional[bool] = Query(None, description="Filter by active flag"),
    source_type: Optional[str] = Query(None, description="Filter by template or file source"),
    limit: int = Query(settings.pagination.DEFAULT_PAGE_SIZE, ge=1, le=settings.pagination.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    List the caller's templates and system templates, ordered by vendor and model.
    """
    templates, total = get_config_service(db).list_templates(
        caller_id,
        equipment_category=equipment_category,
        config_type=config_type,
        vendor=vendor,
        active=active,
        source_type=source_type,
        limit=limit,
        offset=offset,
    )
    result = [TemplateResponse.model_validate(t).model_dump() for t in templates]
    pagination = PaginationMeta(
        total=total, offset=offset, limit=limit, has_more=offset + len(result) < total
    )
    return build_success_response(result, meta={"pagination": pagination.model_dump()})


@router.post("", status_code=201)
async def create_template(
    request: TemplateCreate,
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Create a new configuration template.
    """
    template = get_config_service(db).create_template(caller_id, request)
    return build_success_response(template_detail(template))


@router.get("/{template_id}")
async def get_template(
    template_id: int = Path(..., description="Template ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Get a template with its deployment history.
    """
    template = get_config_service(db).get_template(template_id, caller_id)
    return build_success_response(template_detail(template))


@router.put("/{template_id}")
async def update_template(
    request: TemplateUpdate,
    template_id: int = Path(..., description="Template ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Update a template owned by the caller.
    """
    template = get_config_service(db).update_template(template_id, caller_id, request)
    return build_success_response(template_detail(template))


@router.delete("/{template_id}", status_code=204)
async def delete_template(
    template_id: int = Path(..., description="Template ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Response:
    """
    Delete a template that has no deployments or generated configurations.
    """
    get_config_service(db).delete_template(template_id, caller_id)
    return Response(status_code=204)


@router.post("/{template_id}/deploy", status_code=201)
async def deploy_template(
    request: DeployRequest,
    template_id: int = Path(..., description="Template ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Render a template for a compatible device and record a pending deployment.
    """
    deployment = get_config_service(db).deploy(template_id, caller_id, request)
    return build_success_response(DeploymentResponse.model_validate(deployment).model_dump())

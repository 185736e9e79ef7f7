"""
Network Design Planner - Equipment Endpoints
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Read-only views of templates and deployments from a device's point of view.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from ...core.auth import require_caller
from ...core.errors import build_success_response
from ...models.base import get_db
from ...schemas.template import DeploymentResponse, TemplateResponse
from ...services.config_service import get_config_service

router = APIRouter()


@router.get("/{equipment_id}/deployments")
async def list_device_deployments(
    equipment_id: int = Path(..., description="Equipment ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Deployment history of a device, newest first.

    The deployment currently configured on the device is flagged with
    is_current and summarized in meta.
    """
    history = get_config_service(db).list_device_deployments(equipment_id, caller_id)

    result = []
    current_id = None
    for entry in history:
        item = DeploymentResponse.model_validate(entry["deployment"]).model_dump()
        if entry["is_current"]:
            current_id = item["id"]
        item.update(
            is_current=entry["is_current"],
            template_name=entry["template_name"],
            template_version=entry["template_version"],
            config_type=entry["config_type"],
            config_source_type=entry["config_source_type"],
        )
        result.append(item)

    return build_success_response(result, meta={
        "total": len(result),
        "network_status": "configured" if current_id is not None else "unconfigured",
        "current_deployment_id": current_id,
    })


@router.get("/{equipment_id}/compatible-templates")
async def list_compatible_templates(
    equipment_id: int = Path(..., description="Equipment ID"),
    caller_id: str = Depends(require_caller),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Active templates whose vendor, model and category fit the device.
    """
    templates = get_config_service(db).compatible_templates(equipment_id, caller_id)
    result = [TemplateResponse.model_validate(t).model_dump() for t in templates]
    return build_success_response(result, meta={"total": len(result)})

"""
Network Design Planner - Network Design Service Layer
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Owner-scoped reads and writes of network design documents.
"""

import logging

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundError
from ..models.base import utcnow
from ..models.design import NetworkDesign
from ..schemas.design import DesignCreate, DesignUpdate

logger = logging.getLogger(__name__)


class DesignService:
    """Service layer for network designs."""

    def __init__(self, db: Session):
        self.db = db

    def get_owned_design(self, design_id: int, caller_id: str) -> NetworkDesign:
        """Get a design owned by the caller, or raise 404."""
        design = self.db.query(NetworkDesign).filter(
            NetworkDesign.id == design_id,
            NetworkDesign.user_id == caller_id,
        ).first()
        if not design:
            raise NotFoundError("Design", design_id)
        return design

    def list_designs(self, caller_id: str) -> list[NetworkDesign]:
        """The caller's designs, most recently updated first."""
        return self.db.query(NetworkDesign).filter(
            NetworkDesign.user_id == caller_id
        ).order_by(NetworkDesign.updated_at.desc(), NetworkDesign.id.desc()).all()

    def create_design(self, caller_id: str, request: DesignCreate) -> NetworkDesign:
        design = NetworkDesign(user_id=caller_id)
        design.apply_document(request.model_dump())
        self.db.add(design)
        self.db.commit()
        self.db.refresh(design)

        logger.info(
            f"Design created: {design.design_name}",
            extra={"user": caller_id, "design_id": design.id, "operation": "create_design"}
        )
        return design

    def update_design(self, design_id: int, caller_id: str, request: DesignUpdate) -> NetworkDesign:
        """
        Update a design in place.

        Top-level fields missing from the request are kept; nested
        documents such as requirements are replaced whole.
        """
        design = self.get_owned_design(design_id, caller_id)

        fields = {k: v for k, v in request.model_dump().items() if k in request.model_fields_set}
        design.apply_document(fields)
        design.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(design)

        logger.info(
            f"Design {design.id} updated",
            extra={"user": caller_id, "design_id": design.id, "operation": "update_design"}
        )
        return design


def get_design_service(db: Session) -> DesignService:
    """Factory function for DesignService."""
    return DesignService(db)

"""
Network Design Planner - Network Design Model
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

SQLAlchemy model for the network design document that versions snapshot.
"""

import copy
from typing import Any

from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String, Text

from .base import Base, isoformat, utcnow


class DesignStatus:
    """Design status constants."""

    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ARCHIVED = "archived"

    ALL = (DRAFT, IN_PROGRESS, COMPLETED, ARCHIVED)


class NetworkDesign(Base):
    """
    A user's network design document.

    `requirements` and `existing_network_details` are free-form documents
    validated at the API boundary; they are stored as JSON.
    """

    __tablename__ = "network_designs"

    # Fields a snapshot captures and a restore writes back.
    # id, user_id and timestamps are identity/bookkeeping and never restored.
    CONTENT_FIELDS = (
        "design_name",
        "description",
        "status",
        "is_existing_network",
        "existing_network_details",
        "requirements",
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(128), nullable=False, index=True)
    design_name = Column(String(128), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default=DesignStatus.DRAFT)

    is_existing_network = Column(Boolean, nullable=False, default=False)
    existing_network_details = Column(JSON, nullable=True)
    requirements = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def to_document(self) -> dict[str, Any]:
        """
        Return the design as a JSON-safe document.

        Nested values are deep-copied so the result shares no structure
        with the ORM instance.
        """
        document = {
            "id": self.id,
            "user_id": self.user_id,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }
        for field in self.CONTENT_FIELDS:
            document[field] = copy.deepcopy(getattr(self, field))
        if document["requirements"] is None:
            document["requirements"] = {}
        return document

    def apply_document(self, document: dict[str, Any]) -> None:
        """Overwrite content fields from a document (restore)."""
        for field in self.CONTENT_FIELDS:
            if field in document:
                # Reassign rather than mutate so JSON columns are flagged dirty
                setattr(self, field, copy.deepcopy(document[field]))

    def __repr__(self) -> str:
        return f"<NetworkDesign(id={self.id}, name='{self.design_name}')>"

"""
Network Design Planner - Generated Configuration Model
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

One rendered, persisted instance of a template against a design/equipment
target. Regeneration creates a new row linked to its source through
parent_config_id; existing rows are never re-rendered.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text

from .base import Base, utcnow


class GeneratedConfiguration(Base):
    """Rendered configuration text and the values that produced it."""

    __tablename__ = "generated_configurations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    template_id = Column(
        Integer, ForeignKey("configuration_templates.id"), nullable=False, index=True
    )
    design_id = Column(Integer, ForeignKey("network_designs.id"), nullable=False, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment.id"), nullable=True, index=True)
    config_type = Column(String(16), nullable=True)

    # {variable name: resolved value}
    variable_values = Column(JSON, nullable=False, default=dict)
    configuration = Column(Text, nullable=False)

    generated_by = Column(String(128), nullable=False, index=True)
    generated_at = Column(DateTime(timezone=True), default=utcnow)

    # Applied records are immutable and cannot be deleted
    is_applied = Column(Boolean, nullable=False, default=False)
    applied_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    parent_config_id = Column(
        Integer,
        ForeignKey("generated_configurations.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<GeneratedConfiguration(id={self.id}, template_id={self.template_id}, applied={self.is_applied})>"

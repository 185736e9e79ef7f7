"""
Network Design Planner - Design Version Model
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Immutable, semantically numbered snapshots of a network design.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    UniqueConstraint,
)

from .base import Base, utcnow


class VersionBump:
    """Which segment of MAJOR.MINOR.PATCH a new version increments."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    ALL = (MAJOR, MINOR, PATCH)


class ChangeOperation:
    """Structural diff operations."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"

    ALL = (ADDED, REMOVED, MODIFIED)


class DesignVersion(Base):
    """
    A snapshot of a NetworkDesign document.

    The version string is mirrored into integer major/minor/patch columns so
    "latest" is found by numeric ordering, not string ordering.
    """

    __tablename__ = "design_versions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    design_id = Column(Integer, ForeignKey("network_designs.id"), nullable=False, index=True)

    version = Column(String(32), nullable=False)
    major = Column(Integer, nullable=False)
    minor = Column(Integer, nullable=False)
    patch = Column(Integer, nullable=False)

    snapshot = Column(JSON, nullable=False)
    created_by = Column(String(128), nullable=False)

    # [{path, operation, old_value, new_value, impact, description}]
    changes = Column(JSON, nullable=False, default=list)
    notes = Column(String(500), nullable=True)
    tags = Column(JSON, nullable=False, default=list)

    parent_version_id = Column(
        Integer,
        ForeignKey("design_versions.id", ondelete="SET NULL"),
        nullable=True,
    )

    is_published = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("design_id", "version", name="uq_design_version"),
        Index("ix_design_versions_semver", "design_id", "major", "minor", "patch"),
    )

    @property
    def version_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __repr__(self) -> str:
        return f"<DesignVersion(id={self.id}, design_id={self.design_id}, version='{self.version}')>"

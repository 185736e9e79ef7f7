"""
Network Design Planner - Design Version Service Layer
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Snapshots, semantic numbering, comparison, publication and restore of
network design versions.

Snapshots are deep, JSON-safe copies taken from NetworkDesign.to_document();
restore writes a fresh deep copy back. Neither side ever shares structure
with the other, so editing a live design can never alter history.
"""

import copy
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..models.base import utcnow
from ..models.design import NetworkDesign
from ..models.version import DesignVersion, VersionBump
from ..schemas.common import SEMVER_PATTERN
from ..schemas.version import VersionCreate
from .design_service import DesignService
from .snapshot_diff import diff_snapshots, summarize

logger = logging.getLogger(__name__)

INITIAL_VERSION = (1, 0, 0)

SORT_ORDERS = {
    "version": (DesignVersion.major, DesignVersion.minor, DesignVersion.patch),
    "-version": (DesignVersion.major.desc(), DesignVersion.minor.desc(), DesignVersion.patch.desc()),
    "created_at": (DesignVersion.created_at, DesignVersion.id),
    "-created_at": (DesignVersion.created_at.desc(), DesignVersion.id.desc()),
}


def bump_version(current: tuple[int, int, int] | None, bump: str) -> tuple[int, int, int]:
    """
    Compute the next version.

    With no current version the result is 1.0.0 whatever the bump class.
    """
    if bump not in VersionBump.ALL:
        raise ValidationError(
            f"Unknown version bump '{bump}'",
            details={"field": "version_bump", "allowed": list(VersionBump.ALL)},
        )
    if current is None:
        return INITIAL_VERSION

    major, minor, patch = current
    if bump == VersionBump.MAJOR:
        return (major + 1, 0, 0)
    if bump == VersionBump.MINOR:
        return (major, minor + 1, 0)
    return (major, minor, patch + 1)


def format_version(parts: tuple[int, int, int]) -> str:
    return ".".join(str(p) for p in parts)


class VersionService:
    """Service layer for design versions."""

    def __init__(self, db: Session):
        self.db = db

    def get_owned_design(self, design_id: int, caller_id: str) -> NetworkDesign:
        return DesignService(self.db).get_owned_design(design_id, caller_id)

    def get_latest(self, design_id: int) -> DesignVersion | None:
        """Highest version of a design by numeric (major, minor, patch)."""
        return self.db.query(DesignVersion).filter(
            DesignVersion.design_id == design_id
        ).order_by(*SORT_ORDERS["-version"]).first()

    def get_next_version(self, design_id: int, caller_id: str, bump: str) -> str:
        """Version string the next CreateVersion with this bump would take."""
        self.get_owned_design(design_id, caller_id)
        latest = self.get_latest(design_id)
        return format_version(bump_version(latest.version_tuple if latest else None, bump))

    def create_version(self, design_id: int, caller_id: str, request: VersionCreate) -> DesignVersion:
        """
        Snapshot the live design as a new version.

        When no changes are supplied and a previous version exists, the
        changes are derived by diffing the previous snapshot.

        Raises:
            NotFoundError: design not owned by caller, or unknown parent
            ValidationError: unknown bump class
            ConflictError: another request took the same version number
        """
        design = self.get_owned_design(design_id, caller_id)
        latest = self.get_latest(design.id)
        parts = bump_version(latest.version_tuple if latest else None, request.version_bump)

        parent = latest
        if request.parent_version is not None:
            parent = self.db.query(DesignVersion).filter(
                DesignVersion.id == request.parent_version,
                DesignVersion.design_id == design.id,
            ).first()
            if not parent:
                raise NotFoundError("Version", request.parent_version)

        snapshot = design.to_document()

        if request.changes is not None:
            changes = [c.model_dump() for c in request.changes]
        elif latest is not None:
            changes = [
                {**change, "impact": "medium", "description": None}
                for change in diff_snapshots(latest.snapshot, snapshot)
            ]
        else:
            changes = []

        version = DesignVersion(
            design_id=design.id,
            version=format_version(parts),
            major=parts[0],
            minor=parts[1],
            patch=parts[2],
            snapshot=snapshot,
            created_by=caller_id,
            changes=changes,
            notes=request.notes,
            tags=list(request.tags),
            parent_version_id=parent.id if parent else None,
            is_published=False,
        )
        self.db.add(version)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(
                f"Version {format_version(parts)} of design {design_id} already exists",
                extra={"user": caller_id, "design_id": design_id, "operation": "create_version"}
            )
            raise ConflictError(
                f"Version {format_version(parts)} already exists for this design",
                details={"design_id": design_id, "version": format_version(parts)},
            ) from e
        self.db.refresh(version)

        logger.info(
            f"Design {design_id} version {version.version} created",
            extra={"user": caller_id, "design_id": design_id, "version": version.version,
                   "operation": "create_version"}
        )
        return version

    def list_versions(
        self,
        design_id: int,
        caller_id: str,
        published_only: bool = False,
        sort: str = "-version",
        limit: int | None = None,
    ) -> list[DesignVersion]:
        """List versions of an owned design."""
        self.get_owned_design(design_id, caller_id)

        if sort not in SORT_ORDERS:
            raise ValidationError(
                f"Unknown sort '{sort}'",
                details={"field": "sort", "allowed": list(SORT_ORDERS)},
            )

        query = self.db.query(DesignVersion).filter(DesignVersion.design_id == design_id)
        if published_only:
            query = query.filter(DesignVersion.is_published.is_(True))
        query = query.order_by(*SORT_ORDERS[sort])
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_version(self, version_id: int, caller_id: str) -> DesignVersion:
        """Get a version of a design owned by the caller, or raise 404."""
        version = (
            self.db.query(DesignVersion)
            .join(NetworkDesign, DesignVersion.design_id == NetworkDesign.id)
            .filter(DesignVersion.id == version_id, NetworkDesign.user_id == caller_id)
            .first()
        )
        if not version:
            raise NotFoundError("Version", version_id)
        return version

    def _resolve(self, design_id: int, ref: str) -> DesignVersion | None:
        """
        Resolve a compare parameter within one design.

        MAJOR.MINOR.PATCH matches the version string; digits match the id.
        """
        ref = (ref or "").strip()
        query = self.db.query(DesignVersion).filter(DesignVersion.design_id == design_id)
        if SEMVER_PATTERN.match(ref):
            return query.filter(DesignVersion.version == ref).first()
        if ref.isdigit():
            return query.filter(DesignVersion.id == int(ref)).first()
        return None

    def compare(self, design_id: int, caller_id: str, ref1: str, ref2: str) -> dict[str, Any]:
        """
        Diff two versions of a design, older to newer.

        Each reference resolves to at most one record, so a comparison
        never involves more than two versions.
        """
        self.get_owned_design(design_id, caller_id)

        first = self._resolve(design_id, ref1)
        second = self._resolve(design_id, ref2)
        if first is None or second is None or first.id == second.id:
            raise NotFoundError("Version pair", f"{ref1}, {ref2}")

        older, newer = sorted((first, second), key=lambda v: v.version_tuple)
        changes = diff_snapshots(older.snapshot, newer.snapshot)
        return {
            "version1": older,
            "version2": newer,
            "changes": changes,
            "summary": summarize(changes),
        }

    def publish(self, version_id: int, caller_id: str) -> DesignVersion:
        """Publish a version. Publishing twice keeps the first published_at."""
        version = self.get_version(version_id, caller_id)
        if version.is_published:
            return version

        version.is_published = True
        version.published_at = utcnow()
        self.db.commit()
        self.db.refresh(version)

        logger.info(
            f"Design {version.design_id} version {version.version} published",
            extra={"user": caller_id, "design_id": version.design_id, "version": version.version,
                   "operation": "publish"}
        )
        return version

    def restore(self, version_id: int, caller_id: str) -> NetworkDesign:
        """
        Overwrite the live design with a version's snapshot.

        Identity and ownership fields are never restored and no new
        version is created.
        """
        version = self.get_version(version_id, caller_id)
        design = self.get_owned_design(version.design_id, caller_id)

        design.apply_document(copy.deepcopy(version.snapshot))
        design.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(design)

        logger.info(
            f"Design {design.id} restored to version {version.version}",
            extra={"user": caller_id, "design_id": design.id, "version": version.version,
                   "operation": "restore"}
        )
        return design


def get_version_service(db: Session) -> VersionService:
    """Factory function for VersionService."""
    return VersionService(db)

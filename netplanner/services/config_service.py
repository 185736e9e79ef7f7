"""
Network Design Planner - Configuration Service Layer
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Business logic for configuration templates, device deployments and
generated configurations, extracted from route handlers.

Generated configurations follow a one-way lifecycle:

    generate/regenerate ──► unapplied ──apply──► applied (immutable)
                               │
                            delete

Apply and Delete are conditional writes, so a Delete that races an Apply
either wins outright or fails with ConflictError; it never removes an
applied record.
"""

import logging
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from ..core.state_machine import DeploymentLifecycle
from ..models.base import utcnow
from ..models.equipment import Equipment
from ..models.generated_config import GeneratedConfiguration
from ..models.template import (
    ConfigSourceType,
    ConfigurationTemplate,
    DeploymentStatus,
    TemplateDeployment,
)
from ..schemas.generated_config import GenerateRequest
from ..schemas.template import DeployRequest, TemplateCreate, TemplateUpdate
from .design_service import DesignService
from .template_renderer import (
    find_undeclared_placeholders,
    find_unresolved_placeholders,
    render,
)
from .variable_validation import resolve_values, validate_definitions

logger = logging.getLogger(__name__)


class ConfigService:
    """
    Service layer for configuration templates and their instances.

    Every method takes the caller id forwarded by the identity provider
    and scopes reads and writes to it.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def _visible_templates(self, caller_id: str) -> Query:
        return self.db.query(ConfigurationTemplate).filter(
            or_(
                ConfigurationTemplate.owner_id == caller_id,
                ConfigurationTemplate.is_system_template.is_(True),
            )
        )

    def get_template(self, template_id: int, caller_id: str) -> ConfigurationTemplate:
        """Get a template the caller owns or a system template, or raise 404."""
        template = self._visible_templates(caller_id).filter(
            ConfigurationTemplate.id == template_id
        ).first()
        if not template:
            raise NotFoundError("Template", template_id)
        return template

    def get_owned_template(self, template_id: int, caller_id: str) -> ConfigurationTemplate:
        """Get a template owned by the caller, or raise 404."""
        template = self.db.query(ConfigurationTemplate).filter(
            ConfigurationTemplate.id == template_id,
            ConfigurationTemplate.owner_id == caller_id,
        ).first()
        if not template:
            raise NotFoundError("Template", template_id)
        return template

    def list_templates(
        self,
        caller_id: str,
        equipment_category: str | None = None,
        config_type: str | None = None,
        vendor: str | None = None,
        active: bool | None = None,
        source_type: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[ConfigurationTemplate], int]:
        """List the caller's templates plus system templates."""
        query = self._visible_templates(caller_id)
        if equipment_category:
            query = query.filter(ConfigurationTemplate.equipment_category == equipment_category)
        if config_type:
            query = query.filter(ConfigurationTemplate.config_type == config_type)
        if vendor:
            query = query.filter(func.lower(ConfigurationTemplate.vendor) == vendor.lower())
        if active is not None:
            query = query.filter(ConfigurationTemplate.is_active.is_(active))
        if source_type:
            query = query.filter(ConfigurationTemplate.config_source_type == source_type)

        total = query.count()
        query = query.order_by(
            ConfigurationTemplate.vendor,
            ConfigurationTemplate.model,
            ConfigurationTemplate.id,
        ).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all(), total

    def _check_template(self, fields: dict[str, Any]) -> None:
        """
        Check body/source consistency and placeholder declarations.

        Raises ValidationError on the first failed rule.
        """
        source_type = fields.get("config_source_type")
        body = fields.get("template")
        config_file = fields.get("config_file")

        if source_type == ConfigSourceType.TEMPLATE:
            if config_file:
                raise ValidationError(
                    "Template text and a configuration file are mutually exclusive",
                    details={"field": "config_file"},
                )
            if not body:
                raise ValidationError(
                    "Template-based sources need template text",
                    details={"field": "template"},
                )
        elif source_type == ConfigSourceType.FILE:
            if body:
                raise ValidationError(
                    "Template text and a configuration file are mutually exclusive",
                    details={"field": "template"},
                )
            if not config_file:
                raise ValidationError(
                    "File-based sources need a configuration file",
                    details={"field": "config_file"},
                )

        variables = fields.get("variables") or []
        validate_definitions(variables)

        undeclared = find_undeclared_placeholders(body, [v["name"] for v in variables])
        if undeclared:
            raise ValidationError(
                "Template references undeclared variables",
                details={"undeclared": undeclared},
            )

    def _ensure_name_free(self, caller_id: str, name: str, exclude_id: int | None = None) -> None:
        query = self.db.query(ConfigurationTemplate).filter(
            ConfigurationTemplate.owner_id == caller_id,
            ConfigurationTemplate.name == name,
        )
        if exclude_id is not None:
            query = query.filter(ConfigurationTemplate.id != exclude_id)
        if query.first():
            raise ConflictError(
                f"Template with name '{name}' already exists",
                details={"field": "name"},
            )

    def _commit_template(self, template: ConfigurationTemplate, caller_id: str) -> None:
        """
        Commit a created or updated template.

        Only a lost race on the per-owner name is a conflict; any other
        constraint failure is bad input.
        """
        name = template.name
        template_id = template.id
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            clash = self.db.query(ConfigurationTemplate.id).filter(
                ConfigurationTemplate.owner_id == caller_id,
                ConfigurationTemplate.name == name,
            )
            if template_id is not None:
                clash = clash.filter(ConfigurationTemplate.id != template_id)
            if clash.first():
                raise ConflictError(
                    f"Template with name '{name}' already exists",
                    details={"field": "name"},
                ) from e
            logger.warning(
                f"Template rejected by the store: {type(e.orig).__name__}",
                extra={"user": caller_id, "template_id": template_id, "operation": "commit_template"}
            )
            raise ValidationError(
                "Template violates a storage constraint",
                details={"template_id": template_id},
            ) from e
        self.db.refresh(template)

    def create_template(self, caller_id: str, request: TemplateCreate) -> ConfigurationTemplate:
        """
        Create a new configuration template.

        Validates source exclusivity, variable definitions, declared
        placeholders and per-owner name uniqueness.
        """
        fields = request.model_dump()
        self._check_template(fields)
        self._ensure_name_free(caller_id, request.name)

        template = ConfigurationTemplate(
            owner_id=caller_id,
            last_updated_by=caller_id,
            is_system_template=False,
            **fields,
        )
        self.db.add(template)
        self._commit_template(template, caller_id)

        logger.info(
            f"Template created: {template.name}",
            extra={"user": caller_id, "template_id": template.id, "operation": "create_template"}
        )
        return template

    def update_template(
        self,
        template_id: int,
        caller_id: str,
        request: TemplateUpdate,
    ) -> ConfigurationTemplate:
        """Update a template in place; invariants are re-checked on the merged result."""
        template = self.get_owned_template(template_id, caller_id)
        changes = request.model_dump(exclude_unset=True)

        merged = {
            "config_source_type": template.config_source_type,
            "template": template.template,
            "config_file": template.config_file,
            "variables": template.variables or [],
        }
        merged.update({k: v for k, v in changes.items() if k in merged})
        self._check_template(merged)

        if "name" in changes and changes["name"] != template.name:
            self._ensure_name_free(caller_id, changes["name"], exclude_id=template.id)

        for field, value in changes.items():
            setattr(template, field, value)
        template.last_updated_by = caller_id
        self._commit_template(template, caller_id)

        logger.info(
            f"Template updated: {template.name}",
            extra={"user": caller_id, "template_id": template.id, "operation": "update_template"}
        )
        return template

    def delete_template(self, template_id: int, caller_id: str) -> None:
        """
        Delete a template.

        Templates with any deployment or generated configuration are kept
        so that history keeps its source.
        """
        template = self.get_owned_template(template_id, caller_id)

        deployment_count = self.db.query(TemplateDeployment).filter(
            TemplateDeployment.template_id == template.id
        ).count()
        config_count = self.db.query(GeneratedConfiguration).filter(
            GeneratedConfiguration.template_id == template.id
        ).count()
        if deployment_count or config_count:
            logger.warning(
                f"Refused to delete template {template.id} with dependents",
                extra={"user": caller_id, "template_id": template.id, "operation": "delete_template"}
            )
            raise ConflictError(
                "Cannot delete a template that has deployments or generated configurations",
                details={"deployments": deployment_count, "generated_configurations": config_count},
            )

        self.db.delete(template)
        self.db.commit()
        logger.info(
            f"Template deleted: {template_id}",
            extra={"user": caller_id, "template_id": template_id, "operation": "delete_template"}
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render(
        self,
        template: ConfigurationTemplate,
        overrides: dict[str, Any] | None,
    ) -> tuple[dict[str, Any], str]:
        """Resolve values and render; returns (values, configuration text)."""
        if template.config_source_type != ConfigSourceType.TEMPLATE:
            raise ValidationError(
                "File-based templates cannot be rendered",
                details={"template_id": template.id},
            )

        variables = template.variables or []
        undeclared = find_undeclared_placeholders(template.template, template.variable_names)
        if undeclared:
            raise ValidationError(
                "Template references undeclared variables",
                details={"undeclared": undeclared},
            )

        values = resolve_values(variables, overrides)
        rendered = render(
            template.template or "",
            [{"name": name, "value": value} for name, value in values.items()],
        )

        unresolved = find_unresolved_placeholders(rendered)
        if unresolved:
            raise ValidationError(
                "Rendered configuration still contains placeholders",
                details={"unresolved": unresolved},
            )
        return values, rendered

    # ------------------------------------------------------------------
    # Device deployments
    # ------------------------------------------------------------------

    def _get_equipment(self, equipment_id: int) -> Equipment:
        equipment = self.db.query(Equipment).filter(Equipment.id == equipment_id).first()
        if not equipment:
            raise NotFoundError("Equipment", equipment_id)
        return equipment

    @staticmethod
    def is_compatible(template: ConfigurationTemplate, equipment: Equipment) -> bool:
        """Vendor (case-insensitive), model when named, and category must match."""
        if template.vendor.lower() != (equipment.vendor or "").lower():
            return False
        if template.model and template.model != equipment.model:
            return False
        return template.equipment_category == equipment.category

    def deploy(self, template_id: int, caller_id: str, request: DeployRequest) -> TemplateDeployment:
        """Render a template for a device and record a pending deployment."""
        template = self.get_template(template_id, caller_id)
        equipment = self._get_equipment(request.device_id)

        if not self.is_compatible(template, equipment):
            raise ValidationError(
                "Configuration is not compatible with this device",
                details={
                    "template": {"vendor": template.vendor, "model": template.model,
                                 "equipment_category": template.equipment_category},
                    "device": {"vendor": equipment.vendor, "model": equipment.model,
                               "category": equipment.category},
                },
            )

        values: dict[str, Any] = dict(request.variables)
        rendered = None
        if template.config_source_type == ConfigSourceType.TEMPLATE:
            values, rendered = self._render(template, request.variables)

        deployment = TemplateDeployment(
            template_id=template.id,
            device_id=equipment.id,
            deployed_by=caller_id,
            status=DeploymentStatus.PENDING,
            variables=values,
            rendered_config=rendered,
            notes=request.notes,
        )
        self.db.add(deployment)
        self.db.commit()
        self.db.refresh(deployment)

        logger.info(
            f"Template {template.id} deployed to equipment {equipment.id}",
            extra={"user": caller_id, "template_id": template.id, "operation": "deploy"}
        )
        return deployment

    def list_device_deployments(self, equipment_id: int, caller_id: str) -> list[dict[str, Any]]:
        """Deployment history of a device across visible templates, newest first."""
        self._get_equipment(equipment_id)

        rows = (
            self.db.query(TemplateDeployment, ConfigurationTemplate)
            .join(ConfigurationTemplate, TemplateDeployment.template_id == ConfigurationTemplate.id)
            .filter(
                TemplateDeployment.device_id == equipment_id,
                or_(
                    ConfigurationTemplate.owner_id == caller_id,
                    ConfigurationTemplate.is_system_template.is_(True),
                ),
            )
            .order_by(TemplateDeployment.deployed_at.desc(), TemplateDeployment.id.desc())
            .all()
        )
        current = self.current_deployment([deployment for deployment, _ in rows])
        return [
            {
                "deployment": deployment,
                "is_current": current is not None and deployment.id == current.id,
                "template_name": template.name,
                "template_version": template.version,
                "config_type": template.config_type,
                "config_source_type": template.config_source_type,
            }
            for deployment, template in rows
        ]

    @staticmethod
    def current_deployment(deployments: list[TemplateDeployment]) -> TemplateDeployment | None:
        """
        The deployment currently configured on a device, if any.

        The latest status report that is active or rolled-back decides:
        an active one is the current configuration, a rollback leaves the
        device unconfigured.
        """
        settled = [
            d for d in deployments
            if d.status in (DeploymentStatus.ACTIVE, DeploymentStatus.ROLLED_BACK)
        ]
        if not settled:
            return None
        latest = max(settled, key=lambda d: (d.updated_at or d.deployed_at, d.id))
        return latest if latest.status == DeploymentStatus.ACTIVE else None

    def compatible_templates(self, equipment_id: int, caller_id: str) -> list[ConfigurationTemplate]:
        """Active visible templates that can be deployed to the device."""
        equipment = self._get_equipment(equipment_id)
        candidates = self._visible_templates(caller_id).filter(
            ConfigurationTemplate.is_active.is_(True),
            ConfigurationTemplate.equipment_category == equipment.category,
            func.lower(ConfigurationTemplate.vendor) == (equipment.vendor or "").lower(),
        ).order_by(ConfigurationTemplate.vendor, ConfigurationTemplate.model, ConfigurationTemplate.id)
        return [t for t in candidates.all() if self.is_compatible(t, equipment)]

    def update_deployment_status(
        self,
        template_id: int,
        deployment_id: int,
        caller_id: str,
        status: str,
        notes: str | None = None,
    ) -> TemplateDeployment:
        """
        Record an operator-reported deployment status.

        Any status may follow any other. Notes are appended on a new line.
        Moving into "active" stamps activated_at.
        """
        template = self.get_template(template_id, caller_id)
        deployment = self.db.query(TemplateDeployment).filter(
            TemplateDeployment.id == deployment_id,
            TemplateDeployment.template_id == template.id,
        ).first()
        if not deployment:
            raise NotFoundError("Deployment", deployment_id)

        def stamp_activation(_deployment_id: int | None, _old: str, new: str) -> None:
            if new == DeploymentStatus.ACTIVE:
                deployment.activated_at = utcnow()

        lifecycle = DeploymentLifecycle(
            deployment.id,
            initial_state=deployment.status,
            on_state_change=stamp_activation,
        )
        deployment.status = lifecycle.set_status(status)

        if notes:
            deployment.notes = f"{deployment.notes}\n{notes}" if deployment.notes else notes
        deployment.updated_at = utcnow()

        self.db.commit()
        self.db.refresh(deployment)
        return deployment

    # ------------------------------------------------------------------
    # Generated configurations
    # ------------------------------------------------------------------

    def _get_config_or_404(self, config_id: int) -> GeneratedConfiguration:
        record = self.db.query(GeneratedConfiguration).filter(
            GeneratedConfiguration.id == config_id
        ).populate_existing().first()
        if not record:
            raise NotFoundError("Generated configuration", config_id)
        return record

    def get_config(self, config_id: int, caller_id: str) -> GeneratedConfiguration:
        """Get a generated configuration owned by the caller."""
        record = self._get_config_or_404(config_id)
        if record.generated_by != caller_id:
            raise UnauthorizedError("Generated configuration", config_id)
        return record

    def list_configs(
        self,
        caller_id: str,
        design_id: int | None = None,
        equipment_id: int | None = None,
        template_id: int | None = None,
        applied: bool | None = None,
        config_type: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[GeneratedConfiguration], int]:
        """List the caller's generated configurations, newest first."""
        query = self.db.query(GeneratedConfiguration).filter(
            GeneratedConfiguration.generated_by == caller_id
        )
        if design_id is not None:
            query = query.filter(GeneratedConfiguration.design_id == design_id)
        if equipment_id is not None:
            query = query.filter(GeneratedConfiguration.equipment_id == equipment_id)
        if template_id is not None:
            query = query.filter(GeneratedConfiguration.template_id == template_id)
        if applied is not None:
            query = query.filter(GeneratedConfiguration.is_applied.is_(applied))
        if config_type:
            query = query.filter(GeneratedConfiguration.config_type == config_type)

        total = query.count()
        query = query.order_by(GeneratedConfiguration.id.desc()).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all(), total

    def generate(self, template_id: int, caller_id: str, request: GenerateRequest) -> GeneratedConfiguration:
        """
        Render a template for a design/equipment target and persist it.

        Values resolve as override, then default, then empty; a required
        variable with neither raises ValidationError.
        """
        template = self.get_template(template_id, caller_id)

        design = DesignService(self.db).get_owned_design(request.design_id, caller_id)
        equipment = self._get_equipment(request.equipment_id)

        values, configuration = self._render(template, request.variable_values)

        record = GeneratedConfiguration(
            template_id=template.id,
            design_id=design.id,
            equipment_id=equipment.id,
            config_type=request.config_type,
            variable_values=values,
            configuration=configuration,
            generated_by=caller_id,
            is_applied=False,
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)

        logger.info(
            f"Configuration generated from template {template.id}",
            extra={"user": caller_id, "template_id": template.id, "config_id": record.id,
                   "design_id": design.id, "operation": "generate"}
        )
        return record

    def regenerate(
        self,
        config_id: int,
        caller_id: str,
        overrides: dict[str, Any] | None = None,
    ) -> GeneratedConfiguration:
        """
        Re-render a generated configuration with new overrides.

        Creates a new record linked to the source; the source is untouched.
        """
        source = self.get_config(config_id, caller_id)

        template = self.db.query(ConfigurationTemplate).filter(
            ConfigurationTemplate.id == source.template_id
        ).first()
        if not template:
            raise NotFoundError("Template", source.template_id)

        # Values for variables the template no longer declares are dropped
        declared = set(template.variable_names)
        merged = {k: v for k, v in (source.variable_values or {}).items() if k in declared}
        merged.update(overrides or {})

        values, configuration = self._render(template, merged)

        record = GeneratedConfiguration(
            template_id=template.id,
            design_id=source.design_id,
            equipment_id=source.equipment_id,
            config_type=source.config_type,
            variable_values=values,
            configuration=configuration,
            generated_by=caller_id,
            is_applied=False,
            parent_config_id=source.id,
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)

        logger.info(
            f"Configuration {source.id} regenerated as {record.id}",
            extra={"user": caller_id, "template_id": template.id, "config_id": record.id,
                   "operation": "regenerate"}
        )
        return record

    def apply(self, config_id: int, caller_id: str, notes: str | None = None) -> GeneratedConfiguration:
        """
        Mark a generated configuration as applied.

        Idempotent: applied_at is stamped only by the first call. Notes,
        when given, are stored on every call.
        """
        values: dict[str, Any] = {"is_applied": True, "applied_at": utcnow()}
        if notes is not None:
            values["notes"] = notes

        updated = self.db.query(GeneratedConfiguration).filter(
            GeneratedConfiguration.id == config_id,
            GeneratedConfiguration.generated_by == caller_id,
            GeneratedConfiguration.is_applied.is_(False),
        ).update(values, synchronize_session=False)

        if updated:
            self.db.commit()
            logger.info(
                f"Configuration {config_id} applied",
                extra={"user": caller_id, "config_id": config_id, "operation": "apply"}
            )
            return self._get_config_or_404(config_id)

        record = self._get_config_or_404(config_id)
        if record.generated_by != caller_id:
            raise NotFoundError("Generated configuration", config_id)
        if notes is not None:
            record.notes = notes
            self.db.commit()
            self.db.refresh(record)
        return record

    def delete_config(self, config_id: int, caller_id: str) -> None:
        """
        Delete an unapplied generated configuration.

        The delete only matches unapplied records owned by the caller. When
        nothing matched, the record is re-read to report why.
        """
        deleted = self.db.query(GeneratedConfiguration).filter(
            GeneratedConfiguration.id == config_id,
            GeneratedConfiguration.generated_by == caller_id,
            GeneratedConfiguration.is_applied.is_(False),
        ).delete(synchronize_session=False)

        if deleted:
            self.db.commit()
            logger.info(
                f"Configuration {config_id} deleted",
                extra={"user": caller_id, "config_id": config_id, "operation": "delete_config"}
            )
            return

        self.db.rollback()
        record = self.get_config(config_id, caller_id)
        logger.warning(
            f"Refused to delete applied configuration {record.id}",
            extra={"user": caller_id, "config_id": record.id, "operation": "delete_config"}
        )
        raise ConflictError(
            "Applied configurations cannot be deleted",
            details={"id": record.id, "is_applied": record.is_applied},
        )


def get_config_service(db: Session) -> ConfigService:
    """Factory function for ConfigService."""
    return ConfigService(db)

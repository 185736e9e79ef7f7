"""Initial planner schema

Revision ID: 0001
Revises: None
Create Date: 2026-01-05

Designs, equipment, configuration templates, template deployments,
generated configurations and design versions.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "network_designs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("design_name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="draft"),
        sa.Column("is_existing_network", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("existing_network_details", sa.JSON(), nullable=True),
        sa.Column("requirements", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_network_designs_user_id", "network_designs", ["user_id"])

    op.create_table(
        "equipment",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("vendor", sa.String(64), nullable=False),
        sa.Column("model", sa.String(64), nullable=False),
        sa.Column("category", sa.String(16), nullable=False),
        sa.Column("management_ip", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "configuration_templates",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.String(128), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("vendor", sa.String(64), nullable=False),
        sa.Column("model", sa.String(64), nullable=True),
        sa.Column("equipment_category", sa.String(16), nullable=False),
        sa.Column("config_type", sa.String(16), nullable=False),
        sa.Column("version", sa.String(32), nullable=False, server_default="1.0.0"),
        sa.Column("config_source_type", sa.String(16), nullable=False, server_default="template"),
        sa.Column("template", sa.Text(), nullable=True),
        sa.Column("config_file", sa.JSON(), nullable=True),
        sa.Column("variables", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_system_template", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_updated_by", sa.String(128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("owner_id", "name", name="uq_template_owner_name"),
    )
    op.create_index("ix_configuration_templates_owner_id", "configuration_templates", ["owner_id"])
    op.create_index(
        "ix_configuration_templates_vendor_model", "configuration_templates", ["vendor", "model"]
    )

    op.create_table(
        "template_deployments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("template_id", sa.Integer(), sa.ForeignKey("configuration_templates.id"), nullable=False),
        sa.Column("device_id", sa.Integer(), sa.ForeignKey("equipment.id"), nullable=False),
        sa.Column("deployed_by", sa.String(128), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("variables", sa.JSON(), nullable=False),
        sa.Column("rendered_config", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("deployed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("activated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_template_deployments_template_id", "template_deployments", ["template_id"])
    op.create_index("ix_template_deployments_device_id", "template_deployments", ["device_id"])

    op.create_table(
        "generated_configurations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("template_id", sa.Integer(), sa.ForeignKey("configuration_templates.id"), nullable=False),
        sa.Column("design_id", sa.Integer(), sa.ForeignKey("network_designs.id"), nullable=False),
        sa.Column("equipment_id", sa.Integer(), sa.ForeignKey("equipment.id"), nullable=True),
        sa.Column("config_type", sa.String(16), nullable=True),
        sa.Column("variable_values", sa.JSON(), nullable=False),
        sa.Column("configuration", sa.Text(), nullable=False),
        sa.Column("generated_by", sa.String(128), nullable=False),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_applied", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("applied_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "parent_config_id",
            sa.Integer(),
            sa.ForeignKey("generated_configurations.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_generated_configurations_template_id", "generated_configurations", ["template_id"])
    op.create_index("ix_generated_configurations_design_id", "generated_configurations", ["design_id"])
    op.create_index("ix_generated_configurations_equipment_id", "generated_configurations", ["equipment_id"])
    op.create_index("ix_generated_configurations_generated_by", "generated_configurations", ["generated_by"])

    op.create_table(
        "design_versions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("design_id", sa.Integer(), sa.ForeignKey("network_designs.id"), nullable=False),
        sa.Column("version", sa.String(32), nullable=False),
        sa.Column("major", sa.Integer(), nullable=False),
        sa.Column("minor", sa.Integer(), nullable=False),
        sa.Column("patch", sa.Integer(), nullable=False),
        sa.Column("snapshot", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.String(128), nullable=False),
        sa.Column("changes", sa.JSON(), nullable=False),
        sa.Column("notes", sa.String(500), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column(
            "parent_version_id",
            sa.Integer(),
            sa.ForeignKey("design_versions.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("design_id", "version", name="uq_design_version"),
    )
    op.create_index("ix_design_versions_design_id", "design_versions", ["design_id"])
    op.create_index(
        "ix_design_versions_semver", "design_versions", ["design_id", "major", "minor", "patch"]
    )


def downgrade() -> None:
    op.drop_table("design_versions")
    op.drop_table("generated_configurations")
    op.drop_table("template_deployments")
    op.drop_table("configuration_templates")
    op.drop_table("equipment")
    op.drop_table("network_designs")

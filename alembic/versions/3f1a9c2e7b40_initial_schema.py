"""initial_schema

Revision ID: 3f1a9c2e7b40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "3f1a9c2e7b40"
down_revision = None
branch_labels = None
depends_on = None

# Enum types store member names, matching SQLAlchemy's default Enum mapping
site_status = sa.Enum("ACTIVE", "ON_HOLD", "KILLED", name="sitestatus")
checklist_status = sa.Enum("NOT_STARTED", "IN_PROGRESS", "COMPLETE", "BLOCKED", name="checkliststatus")
document_category = sa.Enum(
    "LEGAL", "GAS", "ENVIRO", "POLITICAL", "ENGINEERING", "FIBER", "OTHER",
    name="documentcategory",
)
lead_status = sa.Enum("NEW", "REVIEWING", "QUALIFIED", "PASSED", "CONVERTED", name="leadstatus")
lead_relationship = sa.Enum("LANDOWNER", "BROKER", "DEVELOPER", "OTHER", name="leadrelationship")


def _uuid() -> postgresql.UUID:
    return postgresql.UUID(as_uuid=True)


def _crud_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("is_deleted", sa.Boolean, server_default="false", nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "sites",
        sa.Column("id", _uuid(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(50), nullable=True),
        sa.Column("county", sa.String(100), nullable=True),
        sa.Column("acreage", sa.Float, nullable=True),
        sa.Column("asking_price", sa.Float, nullable=True),
        sa.Column("stage", sa.Integer, server_default="1", nullable=False),
        sa.Column("status", site_status, server_default="ACTIVE", nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("inputs", postgresql.JSONB, server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column("actuals", postgresql.JSONB, server_default=sa.text("'{}'::jsonb"), nullable=False),
        *_crud_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sites_stage_updated", "sites", ["stage", "updated_at"])

    op.create_table(
        "site_stage_transitions",
        sa.Column("id", _uuid(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("site_id", _uuid(), nullable=False),
        sa.Column("from_stage", sa.Integer, nullable=True),
        sa.Column("to_stage", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["site_id"], ["sites.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_site_stage_transitions_site", "site_stage_transitions", ["site_id", "created_at"]
    )

    op.create_table(
        "checklist_items",
        sa.Column("id", _uuid(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("site_id", _uuid(), nullable=False),
        sa.Column("stage", sa.Integer, nullable=False),
        sa.Column("item_key", sa.String(100), nullable=False),
        sa.Column("status", checklist_status, server_default="NOT_STARTED", nullable=False),
        sa.Column("status_date", sa.Date, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_crud_columns(),
        sa.ForeignKeyConstraint(["site_id"], ["sites.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("site_id", "stage", "item_key", name="uq_checklist_site_stage_item"),
    )
    op.create_index("ix_checklist_items_site_id", "checklist_items", ["site_id"])

    op.create_table(
        "site_activities",
        sa.Column("id", _uuid(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("site_id", _uuid(), nullable=False),
        sa.Column("activity_date", sa.Date, nullable=False),
        sa.Column("action", sa.String(500), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("cost", sa.Float, server_default="0", nullable=False),
        sa.Column("stage", sa.Integer, server_default="1", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["site_id"], ["sites.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_site_activities_site_date", "site_activities", ["site_id", "activity_date"]
    )

    op.create_table(
        "site_documents",
        sa.Column("id", _uuid(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("site_id", _uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("url", sa.String(2000), nullable=False),
        sa.Column("category", document_category, server_default="OTHER", nullable=False),
        sa.Column("date_added", sa.Date, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["site_id"], ["sites.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_site_documents_site_id", "site_documents", ["site_id"])

    op.create_table(
        "leads",
        sa.Column("id", _uuid(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(50), nullable=True),
        sa.Column("county", sa.String(100), nullable=True),
        sa.Column("acreage", sa.Float, nullable=True),
        sa.Column("asking_price", sa.Float, nullable=True),
        sa.Column("relationship", lead_relationship, nullable=True),
        sa.Column("current_use", sa.String(100), nullable=True),
        sa.Column("source", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("status", lead_status, server_default="NEW", nullable=False),
        sa.Column("score", sa.Integer, server_default="0", nullable=False),
        sa.Column("converted_site_id", _uuid(), nullable=True),
        *_crud_columns(),
        sa.ForeignKeyConstraint(["converted_site_id"], ["sites.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "fund_settings",
        sa.Column("id", _uuid(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("fund_size", sa.Float, nullable=False),
        sa.Column("pref_return", sa.Float, nullable=False),
        sa.Column("lp_split", sa.Float, nullable=False),
        sa.Column("gp_split", sa.Float, nullable=False),
        sa.Column("management_fee", sa.Float, nullable=False),
        sa.Column("commitment_fee_per_m", sa.Float, server_default="0", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "pipeline_stages",
        sa.Column("id", _uuid(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("stage", sa.Integer, nullable=False),
        sa.Column("label", sa.String(100), nullable=False),
        *_crud_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("stage"),
    )


def downgrade() -> None:
    op.drop_table("pipeline_stages")
    op.drop_table("fund_settings")
    op.drop_table("leads")
    op.drop_index("ix_site_documents_site_id", table_name="site_documents")
    op.drop_table("site_documents")
    op.drop_index("ix_site_activities_site_date", table_name="site_activities")
    op.drop_table("site_activities")
    op.drop_index("ix_checklist_items_site_id", table_name="checklist_items")
    op.drop_table("checklist_items")
    op.drop_index("ix_site_stage_transitions_site", table_name="site_stage_transitions")
    op.drop_table("site_stage_transitions")
    op.drop_index("ix_sites_stage_updated", table_name="sites")
    op.drop_table("sites")

    bind = op.get_bind()
    for enum_type in (lead_relationship, lead_status, document_category, checklist_status, site_status):
        enum_type.drop(bind, checkfirst=True)

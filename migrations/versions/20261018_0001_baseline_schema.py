"""baseline studio pipeline schema

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _tenant_column() -> sa.Column:
    return sa.Column("tenant_id", sa.Integer(), sa.ForeignKey("tenants.id", ondelete="RESTRICT"), nullable=False)


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("tenant_key", sa.String(length=120), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("markup", sa.Numeric(6, 4), nullable=True),
        sa.Column("sales_commission", sa.Numeric(6, 4), nullable=True),
        *_audit_columns(),
        sa.UniqueConstraint("tenant_key", name="uq_tenants_tenant_key"),
    )

    op.create_table(
        "pipeline_stages",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("slug", sa.String(length=60), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.UniqueConstraint("tenant_id", "slug", name="uq_pipeline_stages_tenant_slug"),
    )
    op.create_index("ix_pipeline_stages_tenant_id", "pipeline_stages", ["tenant_id"])
    op.create_index("idx_pipeline_stages_tenant_active", "pipeline_stages", ["tenant_id", "is_active"])

    op.create_table(
        "commercial_conditions",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("discount_percentage", sa.Numeric(5, 2), nullable=True),
        sa.Column("advance_type", sa.String(length=20), nullable=False),
        sa.Column("advance_percentage", sa.Numeric(5, 2), nullable=True),
        sa.Column("advance_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        *_audit_columns(),
    )
    op.create_index("ix_commercial_conditions_tenant_id", "commercial_conditions", ["tenant_id"])

    op.create_table(
        "promises",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "pipeline_stage_id",
            sa.Integer(),
            sa.ForeignKey("pipeline_stages.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_audit_columns(),
    )
    op.create_index("ix_promises_tenant_id", "promises", ["tenant_id"])
    op.create_index("idx_promises_tenant_stage", "promises", ["tenant_id", "pipeline_stage_id"])

    op.create_table(
        "quotes",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("promise_id", sa.Integer(), sa.ForeignKey("promises.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=40), nullable=False),
        sa.Column("selected_by_prospect", sa.Boolean(), nullable=True),
        sa.Column("archived", sa.Boolean(), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("event_duration_hours", sa.Numeric(6, 2), nullable=True),
        sa.Column(
            "commercial_condition_id",
            sa.Integer(),
            sa.ForeignKey("commercial_conditions.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("negotiation_original_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("negotiation_custom_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("negotiation_notes", sa.Text(), nullable=True),
        sa.Column("negotiated_at", sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
    )
    op.create_index("ix_quotes_tenant_id", "quotes", ["tenant_id"])
    op.create_index("idx_quotes_tenant_promise", "quotes", ["tenant_id", "promise_id"])
    op.create_index("idx_quotes_tenant_status", "quotes", ["tenant_id", "status"])

    op.create_table(
        "quote_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("quote_id", sa.Integer(), sa.ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("expense", sa.Numeric(12, 2), nullable=True),
        sa.Column("billing_type", sa.String(length=20), nullable=False),
        sa.Column("is_courtesy", sa.Boolean(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        *_audit_columns(),
    )
    op.create_index("ix_quote_items_tenant_id", "quote_items", ["tenant_id"])
    op.create_index("idx_quote_items_tenant_quote", "quote_items", ["tenant_id", "quote_id"])

    op.create_table(
        "promise_status_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("promise_id", sa.Integer(), sa.ForeignKey("promises.id", ondelete="CASCADE"), nullable=False),
        sa.Column("from_stage_id", sa.Integer(), nullable=True),
        sa.Column("from_stage_slug", sa.String(length=60), nullable=True),
        sa.Column("to_stage_id", sa.Integer(), nullable=False),
        sa.Column("to_stage_slug", sa.String(length=60), nullable=False),
        sa.Column("actor_id", sa.Integer(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_promise_status_history_tenant_id", "promise_status_history", ["tenant_id"])
    op.create_index(
        "idx_promise_status_history_tenant_promise",
        "promise_status_history",
        ["tenant_id", "promise_id"],
    )

    op.create_table(
        "promise_short_urls",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("promise_id", sa.Integer(), sa.ForeignKey("promises.id", ondelete="CASCADE"), nullable=False),
        sa.Column("short_code", sa.String(length=32), nullable=False),
        sa.Column("original_url", sa.String(length=512), nullable=False),
        *_audit_columns(),
        sa.UniqueConstraint("short_code", name="uq_promise_short_urls_short_code"),
    )
    op.create_index("ix_promise_short_urls_tenant_id", "promise_short_urls", ["tenant_id"])
    op.create_index("idx_promise_short_urls_tenant_promise", "promise_short_urls", ["tenant_id", "promise_id"])


def downgrade() -> None:
    op.drop_table("promise_short_urls")
    op.drop_table("promise_status_history")
    op.drop_table("quote_items")
    op.drop_table("quotes")
    op.drop_table("promises")
    op.drop_table("commercial_conditions")
    op.drop_table("pipeline_stages")
    op.drop_table("tenants")

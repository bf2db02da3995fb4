"""Initial schema for costs and materialized monthly reports"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "20250101_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "costs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("amount > 0", name="ck_costs_amount_positive"),
    )
    op.create_index("ix_costs_owner_id", "costs", ["owner_id"])
    op.create_index("ix_costs_occurred_at", "costs", ["occurred_at"])
    op.create_index("ix_costs_owner_occurred", "costs", ["owner_id", "occurred_at"])

    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column(
            "categories",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("owner_id", "year", "month", name="uq_reports_owner_year_month"),
        sa.CheckConstraint("month BETWEEN 1 AND 12", name="ck_reports_month_range"),
    )


def downgrade() -> None:
    op.drop_table("reports")
    op.drop_index("ix_costs_owner_occurred", table_name="costs")
    op.drop_index("ix_costs_occurred_at", table_name="costs")
    op.drop_index("ix_costs_owner_id", table_name="costs")
    op.drop_table("costs")

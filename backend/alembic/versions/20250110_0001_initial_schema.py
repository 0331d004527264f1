"""Initial schema for the finance record store and report templates."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20250110_0001"
down_revision = None
branch_labels = None
depends_on = None


IDENTIFIER = sa.String(length=64)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "platforms",
        sa.Column("platform_id", IDENTIFIER, primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("color", sa.String(length=20), nullable=True),
        _created_at(),
    )

    op.create_table(
        "clients",
        sa.Column("client_id", IDENTIFIER, primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="active"),
        sa.Column("email", sa.String(length=200), nullable=True),
        sa.Column("company", sa.String(length=200), nullable=True),
        sa.Column("total_earnings", sa.Numeric(12, 2), nullable=True),
        _created_at(),
    )

    op.create_table(
        "earnings",
        sa.Column("earning_id", IDENTIFIER, primary_key=True),
        sa.Column("earned_on", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("platform_id", IDENTIFIER, nullable=True),
        sa.Column("client_id", IDENTIFIER, nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("hours", sa.Numeric(8, 2), nullable=True),
        _created_at(),
    )
    op.create_index("earnings_earned_on_idx", "earnings", ["earned_on"])
    op.create_index("earnings_platform_idx", "earnings", ["platform_id"])
    op.create_index("earnings_client_idx", "earnings", ["client_id"])

    op.create_table(
        "expenses",
        sa.Column("expense_id", IDENTIFIER, primary_key=True),
        sa.Column("spent_on", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("expenses_spent_on_idx", "expenses", ["spent_on"])
    op.create_index("expenses_category_idx", "expenses", ["category"])

    op.create_table(
        "time_entries",
        sa.Column("time_entry_id", IDENTIFIER, primary_key=True),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=True),
        sa.Column("client_id", IDENTIFIER, nullable=True),
        sa.Column("project_name", sa.String(length=200), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_billable", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        sa.CheckConstraint(
            "duration_seconds >= 0", name="ck_time_entries_duration_non_negative"
        ),
    )
    op.create_index("time_entries_start_time_idx", "time_entries", ["start_time"])

    op.create_table(
        "report_templates",
        sa.Column("template_id", IDENTIFIER, primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("report_type", sa.String(length=20), nullable=False),
        sa.Column("date_range", sa.String(length=20), nullable=False),
        sa.Column("custom_start_date", sa.Date(), nullable=True),
        sa.Column("custom_end_date", sa.Date(), nullable=True),
        sa.Column("metrics", sa.JSON(), nullable=False),
        sa.Column("group_by", sa.String(length=20), nullable=False),
        sa.Column("chart_type", sa.String(length=20), nullable=False),
        sa.Column("filters", sa.JSON(), nullable=False),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )


def downgrade() -> None:
    op.drop_table("report_templates")
    op.drop_index("time_entries_start_time_idx", table_name="time_entries")
    op.drop_table("time_entries")
    op.drop_index("expenses_category_idx", table_name="expenses")
    op.drop_index("expenses_spent_on_idx", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("earnings_client_idx", table_name="earnings")
    op.drop_index("earnings_platform_idx", table_name="earnings")
    op.drop_index("earnings_earned_on_idx", table_name="earnings")
    op.drop_table("earnings")
    op.drop_table("clients")
    op.drop_table("platforms")

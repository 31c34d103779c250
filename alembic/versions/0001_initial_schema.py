"""Initial schema: reports and candidates

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("company", sa.String(length=255), nullable=False),
        sa.Column("industry", sa.String(length=255), nullable=False, server_default="Unknown"),
        sa.Column("region", sa.String(length=10), nullable=False, server_default="GLOBAL"),
        sa.Column("country", sa.String(length=255), nullable=False, server_default="Global"),
        sa.Column("workforce", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("jobs_lost", sa.Integer(), nullable=False),
        sa.Column("loss_type", sa.String(length=20), nullable=False, server_default="NEW"),
        sa.Column("ai_attribution", sa.String(length=20), nullable=False, server_default="BLAMED"),
        sa.Column("source_label", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("source_url", sa.Text(), nullable=False, server_default=""),
        sa.Column("stock_delta_pct", sa.Numeric(8, 2), nullable=True),
        sa.Column("estimate", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("include", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_reports_include", "reports", ["include"], unique=False)

    op.create_table(
        "candidates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("external_id", sa.String(length=255), nullable=False, unique=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False, server_default=""),
        sa.Column("source_name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("source_url", sa.Text(), nullable=False, server_default=""),
        sa.Column("published_at", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
        sa.Column(
            "report_id",
            sa.Integer(),
            sa.ForeignKey("reports.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_candidates_status", "candidates", ["status"], unique=False)
    op.create_index("ix_candidates_report_id", "candidates", ["report_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_candidates_report_id", table_name="candidates")
    op.drop_index("ix_candidates_status", table_name="candidates")
    op.drop_table("candidates")
    op.drop_index("ix_reports_include", table_name="reports")
    op.drop_table("reports")

"""create companies and audit_events tables

Revision ID: a7c3e9d1f2b4
Revises:
Create Date: 2026-10-18 09:12:41.207315

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a7c3e9d1f2b4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create companies and audit_events tables."""
    # Check if tables already exist (idempotent)
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    existing_tables = set(inspector.get_table_names())

    if "companies" not in existing_tables:
        op.create_table(
            "companies",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("audit_id", sa.String(128), nullable=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("email", sa.String(320), nullable=False, server_default=""),
            sa.Column("discharge_type", sa.String(64), nullable=False),
            sa.Column("is_low_volume", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("status", sa.String(32), nullable=False, server_default="NO_DOCS"),
            sa.Column("documents", sa.JSON(), nullable=False),
            sa.Column("audit_opening_date", sa.DateTime(), nullable=False),
            sa.Column("deadline_date", sa.DateTime(), nullable=True),
            sa.Column("audit_closing_date", sa.DateTime(), nullable=True),
            sa.Column("last_updated", sa.DateTime(), nullable=False),
        )
        op.create_index("idx_companies_name", "companies", ["name"])
        op.create_index("idx_companies_status", "companies", ["status"])
        op.create_index("idx_companies_last_updated", "companies", ["last_updated"])

    if "audit_events" not in existing_tables:
        op.create_table(
            "audit_events",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("request_id", sa.String(64), nullable=True),
            sa.Column("action", sa.String(128), nullable=False),
            sa.Column("entity_type", sa.String(128), nullable=True),
            sa.Column("entity_id", sa.String(128), nullable=True),
            sa.Column("reason", sa.String(512), nullable=True),
            sa.Column("metadata_json", sa.Text(), nullable=True),
        )


def downgrade() -> None:
    """Drop tables in reverse order."""
    op.drop_table("audit_events")
    op.drop_index("idx_companies_last_updated", table_name="companies")
    op.drop_index("idx_companies_status", table_name="companies")
    op.drop_index("idx_companies_name", table_name="companies")
    op.drop_table("companies")

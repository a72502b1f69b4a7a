"""create rate_files and rate_entries tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "rate_files",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("filename", sa.String(length=255), nullable=False),
        sa.Column("upload_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, comment="pending → processed | error"),
        sa.Column("error_details", sa.Text(), nullable=True, comment="JSON-encoded list of validation messages"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_rate_files_status", "rate_files", ["status"], unique=False)
    op.create_index("ix_rate_files_upload_date", "rate_files", ["upload_date"], unique=False)

    op.create_table(
        "rate_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("file_id", sa.Integer(), nullable=False),
        sa.Column("origin", sa.String(length=255), nullable=False),
        sa.Column("destination", sa.String(length=255), nullable=False),
        sa.Column("weight", sa.String(length=64), nullable=False),
        sa.Column("service_type", sa.String(length=128), nullable=False),
        sa.Column("rate", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("effective_date", sa.Date(), nullable=False),
        sa.Column("expiry_date", sa.Date(), nullable=False),
        sa.ForeignKeyConstraint(["file_id"], ["rate_files.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_rate_entries_file_id", "rate_entries", ["file_id"], unique=False)
    op.create_index("ix_rate_entries_effective_date", "rate_entries", ["effective_date"], unique=False)
    op.create_index("ix_rate_entries_lane", "rate_entries", ["origin", "destination"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_rate_entries_lane", table_name="rate_entries")
    op.drop_index("ix_rate_entries_effective_date", table_name="rate_entries")
    op.drop_index("ix_rate_entries_file_id", table_name="rate_entries")
    op.drop_table("rate_entries")
    op.drop_index("ix_rate_files_upload_date", table_name="rate_files")
    op.drop_index("ix_rate_files_status", table_name="rate_files")
    op.drop_table("rate_files")

"""Create batch store tables.

Revision ID: 0001_batch_store
Revises:
Create Date: 2026-10-19 09:00:00

"""

from __future__ import annotations

from typing import TYPE_CHECKING

import sqlalchemy as sa
from alembic import op

if TYPE_CHECKING:
    from collections.abc import Sequence

revision: str = "0001_batch_store"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "batch_row",
        sa.Column("record_id", sa.String(length=36), nullable=False),
        sa.Column("file_id", sa.String(length=36), nullable=False),
        sa.Column("config_id", sa.String(length=255), nullable=False),
        sa.Column("config_name", sa.String(length=255), nullable=False),
        sa.Column("source_name", sa.String(length=255), nullable=False),
        sa.Column("business_date", sa.Date(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("upload_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("file_name", sa.String(length=1024), nullable=False),
        sa.Column("data", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("record_id", name="pk_batch_row"),
    )
    op.create_index(
        "ix_batch_row_lookup",
        "batch_row",
        ["config_id", "source_name", "business_date"],
    )
    op.create_table(
        "upload_metadata",
        sa.Column("file_id", sa.String(length=36), nullable=False),
        sa.Column("config_id", sa.String(length=255), nullable=False),
        sa.Column("config_name", sa.String(length=255), nullable=False),
        sa.Column("source_name", sa.String(length=255), nullable=False),
        sa.Column("file_name", sa.String(length=1024), nullable=False),
        sa.Column("business_date", sa.Date(), nullable=False),
        sa.Column("upload_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("record_count", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("file_id", name="pk_upload_metadata"),
    )
    op.create_index(
        "ix_upload_metadata_lookup",
        "upload_metadata",
        ["config_id", "source_name", "business_date"],
    )


def downgrade() -> None:
    op.drop_index("ix_upload_metadata_lookup", table_name="upload_metadata")
    op.drop_table("upload_metadata")
    op.drop_index("ix_batch_row_lookup", table_name="batch_row")
    op.drop_table("batch_row")

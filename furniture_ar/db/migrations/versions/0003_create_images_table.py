"""Create images table for customer branding assets

Revision ID: 0003
Revises: 0002
Create Date: 2026-10-18
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0003"
down_revision = "0002"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "images",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("media_url", sa.Text, nullable=False),
        sa.Column("media_public_id", sa.String(255), nullable=False),
        sa.Column("file_size", sa.Integer, nullable=True),
        sa.Column("width", sa.Integer, nullable=True),
        sa.Column("height", sa.Integer, nullable=True),
        sa.Column("format", sa.String(50), nullable=True),
        sa.Column("image_type", sa.String(50), nullable=False, server_default="general"),
        sa.Column("customer_id", sa.String(100), nullable=True),
        sa.Column("metadata", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_images_image_type", "images", ["image_type"])
    op.create_index("ix_images_customer_id", "images", ["customer_id"])


def downgrade() -> None:
    op.drop_index("ix_images_customer_id", table_name="images")
    op.drop_index("ix_images_image_type", table_name="images")
    op.drop_table("images")

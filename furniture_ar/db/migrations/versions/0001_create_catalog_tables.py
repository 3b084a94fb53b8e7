"""Create catalog tables

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Models, their color/material variants, and per-variant view tracking.
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "models",
        sa.Column("id", sa.String(8), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("filename", sa.String(255), nullable=False),

        # Media reference
        sa.Column("media_url", sa.Text, nullable=False),
        sa.Column("media_public_id", sa.String(255), nullable=False),
        sa.Column("file_size", sa.BigInteger, nullable=False, server_default="0"),

        # Ownership
        sa.Column("customer_id", sa.String(100), nullable=False, server_default="unassigned"),
        sa.Column("customer_name", sa.String(255), nullable=False, server_default="Unassigned"),

        sa.Column("dominant_color", sa.String(7), nullable=False, server_default="#6b7280"),
        sa.Column("view_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("metadata", sa.JSON, nullable=False),

        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_models_customer_id", "models", ["customer_id"])
    op.create_index("ix_models_created_at", "models", ["created_at"])

    op.create_table(
        "model_variants",
        sa.Column("id", sa.String(8), primary_key=True),
        sa.Column(
            "parent_model_id",
            sa.String(8),
            sa.ForeignKey("models.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("variant_name", sa.String(255), nullable=True),
        sa.Column("hex_color", sa.String(7), nullable=False, server_default="#6b7280"),
        sa.Column("is_primary", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("variant_type", sa.String(20), nullable=False, server_default="upload"),
        sa.Column("media_url", sa.Text, nullable=False),
        sa.Column("media_public_id", sa.String(255), nullable=False),
        sa.Column("file_size", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_model_variants_parent_model_id", "model_variants", ["parent_model_id"])

    op.create_table(
        "model_views",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("model_id", sa.String(8), nullable=False),
        sa.Column("variant_id", sa.String(8), nullable=True),
        sa.Column("viewed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("user_agent", sa.Text, nullable=True),
        sa.Column("ip_hash", sa.String(64), nullable=True),
    )
    op.create_index("ix_model_views_model_id", "model_views", ["model_id"])
    op.create_index("ix_model_views_variant_id", "model_views", ["variant_id"])
    op.create_index("ix_model_views_viewed_at", "model_views", ["viewed_at"])


def downgrade() -> None:
    op.drop_index("ix_model_views_viewed_at", table_name="model_views")
    op.drop_index("ix_model_views_variant_id", table_name="model_views")
    op.drop_index("ix_model_views_model_id", table_name="model_views")
    op.drop_table("model_views")

    op.drop_index("ix_model_variants_parent_model_id", table_name="model_variants")
    op.drop_table("model_variants")

    op.drop_index("ix_models_created_at", table_name="models")
    op.drop_index("ix_models_customer_id", table_name="models")
    op.drop_table("models")

"""Add share-link slug columns

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-18

Nullable so existing rows keep working; run `furniture-ar backfill-slugs`
afterwards to populate them.
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("models", sa.Column("url_slug", sa.String(128), nullable=True))
    op.add_column("models", sa.Column("customer_slug", sa.String(100), nullable=True))
    op.add_column("models", sa.Column("category_slug", sa.String(100), nullable=True))
    op.add_column("model_variants", sa.Column("color_slug", sa.String(100), nullable=True))

    op.create_index(
        "ix_models_customer_slug_url_slug",
        "models",
        ["customer_slug", "url_slug"],
    )


def downgrade() -> None:
    op.drop_index("ix_models_customer_slug_url_slug", table_name="models")

    op.drop_column("model_variants", "color_slug")
    op.drop_column("models", "category_slug")
    op.drop_column("models", "customer_slug")
    op.drop_column("models", "url_slug")

"""
SQLAlchemy models for the Furniture AR catalog.
"""

from typing import Any, Dict

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..seo.store import CatalogModel, CatalogVariant
from .base import Base


def _iso(value) -> Any:
    return value.isoformat() if value else None


class ModelRecord(Base):
    """One uploaded 3D asset."""

    __tablename__ = "models"

    # Primary fields
    id = Column(String(8), primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True, default="")
    filename = Column(String(255), nullable=False)

    # Media reference (owned by the storage service)
    media_url = Column(Text, nullable=False)
    media_public_id = Column(String(255), nullable=False)
    file_size = Column(BigInteger, nullable=False, default=0)

    # Ownership
    customer_id = Column(String(100), nullable=False, default="unassigned", index=True)
    customer_name = Column(String(255), nullable=False, default="Unassigned")

    # Shareable URL slugs
    url_slug = Column(String(128), nullable=True)
    customer_slug = Column(String(100), nullable=True)
    category_slug = Column(String(100), nullable=True)

    # Display and analytics
    dominant_color = Column(String(7), nullable=False, default="#6b7280")
    view_count = Column(Integer, nullable=False, default=0)
    meta = Column("metadata", JSON, nullable=False, default=dict)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    variants = relationship(
        "VariantRecord",
        back_populates="parent_model",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_models_customer_slug_url_slug", "customer_slug", "url_slug"),
        Index("ix_models_created_at", "created_at"),
    )

    def to_catalog(self) -> CatalogModel:
        """Read-only view consumed by the slug core."""
        return CatalogModel(
            id=self.id,
            title=self.title,
            customer_id=self.customer_id,
            customer_name=self.customer_name,
            url_slug=self.url_slug,
            customer_slug=self.customer_slug,
            category_slug=self.category_slug,
            created_at=self.created_at,
            meta=dict(self.meta or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "filename": self.filename,
            "media_url": self.media_url,
            "media_public_id": self.media_public_id,
            "file_size": self.file_size,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "url_slug": self.url_slug,
            "customer_slug": self.customer_slug,
            "category_slug": self.category_slug,
            "dominant_color": self.dominant_color,
            "view_count": self.view_count,
            "metadata": self.meta,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class VariantRecord(Base):
    """An alternate color/material/upload of a model."""

    __tablename__ = "model_variants"

    id = Column(String(8), primary_key=True)
    parent_model_id = Column(
        String(8),
        ForeignKey("models.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    variant_name = Column(String(255), nullable=True)
    hex_color = Column(String(7), nullable=False, default="#6b7280")
    color_slug = Column(String(100), nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    variant_type = Column(String(20), nullable=False, default="upload")

    media_url = Column(Text, nullable=False)
    media_public_id = Column(String(255), nullable=False)
    file_size = Column(BigInteger, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    parent_model = relationship("ModelRecord", back_populates="variants")

    def to_catalog(self) -> CatalogVariant:
        return CatalogVariant(
            id=self.id,
            parent_model_id=self.parent_model_id,
            variant_name=self.variant_name,
            hex_color=self.hex_color,
            color_slug=self.color_slug,
            is_primary=bool(self.is_primary),
            created_at=self.created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "parent_model_id": self.parent_model_id,
            "variant_name": self.variant_name,
            "hex_color": self.hex_color,
            "color_slug": self.color_slug,
            "is_primary": self.is_primary,
            "variant_type": self.variant_type,
            "media_url": self.media_url,
            "media_public_id": self.media_public_id,
            "file_size": self.file_size,
            "created_at": _iso(self.created_at),
        }


class ModelViewRecord(Base):
    """A single tracked view of a model or one of its variants."""

    __tablename__ = "model_views"

    id = Column(Integer, primary_key=True, autoincrement=True)
    model_id = Column(String(8), nullable=False, index=True)
    variant_id = Column(String(8), nullable=True, index=True)  # NULL = base model
    viewed_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    user_agent = Column(Text, nullable=True)
    ip_hash = Column(String(64), nullable=True)

    __table_args__ = (Index("ix_model_views_viewed_at", "viewed_at"),)


class BrandAssetRecord(Base):
    """A customer logo or other branding image shown around the viewer."""

    __tablename__ = "images"

    id = Column(String(36), primary_key=True)
    filename = Column(String(255), nullable=False)

    media_url = Column(Text, nullable=False)
    media_public_id = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=True)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    format = Column(String(50), nullable=True)

    image_type = Column(String(50), nullable=False, default="general", index=True)
    customer_id = Column(String(100), nullable=True, index=True)
    meta = Column("metadata", JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "filename": self.filename,
            "media_url": self.media_url,
            "media_public_id": self.media_public_id,
            "file_size": self.file_size,
            "width": self.width,
            "height": self.height,
            "format": self.format,
            "image_type": self.image_type,
            "customer_id": self.customer_id,
            "metadata": self.meta,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

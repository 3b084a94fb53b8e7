"""
Database services for the Furniture AR catalog.
"""

import hashlib
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from ..schemas.catalog import BrandAssetCreate, ModelCreate, VariantCreate
from ..seo.slugs import (
    customer_slug_for,
    generate_model_id,
    generate_model_slug,
    generate_variant_slug,
    normalize_customer_id,
    normalize_slug,
)
from .models import BrandAssetRecord, ModelRecord, ModelViewRecord, VariantRecord

logger = structlog.get_logger()

GLTF_SUFFIXES = (".glb", ".gltf")


def _strip_model_suffix(filename: str) -> str:
    lowered = filename.lower()
    for suffix in GLTF_SUFFIXES:
        if lowered.endswith(suffix):
            return filename[: -len(suffix)]
    return filename


def hash_client_address(address: Optional[str]) -> Optional[str]:
    """SHA-256 of a client address; raw addresses are never stored."""
    if not address:
        return None
    return hashlib.sha256(address.encode("utf-8")).hexdigest()


class ModelService:
    """Service for managing models in the database."""

    def __init__(self, db: Session):
        self.db = db

    def _unused_id(self) -> str:
        while True:
            candidate = generate_model_id()
            if self.db.get(ModelRecord, candidate) is None:
                return candidate

    def create_model(self, payload: ModelCreate) -> ModelRecord:
        """Create a model row with its slugs assigned up front."""
        model_id = self._unused_id()
        title = (payload.title or "").strip() or _strip_model_suffix(payload.filename)
        customer_id = normalize_customer_id(payload.customer_id)
        customer_name = (payload.customer_name or "").strip() or "Unassigned"

        category = payload.metadata.get("category")
        category_slug = (
            normalize_slug(category) if isinstance(category, str) and category.strip() else None
        )
        now = datetime.now(timezone.utc)

        db_model = ModelRecord(
            id=model_id,
            title=title,
            description=payload.description,
            filename=payload.filename,
            media_url=payload.media_url,
            media_public_id=payload.media_public_id,
            file_size=payload.file_size,
            customer_id=customer_id,
            customer_name=customer_name,
            url_slug=generate_model_slug(title, model_id),
            customer_slug=customer_slug_for(customer_id, customer_name),
            category_slug=category_slug,
            dominant_color=payload.dominant_color,
            view_count=0,
            meta=payload.metadata,
            created_at=now,
            updated_at=now,
        )

        self.db.add(db_model)
        self.db.commit()
        self.db.refresh(db_model)
        logger.info("model.created", model_id=model_id, customer_id=customer_id)
        return db_model

    def get_model(self, model_id: str) -> Optional[ModelRecord]:
        """Get a model by ID."""
        return self.db.query(ModelRecord).filter(ModelRecord.id == model_id).first()

    def get_models(
        self,
        customer_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[ModelRecord]:
        """Get models, newest first, optionally filtered by customer."""
        query = self.db.query(ModelRecord)
        if customer_id:
            query = query.filter(ModelRecord.customer_id == normalize_customer_id(customer_id))
        return (
            query.order_by(desc(ModelRecord.created_at), desc(ModelRecord.id))
            .offset(offset)
            .limit(limit)
            .all()
        )

    def assign_customer(
        self, model_id: str, customer_id: str, customer_name: str
    ) -> Optional[ModelRecord]:
        """Move a model to another customer.

        url_slug is left alone; only the customer segment changes.
        """
        model = self.get_model(model_id)
        if not model:
            return None

        model.customer_id = normalize_customer_id(customer_id)
        model.customer_name = customer_name.strip()
        model.customer_slug = customer_slug_for(model.customer_id, model.customer_name)

        self.db.commit()
        self.db.refresh(model)
        logger.info("model.assigned", model_id=model_id, customer_id=model.customer_id)
        return model

    def delete_model(self, model_id: str) -> bool:
        """Delete a model and its variants."""
        model = self.get_model(model_id)
        if not model:
            return False
        self.db.query(ModelViewRecord).filter(ModelViewRecord.model_id == model_id).delete(
            synchronize_session=False
        )
        self.db.delete(model)
        self.db.commit()
        logger.info("model.deleted", model_id=model_id)
        return True


class VariantService:
    """Service for managing model variants in the database."""

    def __init__(self, db: Session):
        self.db = db

    def _unused_id(self) -> str:
        while True:
            candidate = generate_model_id()
            if self.db.get(VariantRecord, candidate) is None:
                return candidate

    def create_variant(self, parent: ModelRecord, payload: VariantCreate) -> VariantRecord:
        """Create a variant; color variants reuse the parent's media."""
        if payload.variant_type == "upload" and not (payload.media_url and payload.media_public_id):
            raise ValueError("Upload variants require media_url and media_public_id")

        if payload.variant_type == "color":
            media_url = parent.media_url
            media_public_id = parent.media_public_id
            file_size = parent.file_size
        else:
            media_url = payload.media_url
            media_public_id = payload.media_public_id
            file_size = payload.file_size

        db_variant = VariantRecord(
            id=self._unused_id(),
            parent_model_id=parent.id,
            variant_name=payload.variant_name,
            hex_color=payload.hex_color.lower(),
            color_slug=generate_variant_slug(payload.variant_name, payload.hex_color),
            is_primary=False,
            variant_type=payload.variant_type,
            media_url=media_url,
            media_public_id=media_public_id,
            file_size=file_size,
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(db_variant)
        self.db.commit()
        self.db.refresh(db_variant)

        if payload.is_primary:
            db_variant = self.set_primary(db_variant.id)

        logger.info("variant.created", variant_id=db_variant.id, model_id=parent.id)
        return db_variant

    def get_variant(self, variant_id: str) -> Optional[VariantRecord]:
        return self.db.query(VariantRecord).filter(VariantRecord.id == variant_id).first()

    def get_variants(self, model_id: str) -> List[VariantRecord]:
        """Variants of a model, primary first, then oldest first."""
        return (
            self.db.query(VariantRecord)
            .filter(VariantRecord.parent_model_id == model_id)
            .order_by(desc(VariantRecord.is_primary), VariantRecord.created_at, VariantRecord.id)
            .all()
        )

    def set_primary(self, variant_id: str) -> Optional[VariantRecord]:
        """Mark one variant primary: clear all siblings first, then set the target."""
        variant = self.get_variant(variant_id)
        if not variant:
            return None

        self.db.query(VariantRecord).filter(
            VariantRecord.parent_model_id == variant.parent_model_id
        ).update({"is_primary": False}, synchronize_session=False)
        self.db.query(VariantRecord).filter(VariantRecord.id == variant_id).update(
            {"is_primary": True}, synchronize_session=False
        )
        self.db.commit()
        self.db.refresh(variant)
        return variant

    def delete_variant(self, variant_id: str) -> bool:
        variant = self.get_variant(variant_id)
        if not variant:
            return False
        self.db.delete(variant)
        self.db.commit()
        logger.info("variant.deleted", variant_id=variant_id)
        return True


class ViewService:
    """Service for view tracking and per-variant analytics."""

    def __init__(self, db: Session):
        self.db = db

    def record_view(
        self,
        model_id: str,
        variant_id: Optional[str] = None,
        user_agent: Optional[str] = None,
        client_address: Optional[str] = None,
    ) -> bool:
        """Increment the model's view counter and log the view.

        Returns False when the model (or the given variant of it) does not exist.
        """
        model = self.db.query(ModelRecord).filter(ModelRecord.id == model_id).first()
        if not model:
            return False

        if variant_id:
            variant = (
                self.db.query(VariantRecord)
                .filter(VariantRecord.id == variant_id)
                .filter(VariantRecord.parent_model_id == model_id)
                .first()
            )
            if not variant:
                return False

        self.db.query(ModelRecord).filter(ModelRecord.id == model_id).update(
            {"view_count": ModelRecord.view_count + 1}, synchronize_session=False
        )
        self.db.add(
            ModelViewRecord(
                model_id=model_id,
                variant_id=variant_id or None,
                viewed_at=datetime.now(timezone.utc),
                user_agent=user_agent,
                ip_hash=hash_client_address(client_address),
            )
        )
        self.db.commit()
        return True

    def get_view_stats(self, model_id: str) -> Dict[str, Any]:
        """View counts for a model, split by variant (None = base model)."""
        rows = (
            self.db.query(ModelViewRecord.variant_id, func.count(ModelViewRecord.id))
            .filter(ModelViewRecord.model_id == model_id)
            .group_by(ModelViewRecord.variant_id)
            .all()
        )
        by_variant = {variant_id or "original": count for variant_id, count in rows}
        return {
            "model_id": model_id,
            "total_views": sum(by_variant.values()),
            "by_variant": by_variant,
        }


class CustomerService:
    """Customers are derived from model ownership; there is no customers table."""

    def __init__(self, db: Session):
        self.db = db

    def get_customers(self) -> List[Dict[str, Any]]:
        """Distinct customers with model and view totals."""
        rows = (
            self.db.query(
                ModelRecord.customer_id,
                func.max(ModelRecord.customer_name),
                func.count(ModelRecord.id),
                func.coalesce(func.sum(ModelRecord.view_count), 0),
            )
            .group_by(ModelRecord.customer_id)
            .order_by(ModelRecord.customer_id)
            .all()
        )
        return [
            {
                "id": customer_id,
                "name": name,
                "slug": customer_slug_for(customer_id, name),
                "model_count": count,
                "total_views": int(views),
            }
            for customer_id, name, count, views in rows
        ]

    def get_customer_stats(self, models: List[ModelRecord]) -> Dict[str, int]:
        return {
            "totalModels": len(models),
            "totalViews": sum(m.view_count or 0 for m in models),
            "totalSize": sum(m.file_size or 0 for m in models),
        }


class BrandAssetService:
    """Service for customer branding images."""

    def __init__(self, db: Session):
        self.db = db

    def create_asset(self, payload: BrandAssetCreate) -> BrandAssetRecord:
        """Store an image reference; format defaults to the file extension."""
        customer_id = (
            normalize_customer_id(payload.customer_id) if payload.customer_id else None
        )
        metadata = dict(payload.metadata)
        metadata.setdefault("originalName", payload.filename)
        if payload.customer_name:
            metadata.setdefault("customerName", payload.customer_name.strip())
        now = datetime.now(timezone.utc)

        asset = BrandAssetRecord(
            id=str(uuid.uuid4()),
            filename=payload.filename,
            media_url=payload.media_url,
            media_public_id=payload.media_public_id,
            file_size=payload.file_size,
            width=payload.width,
            height=payload.height,
            format=(payload.format or payload.filename.rsplit(".", 1)[-1]).lower(),
            image_type=payload.image_type.strip().lower(),
            customer_id=customer_id,
            meta=metadata,
            created_at=now,
            updated_at=now,
        )
        self.db.add(asset)
        self.db.commit()
        self.db.refresh(asset)
        logger.info(
            "image.created",
            image_id=asset.id,
            image_type=asset.image_type,
            customer_id=customer_id,
        )
        return asset

    def get_asset(self, asset_id: str) -> Optional[BrandAssetRecord]:
        return self.db.get(BrandAssetRecord, asset_id)

    def get_assets(
        self,
        image_type: Optional[str] = None,
        customer_id: Optional[str] = None,
    ) -> List[BrandAssetRecord]:
        """Images, newest first, optionally filtered by type and customer."""
        query = self.db.query(BrandAssetRecord)
        if image_type:
            query = query.filter(BrandAssetRecord.image_type == image_type.strip().lower())
        if customer_id:
            query = query.filter(
                BrandAssetRecord.customer_id == normalize_customer_id(customer_id)
            )
        return query.order_by(desc(BrandAssetRecord.created_at), desc(BrandAssetRecord.id)).all()

    def delete_asset(self, asset_id: str) -> bool:
        asset = self.get_asset(asset_id)
        if not asset:
            return False
        self.db.delete(asset)
        self.db.commit()
        logger.info("image.deleted", image_id=asset_id)
        return True

"""
SQLAlchemy implementation of the CatalogStore facade.
"""

from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..seo.store import CatalogModel, CatalogStore, CatalogVariant, DataStoreUnavailable
from .models import ModelRecord, VariantRecord

_MODEL_SLUG_FIELDS = ("url_slug", "customer_slug", "category_slug")


class SqlCatalogStore(CatalogStore):
    """CatalogStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def find_model_by_id(self, model_id: str) -> Optional[CatalogModel]:
        try:
            record = self.db.query(ModelRecord).filter(ModelRecord.id == model_id).first()
        except SQLAlchemyError as e:
            raise DataStoreUnavailable("find_model_by_id", str(e)) from e
        return record.to_catalog() if record else None

    def find_models_by_slug(self, customer_slug: str, url_slug: str) -> List[CatalogModel]:
        try:
            records = (
                self.db.query(ModelRecord)
                .filter(func.lower(ModelRecord.customer_slug) == customer_slug.lower())
                .filter(ModelRecord.url_slug == url_slug)
                .all()
            )
        except SQLAlchemyError as e:
            raise DataStoreUnavailable("find_models_by_slug", str(e)) from e
        return [r.to_catalog() for r in records]

    def find_variants_by_model(self, model_id: str) -> List[CatalogVariant]:
        try:
            records = (
                self.db.query(VariantRecord)
                .filter(VariantRecord.parent_model_id == model_id)
                .all()
            )
        except SQLAlchemyError as e:
            raise DataStoreUnavailable("find_variants_by_model", str(e)) from e
        return [r.to_catalog() for r in records]

    def models_missing_slugs(self) -> List[CatalogModel]:
        try:
            records = (
                self.db.query(ModelRecord)
                .filter(
                    or_(
                        ModelRecord.url_slug.is_(None),
                        ModelRecord.url_slug == "",
                        ModelRecord.customer_slug.is_(None),
                        ModelRecord.customer_slug == "",
                    )
                )
                .order_by(ModelRecord.created_at)
                .all()
            )
        except SQLAlchemyError as e:
            raise DataStoreUnavailable("models_missing_slugs", str(e)) from e
        return [r.to_catalog() for r in records]

    def variants_missing_slugs(self) -> List[CatalogVariant]:
        try:
            records = (
                self.db.query(VariantRecord)
                .filter(or_(VariantRecord.color_slug.is_(None), VariantRecord.color_slug == ""))
                .order_by(VariantRecord.created_at)
                .all()
            )
        except SQLAlchemyError as e:
            raise DataStoreUnavailable("variants_missing_slugs", str(e)) from e
        return [r.to_catalog() for r in records]

    def update_model_slugs(self, model_id: str, fields: Dict[str, str]) -> None:
        unknown = set(fields) - set(_MODEL_SLUG_FIELDS)
        if unknown:
            raise ValueError(f"Not slug columns: {', '.join(sorted(unknown))}")
        try:
            updated = (
                self.db.query(ModelRecord)
                .filter(ModelRecord.id == model_id)
                .update(fields, synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataStoreUnavailable("update_model_slugs", str(e)) from e
        if not updated:
            raise LookupError(f"Model {model_id} no longer exists")

    def update_variant_slug(self, variant_id: str, color_slug: str) -> None:
        try:
            updated = (
                self.db.query(VariantRecord)
                .filter(VariantRecord.id == variant_id)
                .update({"color_slug": color_slug}, synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataStoreUnavailable("update_variant_slug", str(e)) from e
        if not updated:
            raise LookupError(f"Variant {variant_id} no longer exists")

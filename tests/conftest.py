"""Test configuration and fixtures."""

import dataclasses
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from furniture_ar.api import app
from furniture_ar.db import models  # noqa: F401
from furniture_ar.db.base import Base, get_db
from furniture_ar.db.models import ModelRecord, VariantRecord
from furniture_ar.seo.slugs import customer_slug_for, generate_model_slug, generate_variant_slug
from furniture_ar.seo.store import (
    CatalogModel,
    CatalogStore,
    CatalogVariant,
    DataStoreUnavailable,
)

# Create an in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override the get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency before any test client is created
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Fresh tables for every test."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """A session on the shared in-memory database."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def add_model(db_session):
    """Insert a model row directly, optionally without slugs (a pre-slug row)."""

    def _add(
        model_id: str,
        title: str,
        customer_id: str = "acme",
        customer_name: str = "Acme Furniture",
        with_slugs: bool = True,
        url_slug: Optional[str] = None,
        created_at: Optional[datetime] = None,
        meta: Optional[dict] = None,
        view_count: int = 0,
        file_size: int = 1024,
    ) -> ModelRecord:
        if with_slugs and url_slug is None:
            url_slug = generate_model_slug(title, model_id)
        record = ModelRecord(
            id=model_id,
            title=title,
            description="",
            filename=f"{model_id}.glb",
            media_url=f"https://cdn.example.com/models/{model_id}.glb",
            media_public_id=f"models/{model_id}",
            file_size=file_size,
            customer_id=customer_id,
            customer_name=customer_name,
            url_slug=url_slug,
            customer_slug=customer_slug_for(customer_id, customer_name) if with_slugs else None,
            view_count=view_count,
            meta=meta or {},
            created_at=created_at or datetime.now(timezone.utc),
        )
        db_session.add(record)
        db_session.commit()
        return record

    return _add


@pytest.fixture
def add_variant(db_session):
    """Insert a variant row directly."""

    def _add(
        variant_id: str,
        parent_model_id: str,
        variant_name: Optional[str] = None,
        hex_color: str = "#5c4033",
        with_slug: bool = True,
        color_slug: Optional[str] = None,
        is_primary: bool = False,
        created_at: Optional[datetime] = None,
    ) -> VariantRecord:
        if with_slug and color_slug is None:
            color_slug = generate_variant_slug(variant_name, hex_color)
        record = VariantRecord(
            id=variant_id,
            parent_model_id=parent_model_id,
            variant_name=variant_name,
            hex_color=hex_color,
            color_slug=color_slug,
            is_primary=is_primary,
            variant_type="upload",
            media_url=f"https://cdn.example.com/variants/{variant_id}.glb",
            media_public_id=f"variants/{variant_id}",
            file_size=512,
            created_at=created_at or datetime.now(timezone.utc),
        )
        db_session.add(record)
        db_session.commit()
        return record

    return _add


class InMemoryCatalogStore(CatalogStore):
    """Dictionary-backed CatalogStore for resolver and backfill tests."""

    def __init__(self):
        self.models: Dict[str, CatalogModel] = {}
        self.variants: Dict[str, CatalogVariant] = {}
        self.unavailable = False
        self.failing_ids: Set[str] = set()
        self.calls: List[str] = []

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if self.unavailable:
            raise DataStoreUnavailable(operation, "connection refused")

    def add_model(self, model: CatalogModel) -> CatalogModel:
        self.models[model.id] = model
        return model

    def add_variant(self, variant: CatalogVariant) -> CatalogVariant:
        self.variants[variant.id] = variant
        return variant

    def find_model_by_id(self, model_id: str) -> Optional[CatalogModel]:
        self._check("find_model_by_id")
        return self.models.get(model_id)

    def find_models_by_slug(self, customer_slug: str, url_slug: str) -> List[CatalogModel]:
        self._check("find_models_by_slug")
        return [
            m
            for m in self.models.values()
            if (m.customer_slug or "").lower() == customer_slug.lower() and m.url_slug == url_slug
        ]

    def find_variants_by_model(self, model_id: str) -> List[CatalogVariant]:
        self._check("find_variants_by_model")
        return [v for v in self.variants.values() if v.parent_model_id == model_id]

    def models_missing_slugs(self) -> List[CatalogModel]:
        self._check("models_missing_slugs")
        return [m for m in self.models.values() if not m.url_slug or not m.customer_slug]

    def variants_missing_slugs(self) -> List[CatalogVariant]:
        self._check("variants_missing_slugs")
        return [v for v in self.variants.values() if not v.color_slug]

    def update_model_slugs(self, model_id: str, fields: Dict[str, str]) -> None:
        self._check("update_model_slugs")
        if model_id in self.failing_ids:
            raise DataStoreUnavailable("update_model_slugs", "write timed out")
        self.models[model_id] = dataclasses.replace(self.models[model_id], **fields)

    def update_variant_slug(self, variant_id: str, color_slug: str) -> None:
        self._check("update_variant_slug")
        if variant_id in self.failing_ids:
            raise DataStoreUnavailable("update_variant_slug", "write timed out")
        self.variants[variant_id] = dataclasses.replace(
            self.variants[variant_id], color_slug=color_slug
        )


@pytest.fixture
def memory_store() -> InMemoryCatalogStore:
    """An empty in-memory catalog store."""
    return InMemoryCatalogStore()

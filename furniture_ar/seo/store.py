"""
Catalog store abstraction used by the URL resolver and slug backfill.

The resolver never talks to SQLAlchemy directly. It receives a CatalogStore at
construction time, which keeps it testable against an in-memory fake and keeps
connection lifecycle with the hosting process.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


class DataStoreUnavailable(Exception):
    """Raised when the backing store could not be read or written.

    Distinct from "not found": callers and monitoring must be able to tell
    "doesn't exist" apart from "couldn't check".
    """

    def __init__(self, operation: str, message: str = "Data store unavailable"):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation}: {message}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": "DATA_STORE_UNAVAILABLE",
                "message": "The catalog is temporarily unavailable",
            }
        }


@dataclass(frozen=True)
class CatalogModel:
    """Read-only view of a model row, as seen by the slug core."""

    id: str
    title: str
    customer_id: str
    customer_name: Optional[str] = None
    url_slug: Optional[str] = None
    customer_slug: Optional[str] = None
    category_slug: Optional[str] = None
    created_at: Optional[datetime] = None
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CatalogVariant:
    """Read-only view of a variant row."""

    id: str
    parent_model_id: str
    variant_name: Optional[str] = None
    hex_color: Optional[str] = None
    color_slug: Optional[str] = None
    is_primary: bool = False
    created_at: Optional[datetime] = None


class CatalogStore(ABC):
    """Narrow data-store facade consumed by the slug core.

    Implementations raise DataStoreUnavailable for infrastructure failures and
    return None/empty lists for absent rows.
    """

    @abstractmethod
    def find_model_by_id(self, model_id: str) -> Optional[CatalogModel]:
        """Fetch a model by its opaque id."""

    @abstractmethod
    def find_models_by_slug(self, customer_slug: str, url_slug: str) -> List[CatalogModel]:
        """Models whose customer_slug matches case-insensitively and url_slug equals ``url_slug``."""

    @abstractmethod
    def find_variants_by_model(self, model_id: str) -> List[CatalogVariant]:
        """All variants of a model."""

    @abstractmethod
    def models_missing_slugs(self) -> List[CatalogModel]:
        """Models lacking url_slug or customer_slug."""

    @abstractmethod
    def variants_missing_slugs(self) -> List[CatalogVariant]:
        """Variants lacking color_slug."""

    @abstractmethod
    def update_model_slugs(self, model_id: str, fields: Dict[str, str]) -> None:
        """Persist slug columns for one model."""

    @abstractmethod
    def update_variant_slug(self, variant_id: str, color_slug: str) -> None:
        """Persist color_slug for one variant."""

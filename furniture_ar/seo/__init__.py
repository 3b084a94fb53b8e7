"""
SEO and QR share links.

Slug generation, URL resolution, slug backfill, and the /f and /qr routes.
"""

from .backfill import BackfillError, BackfillReport, backfill_slugs
from .resolver import NotFoundReason, NotResolved, Resolved, UrlResolver
from .slugs import generate_model_slug, generate_variant_slug, normalize_slug
from .store import CatalogModel, CatalogStore, CatalogVariant, DataStoreUnavailable

__all__ = [
    "BackfillError",
    "BackfillReport",
    "CatalogModel",
    "CatalogStore",
    "CatalogVariant",
    "DataStoreUnavailable",
    "NotFoundReason",
    "NotResolved",
    "Resolved",
    "UrlResolver",
    "backfill_slugs",
    "generate_model_slug",
    "generate_variant_slug",
    "normalize_slug",
]

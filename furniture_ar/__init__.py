"""
Furniture AR Catalog

Server-side API for an AR furniture catalog: 3D model metadata, color/material
variants, view analytics, and SEO/QR sharing links.
"""

import importlib.metadata

__version__ = importlib.metadata.version("furniture-ar")

from .seo.resolver import NotFoundReason, NotResolved, Resolved, UrlResolver
from .seo.slugs import generate_model_slug, generate_variant_slug, normalize_slug

__all__ = [
    "NotFoundReason",
    "NotResolved",
    "Resolved",
    "UrlResolver",
    "generate_model_slug",
    "generate_variant_slug",
    "normalize_slug",
]

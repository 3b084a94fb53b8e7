"""
Slug backfill for rows created before slug support existed.

Only missing columns are filled; a slug that is already set is never
regenerated because external links may depend on it. Each row is written
independently, so one failure does not stop the batch. A row that fails keeps
resolving through the legacy id lookup until the next run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

import structlog

from .slugs import customer_slug_for, generate_model_slug, generate_variant_slug, normalize_slug
from .store import CatalogModel, CatalogStore

logger = structlog.get_logger()


@dataclass
class BackfillError:
    """A row that could not be updated."""

    kind: str
    id: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind, "id": self.id, "message": self.message}


@dataclass
class BackfillReport:
    """Outcome of a backfill run."""

    updated: int = 0
    errors: List[BackfillError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "updated": self.updated,
            "errors": [e.to_dict() for e in self.errors],
        }


def model_slug_fields(model: CatalogModel) -> Dict[str, str]:
    """Slug columns to write for a model; only those currently missing."""
    fields: Dict[str, str] = {}
    if not model.url_slug:
        fields["url_slug"] = generate_model_slug(model.title, model.id)
    if not model.customer_slug:
        fields["customer_slug"] = customer_slug_for(model.customer_id, model.customer_name)
    if not model.category_slug:
        category = (model.meta or {}).get("category")
        if isinstance(category, str) and category.strip():
            fields["category_slug"] = normalize_slug(category)
    return fields


def backfill_slugs(store: CatalogStore) -> BackfillReport:
    """Populate url_slug/customer_slug/category_slug and color_slug where missing."""
    report = BackfillReport()

    for model in store.models_missing_slugs():
        fields = model_slug_fields(model)
        if not fields:
            continue
        try:
            store.update_model_slugs(model.id, fields)
        except Exception as e:
            logger.error("backfill.model_failed", model_id=model.id, error=str(e))
            report.errors.append(BackfillError(kind="model", id=model.id, message=str(e)))
            continue
        report.updated += 1
        logger.debug("backfill.model_updated", model_id=model.id, **fields)

    for variant in store.variants_missing_slugs():
        color_slug = generate_variant_slug(variant.variant_name, variant.hex_color)
        try:
            store.update_variant_slug(variant.id, color_slug)
        except Exception as e:
            logger.error("backfill.variant_failed", variant_id=variant.id, error=str(e))
            report.errors.append(BackfillError(kind="variant", id=variant.id, message=str(e)))
            continue
        report.updated += 1
        logger.debug("backfill.variant_updated", variant_id=variant.id, color_slug=color_slug)

    logger.info("backfill.completed", updated=report.updated, errors=len(report.errors))
    return report

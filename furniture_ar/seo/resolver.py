"""
URL resolution for SEO and QR links.

Maps ``(customer_slug, product_slug_with_id, variant_slug)`` to a concrete
model (and optionally a variant):

1. Extract the trailing id-shaped token from the product segment.
2. Look the model up by id. The id is authoritative; a stale title prefix is
   tolerated silently.
3. Check the model belongs to the requested customer (case-insensitive).
4. Without a usable id, or when the id belongs to another customer, fall
   back to an exact url_slug lookup within the customer. Duplicate legacy
   slugs resolve to the newest model.
5. Optionally match the variant segment against the model's color slugs.

Expected not-found conditions are returned as NotResolved values, never raised.
Only infrastructure failures propagate (as DataStoreUnavailable).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Union

import structlog

from .slugs import customer_slug_for, generate_variant_slug, split_model_slug
from .store import CatalogModel, CatalogStore, CatalogVariant

logger = structlog.get_logger()

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class NotFoundReason(str, Enum):
    """Why a URL did not resolve."""

    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    WRONG_CUSTOMER = "WRONG_CUSTOMER"
    VARIANT_NOT_FOUND = "VARIANT_NOT_FOUND"


@dataclass(frozen=True)
class Resolved:
    """Successful resolution."""

    model: CatalogModel
    variant: Optional[CatalogVariant] = None

    success = True


@dataclass(frozen=True)
class NotResolved:
    """Failed resolution.

    ``model`` is only set for VARIANT_NOT_FOUND, where the model itself is
    valid and the caller may fall back to it.
    """

    reason: NotFoundReason
    model: Optional[CatalogModel] = None

    success = False


Resolution = Union[Resolved, NotResolved]


def _created_key(created_at: Optional[datetime]) -> datetime:
    if created_at is None:
        return _EPOCH
    if created_at.tzinfo is None:
        return created_at.replace(tzinfo=timezone.utc)
    return created_at


def pick_newest(models: List[CatalogModel]) -> CatalogModel:
    """Deterministic tie-break for colliding legacy slugs: newest first, then highest id."""
    return max(models, key=lambda m: (_created_key(m.created_at), m.id))


def effective_customer_slug(model: CatalogModel) -> str:
    """The model's customer slug, derived on the fly for rows not yet backfilled."""
    return model.customer_slug or customer_slug_for(model.customer_id, model.customer_name)


def effective_color_slug(variant: CatalogVariant) -> str:
    return variant.color_slug or generate_variant_slug(variant.variant_name, variant.hex_color)


class UrlResolver:
    """Resolves shareable slug URLs against a CatalogStore."""

    def __init__(self, store: CatalogStore):
        self.store = store

    def resolve(
        self,
        customer_slug: str,
        product_slug_with_id: str,
        variant_slug: Optional[str] = None,
    ) -> Resolution:
        """Resolve a slug URL to a model and optional variant."""
        requested_customer = (customer_slug or "").strip().lower()
        product_segment = (product_slug_with_id or "").strip()

        if not requested_customer or not product_segment:
            return NotResolved(NotFoundReason.MODEL_NOT_FOUND)

        _, model_id = split_model_slug(product_segment)

        model: Optional[CatalogModel] = None
        foreign_id = False
        if model_id is not None:
            model = self.store.find_model_by_id(model_id)
            if model is not None and effective_customer_slug(model).lower() != requested_customer:
                logger.info(
                    "resolver.wrong_customer",
                    model_id=model.id,
                    requested_customer=requested_customer,
                )
                foreign_id = True
                model = None

        if model is None:
            # The id-shaped tail may be part of a legacy slug owned by this customer
            model = self._resolve_legacy_slug(requested_customer, product_segment)

        if model is None and foreign_id:
            return NotResolved(NotFoundReason.WRONG_CUSTOMER)

        if model is None:
            logger.info(
                "resolver.model_not_found",
                customer=requested_customer,
                product=product_segment,
            )
            return NotResolved(NotFoundReason.MODEL_NOT_FOUND)

        if not variant_slug:
            return Resolved(model=model)

        variant = self._resolve_variant(model, variant_slug)
        if variant is None:
            logger.info(
                "resolver.variant_not_found",
                model_id=model.id,
                variant_slug=variant_slug,
            )
            return NotResolved(NotFoundReason.VARIANT_NOT_FOUND, model=model)

        return Resolved(model=model, variant=variant)

    def _resolve_legacy_slug(self, customer: str, literal_slug: str) -> Optional[CatalogModel]:
        """Exact url_slug lookup for links without a recognizable id."""
        matches = self.store.find_models_by_slug(customer, literal_slug)
        if not matches:
            return None
        if len(matches) > 1:
            chosen = pick_newest(matches)
            logger.warning(
                "resolver.slug_collision",
                customer=customer,
                url_slug=literal_slug,
                candidates=[m.id for m in matches],
                chosen=chosen.id,
            )
            return chosen
        return matches[0]

    def _resolve_variant(self, model: CatalogModel, variant_slug: str) -> Optional[CatalogVariant]:
        wanted = variant_slug.strip().lower()
        variants = self.store.find_variants_by_model(model.id)

        matches = [v for v in variants if effective_color_slug(v).lower() == wanted]
        if not matches:
            # Older share links carried the variant id instead of its slug
            matches = [v for v in variants if v.id == variant_slug.strip()]
        if not matches:
            return None

        # color_slug is not constrained unique; primary first, then oldest
        matches.sort(key=lambda v: (not v.is_primary, _created_key(v.created_at), v.id))
        return matches[0]

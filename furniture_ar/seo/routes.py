"""
SEO and QR share-link routes.

    GET /f/{customer}/{product-slug-id}[/{variant}]   -> 301 to the viewer
    GET /qr/{customer}/{product-slug-id}[-{variant}].svg|.png -> QR image

Both go through UrlResolver. Unknown models and models owned by another
customer produce the same 404 so existence never leaks across tenants. An
unknown variant segment is dropped and the base model is served.
"""

from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, RedirectResponse, Response
from sqlalchemy.orm import Session

from ..config import get_settings
from ..db.base import get_db
from ..db.catalog_store import SqlCatalogStore
from .qr import SUPPORTED_FORMATS, MAX_QR_SIZE, MIN_QR_SIZE, QRRenderer, get_qr_renderer
from .resolver import (
    NotFoundReason,
    NotResolved,
    Resolution,
    Resolved,
    UrlResolver,
    effective_color_slug,
    effective_customer_slug,
)
from .slugs import MODEL_ID_LENGTH, generate_model_slug, split_model_slug
from .store import CatalogStore

logger = structlog.get_logger()

router = APIRouter(tags=["Sharing"])

SEO_PATH_SHAPE = "/f/{customer}/{product-slug-id}[/{variant}]"
QR_PATH_SHAPE = "/qr/{customer}/{product-slug-id}[-{variant}].svg"


def get_catalog_store(db: Session = Depends(get_db)) -> CatalogStore:
    """Catalog store bound to the request's session."""
    return SqlCatalogStore(db)


def get_url_resolver(store: CatalogStore = Depends(get_catalog_store)) -> UrlResolver:
    return UrlResolver(store)


def _error(status_code: int, code: str, message: str, **extra: Any) -> JSONResponse:
    body: Dict[str, Any] = {"code": code, "message": message}
    body.update(extra)
    return JSONResponse(status_code=status_code, content={"error": body})


def _not_found() -> JSONResponse:
    return _error(404, NotFoundReason.MODEL_NOT_FOUND.value, "Model not found")


def _degrade(resolution: Resolution) -> Optional[Resolved]:
    """Apply the sharing policy: drop an unknown variant, fail everything else."""
    if isinstance(resolution, Resolved):
        return resolution
    if resolution.reason is NotFoundReason.VARIANT_NOT_FOUND and resolution.model is not None:
        return Resolved(model=resolution.model)
    return None


def viewer_url(model_id: str, variant_id: Optional[str] = None) -> str:
    """Canonical viewer URL; depends only on ids, never on slugs."""
    params = {"id": model_id}
    if variant_id:
        params["variant"] = variant_id
    base = get_settings().viewer_base_url.rstrip("/")
    return f"{base}/view?{urlencode(params)}"


def canonical_share_url(resolved: Resolved) -> str:
    """Absolute SEO URL for a resolved model/variant."""
    model = resolved.model
    product = model.url_slug or generate_model_slug(model.title, model.id)
    url = f"{get_settings().public_base_url.rstrip('/')}/f/{effective_customer_slug(model)}/{product}"
    if resolved.variant is not None:
        url += f"/{effective_color_slug(resolved.variant)}"
    return url


def split_qr_stem(stem: str) -> List[Tuple[str, Optional[str]]]:
    """
    Candidate ``(product_slug_with_id, variant_slug)`` splits of a QR filename stem.

    A product segment may end at the end of the stem or at any hyphen, as long
    as it ends in an id (ids may contain hyphens, so this is checked per cut
    with ``split_model_slug``). Longest product first, then the whole stem as a
    slug-only (legacy) product segment. Variant slugs may themselves look like
    ids, so the caller resolves candidates in order and lets the store decide.
    """
    candidates: List[Tuple[str, Optional[str]]] = []
    for end in range(len(stem), MODEL_ID_LENGTH - 1, -1):
        if end < len(stem) and stem[end] != "-":
            continue
        product = stem[:end]
        if split_model_slug(product)[1] is None:
            continue
        candidate = (product, stem[end + 1 :] or None)
        if candidate not in candidates:
            candidates.append(candidate)
    if (stem, None) not in candidates:
        candidates.append((stem, None))
    return candidates


@router.get("/f/{path:path}")
def seo_redirect(
    path: str,
    resolver: UrlResolver = Depends(get_url_resolver),
) -> Response:
    """Resolve an SEO share link and redirect permanently to the viewer."""
    segments = [s for s in path.split("/") if s]
    if len(segments) not in (2, 3):
        return _error(
            400,
            "MALFORMED_PATH",
            "Invalid URL format",
            expected=SEO_PATH_SHAPE,
        )

    customer_slug, product_slug_with_id = segments[0], segments[1]
    variant_slug = segments[2] if len(segments) == 3 else None

    resolution = resolver.resolve(customer_slug, product_slug_with_id, variant_slug)
    resolved = _degrade(resolution)
    if resolved is None:
        logger.info(
            "seo.not_found",
            customer=customer_slug,
            product=product_slug_with_id,
            reason=resolution.reason.value,
        )
        return _not_found()

    if isinstance(resolution, NotResolved):
        logger.info(
            "seo.variant_dropped",
            model_id=resolved.model.id,
            variant_slug=variant_slug,
        )

    target = viewer_url(
        resolved.model.id,
        resolved.variant.id if resolved.variant is not None else None,
    )
    logger.info("seo.redirect", model_id=resolved.model.id, target=target)
    return RedirectResponse(url=target, status_code=301)


@router.get("/qr/{customer_slug}/{filename}")
def qr_code(
    customer_slug: str,
    filename: str,
    size: Optional[int] = Query(None),
    resolver: UrlResolver = Depends(get_url_resolver),
    renderer: QRRenderer = Depends(get_qr_renderer),
) -> Response:
    """Render a QR code pointing at the canonical SEO URL of a model."""
    stem, dot, extension = filename.rpartition(".")
    fmt = extension.lower()
    if not dot or not stem or fmt not in SUPPORTED_FORMATS:
        return _error(
            400,
            "MALFORMED_PATH",
            "QR URLs must end with .svg or .png",
            expected=QR_PATH_SHAPE,
        )

    if size is not None and not MIN_QR_SIZE <= size <= MAX_QR_SIZE:
        return _error(
            400,
            "MALFORMED_PATH",
            f"size must be between {MIN_QR_SIZE} and {MAX_QR_SIZE}",
            expected=QR_PATH_SHAPE,
        )

    # An id owned by another customer only ends the search when no later
    # split resolves.
    resolved: Optional[Resolved] = None
    for product_slug_with_id, variant_slug in split_qr_stem(stem):
        resolved = _degrade(resolver.resolve(customer_slug, product_slug_with_id, variant_slug))
        if resolved is not None:
            break

    if resolved is None:
        logger.info("qr.not_found", customer=customer_slug, filename=filename)
        return _not_found()

    settings = get_settings()
    target = canonical_share_url(resolved)
    image = renderer.render(target, fmt=fmt, size=size or settings.qr_default_size)
    logger.info("qr.rendered", model_id=resolved.model.id, target=target, format=fmt)

    return Response(
        content=image,
        media_type=QRRenderer.media_type(fmt),
        headers={"Cache-Control": f"public, max-age={settings.qr_cache_max_age}, immutable"},
    )

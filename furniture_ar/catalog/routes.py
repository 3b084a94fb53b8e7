"""
Catalog API Routes.

CRUD endpoints for models, variants, customers, branding images and view
tracking.
All endpoints are prefixed with /api.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from sqlalchemy.orm import Session

from ..config import get_settings
from ..db.base import get_db
from ..db.services import (
    BrandAssetService,
    CustomerService,
    ModelService,
    VariantService,
    ViewService,
)
from ..schemas.catalog import BrandAssetCreate, ModelAssign, ModelCreate, VariantCreate

router = APIRouter(prefix="/api", tags=["Catalog"])


def share_links(model_id: str, customer_slug: str, url_slug: str) -> Dict[str, str]:
    """Links returned to clients after a model is registered."""
    base = get_settings().public_base_url.rstrip("/")
    return {
        "view_url": f"{base}/view?id={model_id}",
        "seo_url": f"{base}/f/{customer_slug}/{url_slug}",
        "qr_url": f"{base}/qr/{customer_slug}/{url_slug}.svg",
    }


# =============================================================================
# Model Endpoints
# =============================================================================


@router.post("/models", status_code=201)
def create_model(
    payload: ModelCreate,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Register an uploaded model and assign its share slugs."""
    service = ModelService(db)
    model = service.create_model(payload)
    return {
        "status": "success",
        "model": model.to_dict(),
        **share_links(model.id, model.customer_slug, model.url_slug),
    }


@router.get("/models")
def list_models(
    customer_id: Optional[str] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """List models, newest first."""
    service = ModelService(db)
    models = service.get_models(customer_id=customer_id, limit=limit, offset=offset)
    return [m.to_dict() for m in models]


@router.get("/models/{model_id}")
def get_model(model_id: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Get a model by ID."""
    model = ModelService(db).get_model(model_id)
    if not model:
        raise HTTPException(status_code=404, detail="Model not found")
    return model.to_dict()


@router.get("/models/{model_id}/info")
def get_model_info(model_id: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Model metadata with its variants, primary first (used by the viewer)."""
    model = ModelService(db).get_model(model_id)
    if not model:
        raise HTTPException(status_code=404, detail="Model not found")

    variants = VariantService(db).get_variants(model_id)
    info = model.to_dict()
    info["variants"] = [v.to_dict() for v in variants]
    return info


@router.delete("/models/{model_id}", status_code=204)
def delete_model(model_id: str, db: Session = Depends(get_db)) -> None:
    """Delete a model; its variants go with it."""
    if not ModelService(db).delete_model(model_id):
        raise HTTPException(status_code=404, detail="Model not found")
    return None


@router.put("/models/{model_id}/assign")
def assign_model(
    model_id: str,
    payload: ModelAssign,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Assign a model to a customer."""
    model = ModelService(db).assign_customer(model_id, payload.customer_id, payload.customer_name)
    if not model:
        raise HTTPException(status_code=404, detail="Model not found")
    return {
        "status": "success",
        "model": model.to_dict(),
        "message": "Model assigned successfully",
    }


@router.post("/models/{model_id}/view")
def track_view(
    model_id: str,
    request: Request,
    variant: Optional[str] = None,
    user_agent: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Record one view of a model (or one of its variants)."""
    client_address = request.client.host if request.client else None
    recorded = ViewService(db).record_view(
        model_id,
        variant_id=variant,
        user_agent=user_agent,
        client_address=client_address,
    )
    if not recorded:
        raise HTTPException(status_code=404, detail="Model not found")
    return {"status": "success"}


@router.get("/models/{model_id}/stats")
def get_model_stats(model_id: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Per-variant view counts for a model."""
    if not ModelService(db).get_model(model_id):
        raise HTTPException(status_code=404, detail="Model not found")
    return ViewService(db).get_view_stats(model_id)


# =============================================================================
# Variant Endpoints
# =============================================================================


@router.get("/models/{model_id}/variants")
def list_variants(model_id: str, db: Session = Depends(get_db)) -> List[Dict[str, Any]]:
    """List a model's variants, primary first."""
    if not ModelService(db).get_model(model_id):
        raise HTTPException(status_code=404, detail="Model not found")
    return [v.to_dict() for v in VariantService(db).get_variants(model_id)]


@router.post("/models/{model_id}/variants", status_code=201)
def create_variant(
    model_id: str,
    payload: VariantCreate,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Create a variant of a model."""
    parent = ModelService(db).get_model(model_id)
    if not parent:
        raise HTTPException(status_code=404, detail="Parent model not found")

    try:
        variant = VariantService(db).create_variant(parent, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"status": "success", "variant": variant.to_dict()}


@router.put("/variants/{variant_id}/primary")
def set_primary_variant(variant_id: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Make a variant the primary one of its model."""
    variant = VariantService(db).set_primary(variant_id)
    if not variant:
        raise HTTPException(status_code=404, detail="Variant not found")
    return {"status": "success", "variant": variant.to_dict()}


@router.delete("/variants/{variant_id}", status_code=204)
def delete_variant(variant_id: str, db: Session = Depends(get_db)) -> None:
    """Delete a single variant."""
    if not VariantService(db).delete_variant(variant_id):
        raise HTTPException(status_code=404, detail="Variant not found")
    return None


# =============================================================================
# Customer Endpoints
# =============================================================================


@router.get("/customers")
def list_customers(db: Session = Depends(get_db)) -> List[Dict[str, Any]]:
    """Customers that own at least one model."""
    return CustomerService(db).get_customers()


@router.get("/customers/{customer_id}/models")
def list_customer_models(
    customer_id: str,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """A customer's models with aggregate stats."""
    models = ModelService(db).get_models(customer_id=customer_id, limit=limit, offset=offset)
    return {
        "customer": customer_id.lower(),
        "models": [m.to_dict() for m in models],
        "stats": CustomerService(db).get_customer_stats(models),
    }


# =============================================================================
# Brand Asset Endpoints
# =============================================================================


@router.post("/images", status_code=201)
def create_image(
    payload: BrandAssetCreate,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Register an uploaded logo or branding image."""
    image = BrandAssetService(db).create_asset(payload)
    return {"status": "success", "image": image.to_dict()}


@router.get("/images")
def list_images(
    image_type: Optional[str] = None,
    customer_id: Optional[str] = None,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """List branding images, newest first."""
    images = BrandAssetService(db).get_assets(image_type=image_type, customer_id=customer_id)
    return {"images": [i.to_dict() for i in images]}


@router.delete("/images/{image_id}", status_code=204)
def delete_image(image_id: str, db: Session = Depends(get_db)) -> None:
    """Delete a branding image record."""
    if not BrandAssetService(db).delete_asset(image_id):
        raise HTTPException(status_code=404, detail="Image not found")
    return None

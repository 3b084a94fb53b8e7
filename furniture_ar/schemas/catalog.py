"""Request schemas for the catalog API."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, constr, conint

HexColor = constr(pattern=r"^#[0-9A-Fa-f]{6}$")


class ModelCreate(BaseModel):
    """Register a 3D model whose file the storage service already accepted."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[constr(max_length=255)] = None
    description: constr(max_length=5000) = ""
    filename: constr(min_length=1, max_length=255, pattern=r"(?i)^.+\.(glb|gltf)$")
    media_url: constr(min_length=1, max_length=2000)
    media_public_id: constr(min_length=1, max_length=255)
    file_size: conint(ge=0) = 0
    customer_id: Optional[constr(max_length=100)] = None
    customer_name: Optional[constr(max_length=255)] = None
    dominant_color: HexColor = "#6b7280"
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ModelAssign(BaseModel):
    """Reassign a model to a customer."""

    customer_id: constr(min_length=1, max_length=100)
    customer_name: constr(min_length=1, max_length=255)


class VariantCreate(BaseModel):
    """Create a color/material variant of a model.

    ``color`` variants reuse the parent's media; ``upload`` variants carry
    their own media reference.
    """

    model_config = ConfigDict(extra="forbid")

    variant_name: Optional[constr(max_length=255)] = None
    hex_color: HexColor
    variant_type: Literal["upload", "color"] = "upload"
    is_primary: bool = False
    media_url: Optional[constr(min_length=1, max_length=2000)] = None
    media_public_id: Optional[constr(min_length=1, max_length=255)] = None
    file_size: conint(ge=0) = 0


MAX_IMAGE_SIZE = 10 * 1024 * 1024


class BrandAssetCreate(BaseModel):
    """Register a branding image (logo, banner) the storage service accepted."""

    model_config = ConfigDict(extra="forbid")

    filename: constr(min_length=1, max_length=255, pattern=r"(?i)^.+\.(jpg|jpeg|png|webp|svg)$")
    media_url: constr(min_length=1, max_length=2000)
    media_public_id: constr(min_length=1, max_length=255)
    file_size: conint(ge=0, le=MAX_IMAGE_SIZE) = 0
    width: Optional[conint(ge=1)] = None
    height: Optional[conint(ge=1)] = None
    format: Optional[constr(max_length=50)] = None
    image_type: constr(min_length=1, max_length=50) = "general"
    customer_id: Optional[constr(max_length=100)] = None
    customer_name: Optional[constr(max_length=255)] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

"""Request schemas."""

from .catalog import BrandAssetCreate, ModelAssign, ModelCreate, VariantCreate

__all__ = ["BrandAssetCreate", "ModelAssign", "ModelCreate", "VariantCreate"]

"""
Database package for the Furniture AR catalog.
"""

from .base import Base, get_db, get_engine
from .models import BrandAssetRecord, ModelRecord, ModelViewRecord, VariantRecord

__all__ = [
    "Base",
    "get_db",
    "get_engine",
    "BrandAssetRecord",
    "ModelRecord",
    "ModelViewRecord",
    "VariantRecord",
]

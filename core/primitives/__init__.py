"""
POSQ Core Primitives — Catalog Building Blocks
================================================
Shared, engine-agnostic records consumed by the inventory, promotion
and retail engines. They are:

- Pure Python (no Django dependency)
- Immutable (frozen dataclasses)
- Built once at the boundary from backend JSON

Primitives:
    scope    — OutletScope (factory-wide vs single outlet)
    catalog  — Product, Package, Bundle, PromoConfig, CatalogSnapshot
"""

from core.primitives.catalog import (
    Bundle,
    BundleItem,
    CatalogParseError,
    CatalogSnapshot,
    ItemKind,
    Package,
    PackageComponent,
    Product,
    PromoConfig,
    PromoType,
    SellableItem,
    StandalonePromo,
    WEEKDAYS,
)
from core.primitives.scope import OutletScope

__all__ = [
    "Bundle",
    "BundleItem",
    "CatalogParseError",
    "CatalogSnapshot",
    "ItemKind",
    "OutletScope",
    "Package",
    "PackageComponent",
    "Product",
    "PromoConfig",
    "PromoType",
    "SellableItem",
    "StandalonePromo",
    "WEEKDAYS",
]

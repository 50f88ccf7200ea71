"""
POSQ Inventory Stock Engine — Composite Stock Derivation
==========================================================
Sellable quantity of Packages and Bundles, derived from the stock of
their components (bill-of-materials min-ratio).

RULES (NON-NEGOTIABLE):
- Derived stock is a non-negative integer, recomputed on every call
- Manual override, when enabled and set, always wins
- Missing or deleted component anywhere in the chain → 0 (fail closed)
- Components requiring quantity <= 0 are skipped (never divide by zero)
- Product stock is floored before division
- Bundle → Package → Product is two explicit id lookups, no graph walk

Derivation never raises on degenerate catalog data; every such case
maps to a defined quantity and, via explain_*(), to a StockIssue.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from core.primitives.catalog import (
    Bundle,
    CatalogSnapshot,
    ItemKind,
    Number,
    Package,
    Product,
)

logger = logging.getLogger("posq.inventory")

# Upper bound before any component has been seen.
UNCONSTRAINED = 2 ** 63 - 1


# ══════════════════════════════════════════════════════════════
# RESULT TYPES
# ══════════════════════════════════════════════════════════════

class StockSource(Enum):
    MANUAL = "MANUAL"        # operator override
    COMPUTED = "COMPUTED"    # min-ratio over components
    EMPTY = "EMPTY"          # nothing constrained the result


class StockIssueCode:
    MISSING_PRODUCT = "MISSING_PRODUCT"
    DELETED_PRODUCT = "DELETED_PRODUCT"
    MISSING_PACKAGE = "MISSING_PACKAGE"
    DELETED_PACKAGE = "DELETED_PACKAGE"


@dataclass(frozen=True)
class StockIssue:
    """Data-integrity finding that forced a composite to zero."""
    code: str
    item_id: str
    reference_id: Optional[str]

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "item_id": self.item_id,
            "reference_id": self.reference_id,
        }


@dataclass(frozen=True)
class StockDerivation:
    """Derived quantity plus how it was reached."""
    quantity: int
    source: StockSource
    issues: Tuple[StockIssue, ...] = ()

    @property
    def is_fail_closed(self) -> bool:
        return bool(self.issues)


# ══════════════════════════════════════════════════════════════
# HELPERS
# ══════════════════════════════════════════════════════════════

def _floor_non_negative(value: Optional[Number]) -> int:
    if value is None:
        return 0
    return max(0, math.floor(value))


def product_stock(product: Product) -> int:
    """Usable units of a leaf product (floored, never negative)."""
    return _floor_non_negative(product.stock)


def _manual_override(item) -> Optional[StockDerivation]:
    if item.manual_stock_enabled and item.manual_stock is not None:
        return StockDerivation(
            quantity=_floor_non_negative(item.manual_stock),
            source=StockSource.MANUAL,
        )
    return None


def _product_issue(owner_id: str, product_id: Optional[str], product: Optional[Product]) -> Optional[StockIssue]:
    if product is None:
        return StockIssue(StockIssueCode.MISSING_PRODUCT, owner_id, product_id)
    if product.deleted:
        return StockIssue(StockIssueCode.DELETED_PRODUCT, owner_id, product_id)
    return None


def _fail_closed(issue: StockIssue) -> StockDerivation:
    logger.debug(
        "Composite %s forced to zero: %s (%s)",
        issue.item_id, issue.code, issue.reference_id,
    )
    return StockDerivation(quantity=0, source=StockSource.COMPUTED, issues=(issue,))


def _finish(minimum: int) -> StockDerivation:
    if minimum == UNCONSTRAINED:
        return StockDerivation(quantity=0, source=StockSource.EMPTY)
    return StockDerivation(quantity=minimum, source=StockSource.COMPUTED)


# ══════════════════════════════════════════════════════════════
# PACKAGE
# ══════════════════════════════════════════════════════════════

def explain_package_stock(
    pkg: Package,
    products_by_id: Mapping[str, Product],
) -> StockDerivation:
    """
    Derive a package's sellable quantity.

    min over components of floor(product.stock) // required quantity;
    zero-quantity components are skipped before lookup, a missing or
    deleted product zeroes the whole package.
    """
    override = _manual_override(pkg)
    if override is not None:
        return override

    if not pkg.components:
        return StockDerivation(quantity=0, source=StockSource.EMPTY)

    minimum = UNCONSTRAINED
    for component in pkg.components:
        required = component.quantity
        if required <= 0:
            continue

        product = (
            products_by_id.get(component.product_id)
            if component.product_id is not None else None
        )
        issue = _product_issue(pkg.package_id, component.product_id, product)
        if issue is not None:
            return _fail_closed(issue)

        possible = product_stock(product) // required
        if possible < minimum:
            minimum = possible

    return _finish(minimum)


def derive_package_stock(
    pkg: Package,
    products_by_id: Mapping[str, Product],
) -> int:
    return explain_package_stock(pkg, products_by_id).quantity


# ══════════════════════════════════════════════════════════════
# BUNDLE
# ══════════════════════════════════════════════════════════════

def explain_bundle_stock(
    bundle: Bundle,
    products_by_id: Mapping[str, Product],
    packages_by_id: Mapping[str, Package],
) -> StockDerivation:
    """
    Derive a bundle's sellable quantity.

    Each item is resolved first (product or package); an unresolved
    reference zeroes the bundle. Package items contribute their own
    derived stock (which may itself be a manual override).
    """
    override = _manual_override(bundle)
    if override is not None:
        return override

    if not bundle.items:
        return StockDerivation(quantity=0, source=StockSource.EMPTY)

    minimum = UNCONSTRAINED
    for item in bundle.items:
        ref_id = item.reference_id
        if item.is_package:
            pkg = packages_by_id.get(ref_id) if ref_id is not None else None
            if pkg is None:
                return _fail_closed(
                    StockIssue(StockIssueCode.MISSING_PACKAGE, bundle.bundle_id, ref_id)
                )
            if pkg.deleted:
                return _fail_closed(
                    StockIssue(StockIssueCode.DELETED_PACKAGE, bundle.bundle_id, ref_id)
                )
            if item.quantity <= 0:
                continue
            inner = explain_package_stock(pkg, products_by_id)
            if inner.issues:
                logger.debug(
                    "Bundle %s forced to zero by package %s",
                    bundle.bundle_id, ref_id,
                )
                return StockDerivation(
                    quantity=0, source=StockSource.COMPUTED, issues=inner.issues,
                )
            available = inner.quantity
        else:
            product = products_by_id.get(ref_id) if ref_id is not None else None
            issue = _product_issue(bundle.bundle_id, ref_id, product)
            if issue is not None:
                return _fail_closed(issue)
            if item.quantity <= 0:
                continue
            available = product_stock(product)

        possible = available // item.quantity
        if possible < minimum:
            minimum = possible

    return _finish(minimum)


def derive_bundle_stock(
    bundle: Bundle,
    products_by_id: Mapping[str, Product],
    packages_by_id: Mapping[str, Package],
) -> int:
    return explain_bundle_stock(bundle, products_by_id, packages_by_id).quantity


# ══════════════════════════════════════════════════════════════
# WHOLE CATALOG
# ══════════════════════════════════════════════════════════════

def derive_item_stock(snapshot: CatalogSnapshot, kind: ItemKind, item_id: str) -> Optional[int]:
    """Sellable quantity of any item in the snapshot, or None if it is absent."""
    if kind is ItemKind.PRODUCT:
        product = snapshot.products.get(item_id)
        if product is None or product.deleted:
            return None
        return product_stock(product)
    if kind is ItemKind.PACKAGE:
        pkg = snapshot.packages.get(item_id)
        if pkg is None or pkg.deleted:
            return None
        return derive_package_stock(pkg, snapshot.products)
    bundle = snapshot.bundles.get(item_id)
    if bundle is None:
        return None
    return derive_bundle_stock(bundle, snapshot.products, snapshot.packages)


def derive_catalog_stock(snapshot: CatalogSnapshot) -> Dict[str, Dict[str, int]]:
    """
    Sellable quantity of every item, keyed by kind then id.
    Deleted products and packages are left out.
    """
    return {
        ItemKind.PRODUCT.value: {
            pid: product_stock(p)
            for pid, p in snapshot.products.items() if not p.deleted
        },
        ItemKind.PACKAGE.value: {
            pkg_id: derive_package_stock(pkg, snapshot.products)
            for pkg_id, pkg in snapshot.packages.items() if not pkg.deleted
        },
        ItemKind.BUNDLE.value: {
            bundle_id: derive_bundle_stock(bundle, snapshot.products, snapshot.packages)
            for bundle_id, bundle in snapshot.bundles.items()
        },
    }


def collect_stock_issues(snapshot: CatalogSnapshot) -> Tuple[StockIssue, ...]:
    """All fail-closed findings across the snapshot's composites."""
    issues = []
    for pkg in snapshot.packages.values():
        if not pkg.deleted:
            issues.extend(explain_package_stock(pkg, snapshot.products).issues)
    for bundle in snapshot.bundles.values():
        issues.extend(
            explain_bundle_stock(bundle, snapshot.products, snapshot.packages).issues
        )
    return tuple(issues)

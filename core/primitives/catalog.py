"""
POSQ Catalog Primitive — Products, Packages, Bundles, Promos
==============================================================
Immutable snapshot records consumed by the stock and promo engines.

RULES (NON-NEGOTIABLE):
- Records are frozen; engines only read them
- Identifiers are strings (the backend mixes ints and strings)
- Outlet affiliation is an OutletScope, parsed once here
- Bundles reference Products or Packages, never other Bundles
- Malformed shapes fail here (CatalogParseError), never in engines

Records are built from the catalog backend's snake_case JSON via
from_dict(). This file contains NO persistence logic.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from core.primitives.scope import OutletScope

Number = Union[int, float]

WEEKDAYS: Tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday",
    "Friday", "Saturday", "Sunday",
)

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(:[0-5]\d)?$")


class CatalogParseError(ValueError):
    """A catalog record from the backend has an unusable shape."""

    def __init__(self, record: str, field_name: str, detail: str):
        self.record = record
        self.field_name = field_name
        self.detail = detail
        super().__init__(f"{record}.{field_name}: {detail}")


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class ItemKind(Enum):
    PRODUCT = "product"
    PACKAGE = "package"
    BUNDLE = "bundle"


class PromoType(Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


# ══════════════════════════════════════════════════════════════
# FIELD PARSERS
# ══════════════════════════════════════════════════════════════

def _number(record: str, field_name: str, raw: Any) -> Number:
    if isinstance(raw, bool):
        raise CatalogParseError(record, field_name, "must be a number, got bool")
    if isinstance(raw, (int, float)):
        value = raw
    else:
        try:
            value = float(str(raw).strip())
        except (TypeError, ValueError) as exc:
            raise CatalogParseError(record, field_name, f"must be a number, got {raw!r}") from exc
    if isinstance(value, float):
        if not math.isfinite(value):
            raise CatalogParseError(record, field_name, f"must be finite, got {raw!r}")
        if value.is_integer():
            return int(value)
    return value


def _optional_number(record: str, field_name: str, raw: Any) -> Optional[Number]:
    if raw is None or raw == "":
        return None
    return _number(record, field_name, raw)


def _whole(record: str, field_name: str, raw: Any, default: int = 0) -> int:
    """Quantities arrive as numbers; fractional parts are floored."""
    if raw is None or raw == "":
        return default
    return math.floor(_number(record, field_name, raw))


def _flag(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return bool(raw)


def _optional_id(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def _required_id(record: str, raw: Any) -> str:
    value = _optional_id(raw)
    if value is None:
        raise CatalogParseError(record, "id", "is required")
    return value


def _hhmm(record: str, field_name: str, raw: Any) -> Optional[str]:
    if raw is None or raw == "":
        return None
    text = str(raw).strip()
    if not _HHMM.match(text):
        raise CatalogParseError(record, field_name, f"must be HH:MM, got {raw!r}")
    return text[:5]


def _iso_date(record: str, field_name: str, raw: Any) -> Optional[date]:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise CatalogParseError(record, field_name, f"must be YYYY-MM-DD, got {raw!r}") from exc


def _weekdays(record: str, raw: Any) -> Tuple[str, ...]:
    if raw is None or raw == "":
        return ()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise CatalogParseError(record, "promo_days", f"must be a list, got {raw!r}") from exc
    if not isinstance(raw, (list, tuple)):
        raise CatalogParseError(record, "promo_days", f"must be a list, got {raw!r}")
    days = []
    for entry in raw:
        name = str(entry).strip().title()
        if name not in WEEKDAYS:
            raise CatalogParseError(record, "promo_days", f"unknown weekday {entry!r}")
        if name not in days:
            days.append(name)
    return tuple(days)


# ══════════════════════════════════════════════════════════════
# PROMO CONFIG
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PromoConfig:
    """
    Scheduled discount embedded in a sellable item or a StandalonePromo.

    Empty `days` means "any day". Times are HH:MM strings, dates are
    calendar dates; each filter only applies when both bounds are set.
    """

    enabled: bool = False
    promo_type: Optional[PromoType] = None
    value: Optional[Number] = None
    days: Tuple[str, ...] = ()
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    min_purchase: Optional[Number] = None
    description: Optional[str] = None

    def __post_init__(self):
        if self.promo_type is not None and not isinstance(self.promo_type, PromoType):
            raise ValueError("promo_type must be PromoType enum or None.")
        if self.value is not None and self.value < 0:
            raise ValueError("promo value cannot be negative.")
        if not isinstance(self.days, tuple):
            raise ValueError("days must be a tuple.")

    @property
    def is_configured(self) -> bool:
        return self.enabled and self.promo_type is not None and self.value is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], record: str = "promo") -> "PromoConfig":
        raw_type = data.get("promo_type")
        promo_type = None
        if raw_type not in (None, ""):
            try:
                promo_type = PromoType(str(raw_type).strip().lower())
            except ValueError as exc:
                raise CatalogParseError(record, "promo_type", f"unknown type {raw_type!r}") from exc
        value = _optional_number(record, "promo_value", data.get("promo_value"))
        if value is not None and value < 0:
            raise CatalogParseError(record, "promo_value", "cannot be negative")
        return cls(
            enabled=_flag(data.get("promo_enabled", False)),
            promo_type=promo_type,
            value=value,
            days=_weekdays(record, data.get("promo_days")),
            start_time=_hhmm(record, "promo_start_time", data.get("promo_start_time")),
            end_time=_hhmm(record, "promo_end_time", data.get("promo_end_time")),
            start_date=_iso_date(record, "promo_start_date", data.get("promo_start_date")),
            end_date=_iso_date(record, "promo_end_date", data.get("promo_end_date")),
            min_purchase=_optional_number(record, "promo_min_purchase", data.get("promo_min_purchase")),
            description=data.get("promo_description") or None,
        )


@dataclass(frozen=True)
class StandalonePromo:
    """A named promo managed on its own and attached via applied_promo_id."""

    promo_id: str
    name: str
    promo: PromoConfig
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StandalonePromo":
        promo_id = _required_id("promo", data.get("id"))
        is_active = _flag(data.get("is_active", True))
        config = PromoConfig.from_dict(data, record=f"promo[{promo_id}]")
        # Standalone promos have no separate enabled switch.
        config = replace(config, enabled=is_active)
        return cls(
            promo_id=promo_id,
            name=str(data.get("name") or ""),
            promo=config,
            is_active=is_active,
        )


# ══════════════════════════════════════════════════════════════
# PRODUCT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Product:
    """Leaf sellable unit with externally owned, authoritative stock."""

    product_id: str
    name: str
    price: Number
    stock: Number = 0
    deleted: bool = False
    outlet: OutletScope = OutletScope.GLOBAL
    promo: PromoConfig = field(default_factory=PromoConfig)
    applied_promo_id: Optional[str] = None

    kind = ItemKind.PRODUCT

    @property
    def item_id(self) -> str:
        return self.product_id

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Product":
        pid = _required_id("product", data.get("id"))
        record = f"product[{pid}]"
        return cls(
            product_id=pid,
            name=str(data.get("name") or ""),
            price=_number(record, "price", data.get("price", 0) or 0),
            stock=_number(record, "stock", data.get("stock", 0) or 0),
            deleted=_flag(data.get("is_deleted", data.get("deleted", False))),
            outlet=OutletScope.parse(data.get("outlet_id")),
            promo=PromoConfig.from_dict(data, record=record),
            applied_promo_id=_optional_id(data.get("applied_promo_id")),
        )


# ══════════════════════════════════════════════════════════════
# PACKAGE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PackageComponent:
    """One product requirement of a package: `quantity` units per package."""

    product_id: Optional[str]
    quantity: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], record: str) -> "PackageComponent":
        return cls(
            product_id=_optional_id(data.get("product_id", data.get("productId"))),
            quantity=_whole(record, "components.quantity", data.get("quantity")),
        )


@dataclass(frozen=True)
class Package:
    """Composite sellable unit built from Products."""

    package_id: str
    name: str
    price: Number
    components: Tuple[PackageComponent, ...] = ()
    manual_stock_enabled: bool = False
    manual_stock: Optional[Number] = None
    outlet: OutletScope = OutletScope.GLOBAL
    promo: PromoConfig = field(default_factory=PromoConfig)
    applied_promo_id: Optional[str] = None
    deleted: bool = False
    is_active: bool = True

    kind = ItemKind.PACKAGE

    def __post_init__(self):
        if not isinstance(self.components, tuple):
            raise ValueError("components must be a tuple.")

    @property
    def item_id(self) -> str:
        return self.package_id

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Package":
        pkg_id = _required_id("package", data.get("id"))
        record = f"package[{pkg_id}]"
        raw_components = data.get("components") or data.get("items") or []
        return cls(
            package_id=pkg_id,
            name=str(data.get("name") or ""),
            price=_number(record, "price", data.get("price", 0) or 0),
            components=tuple(PackageComponent.from_dict(c, record) for c in raw_components),
            manual_stock_enabled=_flag(data.get("manual_stock_enabled", False)),
            manual_stock=_optional_number(record, "manual_stock", data.get("manual_stock")),
            outlet=OutletScope.parse(data.get("outlet_id")),
            promo=PromoConfig.from_dict(data, record=record),
            applied_promo_id=_optional_id(data.get("applied_promo_id")),
            deleted=_flag(data.get("is_deleted", data.get("deleted", False))),
            is_active=_flag(data.get("is_active", True)),
        )


# ══════════════════════════════════════════════════════════════
# BUNDLE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BundleItem:
    """
    One bundle line: either a Product or a Package (tagged by is_package).
    A Bundle can never be referenced here.
    """

    quantity: int
    is_package: bool = False
    product_id: Optional[str] = None
    package_id: Optional[str] = None

    @property
    def reference_id(self) -> Optional[str]:
        return self.package_id if self.is_package else self.product_id

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], record: str) -> "BundleItem":
        return cls(
            quantity=_whole(record, "items.quantity", data.get("quantity")),
            is_package=_flag(data.get("is_package", data.get("isPackage", False))),
            product_id=_optional_id(data.get("product_id", data.get("productId"))),
            package_id=_optional_id(data.get("package_id", data.get("packageId"))),
        )


@dataclass(frozen=True)
class Bundle:
    """Composite sellable unit built from Products and/or Packages."""

    bundle_id: str
    name: str
    price: Number
    items: Tuple[BundleItem, ...] = ()
    manual_stock_enabled: bool = False
    manual_stock: Optional[Number] = None
    outlet: OutletScope = OutletScope.GLOBAL
    promo: PromoConfig = field(default_factory=PromoConfig)
    applied_promo_id: Optional[str] = None
    is_active: bool = True

    kind = ItemKind.BUNDLE

    def __post_init__(self):
        if not isinstance(self.items, tuple):
            raise ValueError("items must be a tuple.")

    @property
    def item_id(self) -> str:
        return self.bundle_id

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Bundle":
        bundle_id = _required_id("bundle", data.get("id"))
        record = f"bundle[{bundle_id}]"
        return cls(
            bundle_id=bundle_id,
            name=str(data.get("name") or ""),
            price=_number(record, "price", data.get("price", 0) or 0),
            items=tuple(BundleItem.from_dict(i, record) for i in data.get("items") or []),
            manual_stock_enabled=_flag(data.get("manual_stock_enabled", False)),
            manual_stock=_optional_number(record, "manual_stock", data.get("manual_stock")),
            outlet=OutletScope.parse(data.get("outlet_id")),
            promo=PromoConfig.from_dict(data, record=record),
            applied_promo_id=_optional_id(data.get("applied_promo_id")),
            is_active=_flag(data.get("is_active", True)),
        )


SellableItem = Union[Product, Package, Bundle]


# ══════════════════════════════════════════════════════════════
# CATALOG SNAPSHOT
# ══════════════════════════════════════════════════════════════

def _index(records: Iterable[Any], key: str) -> Dict[str, Any]:
    return {getattr(r, key): r for r in records}


@dataclass(frozen=True)
class CatalogSnapshot:
    """
    Point-in-time copy of the catalog, keyed by id.

    fetched_at records when the backend data was read; stock derived
    from a snapshot is only as fresh as this instant.
    """

    products: Dict[str, Product] = field(default_factory=dict)
    packages: Dict[str, Package] = field(default_factory=dict)
    bundles: Dict[str, Bundle] = field(default_factory=dict)
    promos: Dict[str, StandalonePromo] = field(default_factory=dict)
    fetched_at: datetime = field(default_factory=lambda: datetime.fromtimestamp(0, timezone.utc))

    def __post_init__(self):
        if self.fetched_at.tzinfo is None:
            raise ValueError("fetched_at must be timezone-aware.")

    @classmethod
    def build(
        cls,
        *,
        products: Iterable[Product] = (),
        packages: Iterable[Package] = (),
        bundles: Iterable[Bundle] = (),
        promos: Iterable[StandalonePromo] = (),
        fetched_at: datetime,
    ) -> "CatalogSnapshot":
        return cls(
            products=_index(products, "product_id"),
            packages=_index(packages, "package_id"),
            bundles=_index(bundles, "bundle_id"),
            promos=_index(promos, "promo_id"),
            fetched_at=fetched_at,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], fetched_at: datetime) -> "CatalogSnapshot":
        for key in ("products", "packages", "bundles", "promos"):
            if not isinstance(data.get(key, []), list):
                raise CatalogParseError("snapshot", key, "must be a list")
        return cls.build(
            products=[Product.from_dict(p) for p in data.get("products", [])],
            packages=[Package.from_dict(p) for p in data.get("packages", [])],
            bundles=[Bundle.from_dict(b) for b in data.get("bundles", [])],
            promos=[StandalonePromo.from_dict(p) for p in data.get("promos", [])],
            fetched_at=fetched_at,
        )

    def scoped(self, scope: OutletScope) -> "CatalogSnapshot":
        """Only the items affiliated with exactly `scope`. Promos are shared."""
        return CatalogSnapshot(
            products={k: v for k, v in self.products.items() if v.outlet == scope},
            packages={k: v for k, v in self.packages.items() if v.outlet == scope},
            bundles={k: v for k, v in self.bundles.items() if v.outlet == scope},
            promos=dict(self.promos),
            fetched_at=self.fetched_at,
        )

    def lookup(self, kind: ItemKind, item_id: str) -> Optional[SellableItem]:
        if kind is ItemKind.PRODUCT:
            return self.products.get(item_id)
        if kind is ItemKind.PACKAGE:
            return self.packages.get(item_id)
        return self.bundles.get(item_id)

    def iter_items(self) -> Iterable[SellableItem]:
        yield from self.products.values()
        yield from self.packages.values()
        yield from self.bundles.values()

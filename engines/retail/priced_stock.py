"""
POSQ Retail Engine — Priced Stock View
========================================
What the storefront and cashier screens render for each sellable item:
derived stock and effective price, computed side by side from one
catalog snapshot at one reference instant.

Stock and price are independent derivations; neither reads the
other's output. A view is a render-time value only. Anything that
commits stock (checkout) re-derives from a fresh snapshot instead of
reusing a view (see engines.retail.policies).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Tuple

from core.config import StoreRule
from core.primitives.catalog import CatalogSnapshot, ItemKind, Number, SellableItem
from core.time import Clock, resolve_now
from engines.inventory.stock_engine import derive_item_stock
from engines.promotion.describe import format_promo_description, promo_schedule
from engines.promotion.pricing import effective_price, resolve_promo

logger = logging.getLogger("posq.retail")


@dataclass(frozen=True)
class PricedStockEntry:
    kind: ItemKind
    item_id: str
    name: str
    stock: int
    unit_price: Number
    price: Number
    has_discount: bool
    discount_amount: Number
    promo_label: str = ""
    promo_schedule: str = ""

    @property
    def is_available(self) -> bool:
        return self.stock > 0

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "item_id": self.item_id,
            "name": self.name,
            "stock": self.stock,
            "unit_price": self.unit_price,
            "price": self.price,
            "has_discount": self.has_discount,
            "discount_amount": self.discount_amount,
            "promo_label": self.promo_label,
            "promo_schedule": self.promo_schedule,
        }


@dataclass(frozen=True)
class PricedStockView:
    """Entries for every sellable item, stamped with when they were derived."""
    entries: Tuple[PricedStockEntry, ...]
    derived_at: datetime
    snapshot_fetched_at: datetime

    def get(self, kind: ItemKind, item_id: str) -> Optional[PricedStockEntry]:
        for entry in self.entries:
            if entry.kind is kind and entry.item_id == item_id:
                return entry
        return None

    def by_kind(self, kind: ItemKind) -> Tuple[PricedStockEntry, ...]:
        return tuple(e for e in self.entries if e.kind is kind)

    def to_dict(self) -> dict:
        grouped: Dict[str, list] = {k.value: [] for k in ItemKind}
        for entry in self.entries:
            grouped[entry.kind.value].append(entry.to_dict())
        return {
            "derived_at": self.derived_at.isoformat(),
            "snapshot_fetched_at": self.snapshot_fetched_at.isoformat(),
            "items": grouped,
        }


def _entry(
    item: SellableItem,
    stock: int,
    snapshot: CatalogSnapshot,
    now: datetime,
    rule: StoreRule,
) -> PricedStockEntry:
    quote = effective_price(item, now, snapshot.promos, store_tz=rule.tzinfo)
    promo = resolve_promo(item, snapshot.promos)
    return PricedStockEntry(
        kind=item.kind,
        item_id=item.item_id,
        name=item.name,
        stock=stock,
        unit_price=item.price,
        price=quote.price,
        has_discount=quote.has_discount,
        discount_amount=quote.discount_amount,
        promo_label=format_promo_description(promo) if promo else "",
        promo_schedule=promo_schedule(promo) if promo else "",
    )


def build_priced_stock_view(
    snapshot: CatalogSnapshot,
    now: Optional[datetime] = None,
    rule: Optional[StoreRule] = None,
    *,
    clock: Optional[Clock] = None,
) -> PricedStockView:
    """
    Derive stock, then price, for every live item in the snapshot.
    Deleted products and packages are omitted.
    """
    current = resolve_now(now, clock)
    rule = rule or StoreRule()
    entries = []
    for item in snapshot.iter_items():
        stock = derive_item_stock(snapshot, item.kind, item.item_id)
        if stock is None:
            continue
        entries.append(_entry(item, stock, snapshot, current, rule))

    logger.debug(
        "Priced stock view: %d entries (snapshot fetched %s)",
        len(entries), snapshot.fetched_at.isoformat(),
    )
    return PricedStockView(
        entries=tuple(entries),
        derived_at=current,
        snapshot_fetched_at=snapshot.fetched_at,
    )

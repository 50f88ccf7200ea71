"""
POSQ Retail Engine — Checkout Policies
========================================
Last check before a sale commits stock.

Stock is always re-derived here from the snapshot handed in, which the
caller must have fetched for this checkout; a previously rendered
PricedStockView is never trusted. A snapshot older than the store's
max_snapshot_age_seconds is refused outright.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from core.commands.rejection import ReasonCode, RejectionReason
from core.config import StoreRule
from core.primitives.catalog import CatalogParseError, CatalogSnapshot, ItemKind, Number
from core.time import Clock, age_seconds, is_expired, resolve_now
from engines.inventory.stock_engine import derive_item_stock
from engines.promotion.pricing import PriceQuote, effective_price, meets_minimum_purchase, resolve_promo

logger = logging.getLogger("posq.retail")


# ══════════════════════════════════════════════════════════════
# CART LINES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CartLine:
    kind: ItemKind
    item_id: str
    quantity: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartLine":
        try:
            kind = ItemKind(str(data.get("kind", "")).strip().lower())
        except ValueError as exc:
            raise CatalogParseError("cart_line", "kind", f"unknown kind {data.get('kind')!r}") from exc
        item_id = data.get("item_id")
        if item_id is None or str(item_id).strip() == "":
            raise CatalogParseError("cart_line", "item_id", "is required")
        quantity = data.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise CatalogParseError("cart_line", "quantity", f"must be an integer, got {quantity!r}")
        return cls(kind=kind, item_id=str(item_id).strip(), quantity=quantity)


@dataclass(frozen=True)
class PricedCartLine:
    kind: ItemKind
    item_id: str
    quantity: int
    available: int
    unit_price: Number
    price: Number
    discount_amount: Number
    promo_applied: bool

    @property
    def subtotal(self) -> Number:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "item_id": self.item_id,
            "quantity": self.quantity,
            "available": self.available,
            "unit_price": self.unit_price,
            "price": self.price,
            "discount_amount": self.discount_amount,
            "promo_applied": self.promo_applied,
            "subtotal": self.subtotal,
        }


@dataclass(frozen=True)
class CheckoutValidation:
    accepted: bool
    rejections: Tuple[RejectionReason, ...]
    lines: Tuple[PricedCartLine, ...]

    @property
    def total(self) -> Number:
        return sum((line.subtotal for line in self.lines), 0)

    def to_dict(self) -> dict:
        return {
            "accepted": self.accepted,
            "rejections": [r.to_dict() for r in self.rejections],
            "lines": [line.to_dict() for line in self.lines],
            "total": self.total,
        }


# ══════════════════════════════════════════════════════════════
# POLICIES
# ══════════════════════════════════════════════════════════════

def snapshot_freshness_policy(
    snapshot: CatalogSnapshot,
    now: datetime,
    rule: StoreRule,
) -> Optional[RejectionReason]:
    """Refuse to commit against a snapshot older than the store allows."""
    if is_expired(snapshot.fetched_at, rule.max_snapshot_age_seconds, now):
        age = age_seconds(snapshot.fetched_at, now)
        return RejectionReason(
            code=ReasonCode.SNAPSHOT_STALE,
            message=(
                f"Catalog snapshot is {int(age)}s old; "
                f"re-fetch (limit {rule.max_snapshot_age_seconds}s)."
            ),
            policy_name="snapshot_freshness_policy",
            params={"age_seconds": int(age), "limit_seconds": rule.max_snapshot_age_seconds},
        )
    return None


def positive_quantity_policy(line: CartLine) -> Optional[RejectionReason]:
    if line.quantity <= 0:
        return RejectionReason(
            code=ReasonCode.INVALID_QUANTITY,
            message=f"Quantity for {line.kind.value} '{line.item_id}' must be positive.",
            policy_name="positive_quantity_policy",
            params={"item_id": line.item_id, "quantity": line.quantity},
        )
    return None


def item_exists_policy(
    kind: ItemKind,
    item_id: str,
    available: Optional[int],
) -> Optional[RejectionReason]:
    if available is None:
        return RejectionReason(
            code=ReasonCode.ITEM_NOT_FOUND,
            message=f"{kind.value.capitalize()} '{item_id}' is no longer in the catalog.",
            policy_name="item_exists_policy",
            params={"kind": kind.value, "item_id": item_id},
        )
    return None


def sufficient_stock_policy(
    kind: ItemKind,
    item_id: str,
    requested: int,
    available: int,
) -> Optional[RejectionReason]:
    """Requested units (summed over the cart) must not exceed derived stock."""
    if requested > available:
        return RejectionReason(
            code=ReasonCode.INSUFFICIENT_STOCK,
            message=(
                f"Insufficient stock for {kind.value} '{item_id}': "
                f"{available} available, {requested} requested."
            ),
            policy_name="sufficient_stock_policy",
            params={
                "kind": kind.value,
                "item_id": item_id,
                "available": available,
                "requested": requested,
            },
        )
    return None


# ══════════════════════════════════════════════════════════════
# CHECKOUT
# ══════════════════════════════════════════════════════════════

def _price_line(
    line: CartLine,
    available: int,
    snapshot: CatalogSnapshot,
    now: datetime,
    rule: StoreRule,
) -> PricedCartLine:
    item = snapshot.lookup(line.kind, line.item_id)
    quote = effective_price(item, now, snapshot.promos, store_tz=rule.tzinfo)
    if quote.has_discount:
        promo = resolve_promo(item, snapshot.promos)
        if not meets_minimum_purchase(line.quantity, item.price, promo.min_purchase):
            quote = PriceQuote(price=item.price, has_discount=False, discount_amount=0)
    return PricedCartLine(
        kind=line.kind,
        item_id=line.item_id,
        quantity=line.quantity,
        available=available,
        unit_price=item.price,
        price=quote.price,
        discount_amount=quote.discount_amount,
        promo_applied=quote.has_discount,
    )


def validate_checkout(
    lines: Iterable[CartLine],
    snapshot: CatalogSnapshot,
    now: Optional[datetime] = None,
    rule: Optional[StoreRule] = None,
    *,
    clock: Optional[Clock] = None,
) -> CheckoutValidation:
    """
    Re-derive stock and price for every cart line against `snapshot`.

    All rejections are collected (not just the first) so the cashier
    sees every problem at once. Lines are priced only when accepted.
    """
    current = resolve_now(now, clock)
    rule = rule or StoreRule()
    if current.tzinfo is None:
        current = current.replace(tzinfo=rule.tzinfo)
    lines = tuple(lines)
    rejections: List[RejectionReason] = []

    stale = snapshot_freshness_policy(snapshot, current, rule)
    if stale is not None:
        logger.info("Checkout refused: %s", stale.message)
        return CheckoutValidation(accepted=False, rejections=(stale,), lines=())

    requested: Dict[Tuple[ItemKind, str], int] = {}
    for line in lines:
        reason = positive_quantity_policy(line)
        if reason is not None:
            rejections.append(reason)
            continue
        key = (line.kind, line.item_id)
        requested[key] = requested.get(key, 0) + line.quantity

    available: Dict[Tuple[ItemKind, str], int] = {}
    for (kind, item_id), total in requested.items():
        stock = derive_item_stock(snapshot, kind, item_id)
        reason = item_exists_policy(kind, item_id, stock)
        if reason is None:
            reason = sufficient_stock_policy(kind, item_id, total, stock)
        if reason is not None:
            rejections.append(reason)
            continue
        available[(kind, item_id)] = stock

    if rejections:
        logger.info(
            "Checkout refused: %s",
            ", ".join(r.code for r in rejections),
        )
        return CheckoutValidation(accepted=False, rejections=tuple(rejections), lines=())

    priced = tuple(
        _price_line(line, available[(line.kind, line.item_id)], snapshot, current, rule)
        for line in lines
    )
    return CheckoutValidation(accepted=True, rejections=(), lines=priced)

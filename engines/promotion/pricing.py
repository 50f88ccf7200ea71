"""
POSQ Promotion Engine — Effective Price
=========================================
Turns an item's promo (embedded or standalone) and a reference instant
into the price charged.

RULES (NON-NEGOTIABLE):
- At most one promo applies to an item
- Percentage discounts round half-up to whole currency units
- Price never goes below zero; the reported discount is the amount
  actually taken off (price - final price)
- Missing promo fields never raise; they mean "no discount"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional

from core.primitives.catalog import Number, PromoConfig, PromoType, SellableItem, StandalonePromo
from core.time import Clock
from engines.promotion.window import is_config_active

logger = logging.getLogger("posq.promotion")


@dataclass(frozen=True)
class PriceQuote:
    """Price for one unit after any active promo."""
    price: Number
    has_discount: bool
    discount_amount: Number

    def to_dict(self) -> dict:
        return {
            "price": self.price,
            "has_discount": self.has_discount,
            "discount_amount": self.discount_amount,
        }


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def promo_discount(price: Number, promo_type: PromoType, value: Number) -> Number:
    """Requested (unclamped) discount for one unit."""
    if promo_type is PromoType.PERCENTAGE:
        return _round_half_up(Decimal(str(price)) * Decimal(str(value)) / Decimal(100))
    return value


def calculate_promo_price(original_price: Number, promo_type: PromoType, value: Number) -> Number:
    """Discounted unit price, clamped at zero."""
    return max(0, original_price - promo_discount(original_price, promo_type, value))


def resolve_promo(
    item: SellableItem,
    promos_by_id: Optional[Mapping[str, StandalonePromo]] = None,
) -> Optional[PromoConfig]:
    """
    The single promo that governs `item`, if any.

    The item's own promo wins when enabled; otherwise the active
    standalone promo named by applied_promo_id.
    """
    if item.promo.enabled:
        return item.promo
    if item.applied_promo_id and promos_by_id:
        standalone = promos_by_id.get(item.applied_promo_id)
        if standalone is not None and standalone.is_active:
            return standalone.promo
    return None


def quote(
    price: Number,
    promo: Optional[PromoConfig],
    now: Optional[datetime] = None,
    *,
    store_tz: Optional[tzinfo] = None,
    clock: Optional[Clock] = None,
) -> PriceQuote:
    """Price a unit under `promo` at `now`."""
    undiscounted = PriceQuote(price=price, has_discount=False, discount_amount=0)
    if promo is None or not promo.is_configured:
        return undiscounted
    if not is_config_active(promo, now, store_tz=store_tz, clock=clock):
        return undiscounted

    final = calculate_promo_price(price, promo.promo_type, promo.value)
    return PriceQuote(price=final, has_discount=True, discount_amount=price - final)


def effective_price(
    item: SellableItem,
    now: Optional[datetime] = None,
    promos_by_id: Optional[Mapping[str, StandalonePromo]] = None,
    *,
    store_tz: Optional[tzinfo] = None,
    clock: Optional[Clock] = None,
) -> PriceQuote:
    """Unit price of a Product, Package or Bundle at `now`."""
    promo = resolve_promo(item, promos_by_id)
    result = quote(item.price, promo, now, store_tz=store_tz, clock=clock)
    if result.has_discount:
        logger.debug(
            "Promo applied to %s %s: %s -> %s",
            item.kind.value, item.item_id, item.price, result.price,
        )
    return result


def meets_minimum_purchase(
    quantity: Number,
    unit_price: Number,
    min_purchase: Optional[Number] = None,
) -> bool:
    """True when no threshold is set (None or 0) or the subtotal reaches it."""
    if not min_purchase:
        return True
    return quantity * unit_price >= min_purchase

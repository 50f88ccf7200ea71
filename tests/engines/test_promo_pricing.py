"""
POSQ — Promo Pricing Tests
============================
Effective price, promo resolution, minimum purchase, display strings
and operator-side promo validation.
"""

from datetime import date, datetime, timezone

import pytest

from core.commands.rejection import ReasonCode
from core.primitives.catalog import (
    Package,
    PackageComponent,
    Product,
    PromoConfig,
    PromoType,
    StandalonePromo,
)
from core.time import FixedClock
from engines.promotion.describe import format_promo_description, format_rupiah, promo_schedule
from engines.promotion.policies import validate_promo_config
from engines.promotion.pricing import (
    calculate_promo_price,
    effective_price,
    meets_minimum_purchase,
    promo_discount,
    quote,
    resolve_promo,
)

MONDAY_10AM = datetime(2026, 3, 2, 10, 0)
TUESDAY_10AM = datetime(2026, 3, 3, 10, 0)


def _promo(**overrides):
    fields = dict(enabled=True, promo_type=PromoType.PERCENTAGE, value=20)
    fields.update(overrides)
    return PromoConfig(**fields)


def _product(promo=None, applied_promo_id=None, price=10000):
    return Product(
        product_id="A", name="Kopi", price=price, stock=10,
        promo=promo or PromoConfig(), applied_promo_id=applied_promo_id,
    )


# ══════════════════════════════════════════════════════════════
# ARITHMETIC
# ══════════════════════════════════════════════════════════════

class TestCalculatePromoPrice:
    def test_percentage(self):
        assert calculate_promo_price(10000, PromoType.PERCENTAGE, 20) == 8000

    def test_fixed(self):
        assert calculate_promo_price(10000, PromoType.FIXED, 2500) == 7500

    def test_fixed_clamped_at_zero(self):
        assert calculate_promo_price(10000, PromoType.FIXED, 15000) == 0

    def test_percentage_over_hundred_clamped(self):
        assert calculate_promo_price(10000, PromoType.PERCENTAGE, 150) == 0

    @pytest.mark.parametrize("price,pct,expected_discount", [
        (999, 50, 500),     # 499.5 rounds up
        (1001, 50, 501),    # 500.5 rounds up
        (333, 10, 33),      # 33.3 rounds down
        (15000, 12.5, 1875),
    ])
    def test_percentage_rounds_half_up(self, price, pct, expected_discount):
        assert promo_discount(price, PromoType.PERCENTAGE, pct) == expected_discount
        assert calculate_promo_price(price, PromoType.PERCENTAGE, pct) == price - expected_discount


class TestQuote:
    def test_active_percentage(self):
        result = quote(10000, _promo(days=("Monday",)), MONDAY_10AM)
        assert result.price == 8000
        assert result.has_discount
        assert result.discount_amount == 2000

    def test_inactive_day(self):
        result = quote(10000, _promo(days=("Monday",)), TUESDAY_10AM)
        assert result.price == 10000
        assert not result.has_discount
        assert result.discount_amount == 0

    def test_discount_reports_amount_actually_taken(self):
        result = quote(10000, _promo(promo_type=PromoType.FIXED, value=15000), MONDAY_10AM)
        assert result.price == 0
        assert result.discount_amount == 10000

    def test_disabled_promo(self):
        result = quote(10000, _promo(enabled=False), MONDAY_10AM)
        assert not result.has_discount

    def test_missing_type_or_value(self):
        assert not quote(10000, _promo(promo_type=None), MONDAY_10AM).has_discount
        assert not quote(10000, _promo(value=None), MONDAY_10AM).has_discount

    def test_zero_value_still_flags_discount(self):
        result = quote(10000, _promo(value=0), MONDAY_10AM)
        assert result.has_discount
        assert result.price == 10000
        assert result.discount_amount == 0

    def test_no_promo(self):
        assert quote(10000, None, MONDAY_10AM).to_dict() == {
            "price": 10000, "has_discount": False, "discount_amount": 0,
        }


# ══════════════════════════════════════════════════════════════
# PROMO RESOLUTION
# ══════════════════════════════════════════════════════════════

class TestResolvePromo:
    def _standalone(self, active=True, value=5000):
        config = PromoConfig(enabled=active, promo_type=PromoType.FIXED, value=value)
        return StandalonePromo(promo_id="9", name="Payday", promo=config, is_active=active)

    def test_embedded_promo(self):
        embedded = _promo()
        assert resolve_promo(_product(promo=embedded)) is embedded

    def test_standalone_promo(self):
        standalone = self._standalone()
        item = _product(applied_promo_id="9")
        assert resolve_promo(item, {"9": standalone}) is standalone.promo

    def test_embedded_wins_over_standalone(self):
        embedded = _promo()
        item = _product(promo=embedded, applied_promo_id="9")
        assert resolve_promo(item, {"9": self._standalone()}) is embedded

    def test_inactive_standalone_ignored(self):
        item = _product(applied_promo_id="9")
        assert resolve_promo(item, {"9": self._standalone(active=False)}) is None

    def test_unknown_standalone_ignored(self):
        assert resolve_promo(_product(applied_promo_id="404"), {}) is None

    def test_disabled_embedded_falls_through(self):
        item = _product(promo=_promo(enabled=False), applied_promo_id="9")
        standalone = self._standalone()
        assert resolve_promo(item, {"9": standalone}) is standalone.promo


class TestEffectivePrice:
    def test_product_with_standalone_promo(self):
        standalone = StandalonePromo(
            promo_id="9", name="Payday",
            promo=PromoConfig(enabled=True, promo_type=PromoType.FIXED, value=2500),
        )
        result = effective_price(_product(applied_promo_id="9"), MONDAY_10AM, {"9": standalone})
        assert result.price == 7500
        assert result.discount_amount == 2500

    def test_package_embedded_promo(self):
        pkg = Package(
            package_id="P1", name="Paket", price=30000,
            components=(PackageComponent("A", 1),),
            promo=_promo(value=10, start_time="08:00", end_time="11:00"),
        )
        assert effective_price(pkg, MONDAY_10AM).price == 27000
        assert effective_price(pkg, datetime(2026, 3, 2, 12, 0)).price == 30000

    def test_utc_clock_read_on_default_store_timezone(self):
        # 03:00 UTC Monday is 10:00 Monday in Jakarta.
        promo = _promo(
            promo_type=PromoType.FIXED, value=5000,
            days=("Monday",), start_time="08:00", end_time="17:00",
        )
        clock = FixedClock(datetime(2026, 3, 2, 3, 0, tzinfo=timezone.utc))
        result = effective_price(_product(promo=promo), clock=clock)
        assert result.has_discount
        assert result.price == 5000
        assert result.discount_amount == 5000


# ══════════════════════════════════════════════════════════════
# MINIMUM PURCHASE
# ══════════════════════════════════════════════════════════════

class TestMinimumPurchase:
    @pytest.mark.parametrize("minimum", [None, 0])
    def test_unset_threshold(self, minimum):
        assert meets_minimum_purchase(1, 1000, minimum)

    def test_reached(self):
        assert meets_minimum_purchase(5, 10000, 50000)

    def test_not_reached(self):
        assert not meets_minimum_purchase(4, 10000, 50000)


# ══════════════════════════════════════════════════════════════
# DISPLAY STRINGS
# ══════════════════════════════════════════════════════════════

class TestDescribe:
    def test_format_rupiah(self):
        assert format_rupiah(5000) == "5.000"
        assert format_rupiah(1250000) == "1.250.000"
        assert format_rupiah(0) == "0"

    def test_percentage_description(self):
        assert format_promo_description(_promo(value=20)) == "Diskon 20%"
        assert format_promo_description(_promo(value=12.5)) == "Diskon 12.5%"

    def test_fixed_description(self):
        promo = _promo(promo_type=PromoType.FIXED, value=5000)
        assert format_promo_description(promo) == "Diskon Rp 5.000"

    def test_unconfigured_description(self):
        assert format_promo_description(PromoConfig()) == ""

    def test_schedule_every_day(self):
        promo = _promo(
            days=("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
            start_time="08:00",
            end_time="17:00",
        )
        assert promo_schedule(promo) == "Setiap hari • 08:00 - 17:00"

    def test_schedule_days_and_dates(self):
        promo = _promo(
            days=("Monday", "Friday"),
            start_date=date(2026, 3, 1),
            end_date=date(2026, 8, 17),
        )
        assert promo_schedule(promo) == "Sen, Jum • 1 Mar - 17 Agu"

    def test_schedule_empty(self):
        assert promo_schedule(_promo()) == ""


# ══════════════════════════════════════════════════════════════
# CONFIGURATION POLICIES
# ══════════════════════════════════════════════════════════════

class TestValidatePromoConfig:
    def _valid(self, **overrides):
        fields = dict(days=("Monday",), start_time="08:00", end_time="17:00")
        fields.update(overrides)
        return _promo(**fields)

    def test_valid_promo(self):
        result = validate_promo_config(self._valid())
        assert result.valid
        assert result.errors == ()

    def test_disabled_promo_always_valid(self):
        assert validate_promo_config(PromoConfig(enabled=False)).valid

    def test_percentage_over_hundred(self):
        result = validate_promo_config(self._valid(value=120))
        assert not result.valid
        assert [e.code for e in result.errors] == [ReasonCode.PROMO_PERCENTAGE_TOO_HIGH]
        assert result.messages() == ("Percentage discount cannot exceed 100%.",)

    def test_zero_value(self):
        result = validate_promo_config(self._valid(value=0))
        assert [e.code for e in result.errors] == [ReasonCode.PROMO_VALUE_INVALID]

    def test_time_order(self):
        result = validate_promo_config(self._valid(start_time="17:00", end_time="08:00"))
        assert [e.code for e in result.errors] == [ReasonCode.PROMO_TIME_ORDER]

    def test_date_order(self):
        result = validate_promo_config(
            self._valid(start_date=date(2026, 3, 5), end_date=date(2026, 3, 1))
        )
        assert [e.code for e in result.errors] == [ReasonCode.PROMO_DATE_ORDER]

    def test_collects_every_error(self):
        result = validate_promo_config(PromoConfig(enabled=True))
        assert [e.code for e in result.errors] == [
            ReasonCode.PROMO_TYPE_REQUIRED,
            ReasonCode.PROMO_VALUE_INVALID,
            ReasonCode.PROMO_DAYS_REQUIRED,
            ReasonCode.PROMO_TIME_REQUIRED,
        ]

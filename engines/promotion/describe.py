"""
POSQ Promotion Engine — Display Strings
=========================================
Human-readable promo labels shown on product cards and the cashier
screen (Indonesian locale).
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Tuple

from core.primitives.catalog import WEEKDAYS, Number, PromoConfig, PromoType

DAY_LABELS: Dict[str, str] = {
    "Monday": "Sen",
    "Tuesday": "Sel",
    "Wednesday": "Rab",
    "Thursday": "Kam",
    "Friday": "Jum",
    "Saturday": "Sab",
    "Sunday": "Min",
}

MONTH_LABELS: Tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "Mei", "Jun",
    "Jul", "Agu", "Sep", "Okt", "Nov", "Des",
)

SEPARATOR = " • "


def format_rupiah(amount: Number) -> str:
    """5000 -> '5.000'; 1250.5 -> '1.250,5'."""
    if isinstance(amount, float) and not amount.is_integer():
        whole, _, fraction = f"{amount:.2f}".partition(".")
        fraction = fraction.rstrip("0")
        return f"{int(whole):,}".replace(",", ".") + "," + fraction
    return f"{int(amount):,}".replace(",", ".")


def _short_date(value: date) -> str:
    return f"{value.day} {MONTH_LABELS[value.month - 1]}"


def format_promo_description(promo: PromoConfig) -> str:
    """'Diskon 20%' / 'Diskon Rp 5.000', or '' when the promo is not configured."""
    if not promo.is_configured:
        return ""
    if promo.promo_type is PromoType.PERCENTAGE:
        value = promo.value
        shown = int(value) if float(value).is_integer() else value
        return f"Diskon {shown}%"
    return f"Diskon Rp {format_rupiah(promo.value)}"


def promo_schedule(promo: PromoConfig) -> str:
    """Days, time range and date range joined with bullets."""
    parts = []

    if promo.days:
        if len(promo.days) == len(WEEKDAYS):
            parts.append("Setiap hari")
        else:
            parts.append(", ".join(DAY_LABELS.get(d, d) for d in promo.days))

    if promo.start_time and promo.end_time:
        parts.append(f"{promo.start_time} - {promo.end_time}")

    if promo.start_date and promo.end_date:
        parts.append(f"{_short_date(promo.start_date)} - {_short_date(promo.end_date)}")

    return SEPARATOR.join(parts)

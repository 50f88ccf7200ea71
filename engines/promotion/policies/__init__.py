"""
POSQ Promotion Engine — Configuration Policies
================================================
Rules an operator-entered promo must satisfy before it is saved.
Evaluation never depends on these: a promo that breaks them is still
evaluated by the window and pricing rules as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from core.commands.rejection import ReasonCode, RejectionReason
from core.primitives.catalog import PromoConfig, PromoType


@dataclass(frozen=True)
class PromoValidationResult:
    valid: bool
    errors: Tuple[RejectionReason, ...] = ()

    def messages(self) -> Tuple[str, ...]:
        return tuple(e.message for e in self.errors)


def promo_type_required_policy(promo: PromoConfig) -> Optional[RejectionReason]:
    if promo.promo_type is None:
        return RejectionReason(
            code=ReasonCode.PROMO_TYPE_REQUIRED,
            message="Promo type must be selected.",
            policy_name="promo_type_required_policy")
    return None


def promo_value_positive_policy(promo: PromoConfig) -> Optional[RejectionReason]:
    if promo.value is None or promo.value <= 0:
        return RejectionReason(
            code=ReasonCode.PROMO_VALUE_INVALID,
            message="Promo value must be greater than 0.",
            policy_name="promo_value_positive_policy")
    return None


def percentage_cap_policy(promo: PromoConfig) -> Optional[RejectionReason]:
    if promo.promo_type is PromoType.PERCENTAGE and promo.value and promo.value > 100:
        return RejectionReason(
            code=ReasonCode.PROMO_PERCENTAGE_TOO_HIGH,
            message="Percentage discount cannot exceed 100%.",
            policy_name="percentage_cap_policy",
            params={"value": promo.value})
    return None


def days_required_policy(promo: PromoConfig) -> Optional[RejectionReason]:
    if not promo.days:
        return RejectionReason(
            code=ReasonCode.PROMO_DAYS_REQUIRED,
            message="Select at least one day for the promo.",
            policy_name="days_required_policy")
    return None


def time_range_required_policy(promo: PromoConfig) -> Optional[RejectionReason]:
    if not promo.start_time or not promo.end_time:
        return RejectionReason(
            code=ReasonCode.PROMO_TIME_REQUIRED,
            message="Promo start and end time are required.",
            policy_name="time_range_required_policy")
    return None


def time_range_order_policy(promo: PromoConfig) -> Optional[RejectionReason]:
    if promo.start_time and promo.end_time and promo.start_time >= promo.end_time:
        return RejectionReason(
            code=ReasonCode.PROMO_TIME_ORDER,
            message="Promo end time must be later than start time.",
            policy_name="time_range_order_policy",
            params={"start_time": promo.start_time, "end_time": promo.end_time})
    return None


def date_range_order_policy(promo: PromoConfig) -> Optional[RejectionReason]:
    if promo.start_date and promo.end_date and promo.start_date > promo.end_date:
        return RejectionReason(
            code=ReasonCode.PROMO_DATE_ORDER,
            message="Promo end date must not be before start date.",
            policy_name="date_range_order_policy",
            params={
                "start_date": promo.start_date.isoformat(),
                "end_date": promo.end_date.isoformat(),
            })
    return None


PROMO_CONFIG_POLICIES = (
    promo_type_required_policy,
    promo_value_positive_policy,
    percentage_cap_policy,
    days_required_policy,
    time_range_required_policy,
    time_range_order_policy,
    date_range_order_policy,
)


def validate_promo_config(promo: PromoConfig) -> PromoValidationResult:
    """Run every policy against an enabled promo; disabled promos always pass."""
    if not promo.enabled:
        return PromoValidationResult(valid=True)
    errors = tuple(
        reason for reason in (policy(promo) for policy in PROMO_CONFIG_POLICIES)
        if reason is not None
    )
    return PromoValidationResult(valid=not errors, errors=errors)

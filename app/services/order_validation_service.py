"""Whole-cart validation before an order is accepted."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.order_rules import ORDER_RULES, ItemAvailabilityRule, OrderRules
from app.services.availability_service import AvailabilityResult, evaluate_item

BLACKOUT_ORDER_ERROR: str = "Online ordering is not available on this date. Please call the bakery."


class CartLine(BaseModel):
    """One requested item and quantity."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    quantity: int = Field(ge=1)


class OrderValidationResult(BaseModel):
    """All rule violations found in a cart."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: list[str] = Field(default_factory=list)


def daily_limit_error(rule: ItemAvailabilityRule) -> str:
    return (
        f"Maximum {rule.daily_limit} {rule.display_name} can be ordered online. "
        "For larger orders, please call the bakery."
    )


def max_per_order_error(rule: ItemAvailabilityRule) -> str:
    return (
        f"Maximum {rule.max_per_order} {rule.display_name} per order. "
        "For larger orders, please use our custom order form."
    )


def validate_order(
    cart_lines: Iterable[CartLine],
    pickup_date: date,
    pickup_time: str | None,
    reference_now: datetime,
    *,
    rules: OrderRules = ORDER_RULES,
) -> OrderValidationResult:
    """Check every cart line and report every violation at once.

    A blackout date returns a single error straight away. Otherwise each line
    is checked for availability, the daily cap and the per-order cap, and all
    failures are collected. ``pickup_time`` is accepted for the caller's slot
    check and does not affect item rules.
    """
    if rules.is_blackout(pickup_date):
        return OrderValidationResult(valid=False, errors=[BLACKOUT_ORDER_ERROR])

    errors: list[str] = []
    for line in cart_lines:
        availability: AvailabilityResult = evaluate_item(line.item_id, pickup_date, reference_now, rules=rules)
        if not availability.available and availability.reason:
            errors.append(availability.reason)

        rule: ItemAvailabilityRule | None = rules.get_item(line.item_id)
        if rule is None:
            continue
        if line.quantity > rule.daily_limit:
            errors.append(daily_limit_error(rule))
        if rule.max_per_order is not None and line.quantity > rule.max_per_order:
            errors.append(max_per_order_error(rule))

    return OrderValidationResult(valid=not errors, errors=errors)

"""Item availability for a requested pickup date.

Every function takes the reference "now" from its caller and never reads the
clock, so the same inputs always give the same answer.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.order_rules import (
    ORDER_RULES,
    EverydaySchedule,
    ItemAvailabilityRule,
    OrderRules,
    SpecialtySchedule,
)
from app.utils.time import DAY_NAMES, add_days, as_local, day_of_week, format_hour_12, local_instant

BLACKOUT_REASON: str = "Online ordering unavailable on this date"


class AvailabilityResult(BaseModel):
    """Outcome of one availability check; ``reason`` is set only when unavailable."""

    model_config = ConfigDict(frozen=True)

    available: bool
    reason: str | None = None


class AvailableItem(BaseModel):
    """Catalog entry that can be ordered for the requested pickup date."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str
    schedule_kind: str
    daily_limit: int
    price_cents: int
    max_per_order: int | None = None
    available_days: list[str] = Field(default_factory=list)
    cutoff_hour: int | None = None


AVAILABLE: AvailabilityResult = AvailabilityResult(available=True)


def _cutoff_phrase(days_before: int) -> str:
    if days_before == 0:
        return "the same day"
    if days_before == 1:
        return "the day before"
    return f"{days_before} days before"


def _evaluate_specialty(
    rule: ItemAvailabilityRule,
    schedule: SpecialtySchedule,
    pickup_date: date,
    reference_now: datetime,
    rules: OrderRules,
) -> AvailabilityResult:
    if day_of_week(pickup_date) not in schedule.available_days:
        day_names: str = " & ".join(DAY_NAMES[day] for day in schedule.available_days)
        return AvailabilityResult(
            available=False,
            reason=f"{rule.display_name} is only available on {day_names}",
        )

    zone = rules.zone
    cutoff: datetime = local_instant(add_days(pickup_date, -schedule.cutoff_days_before), schedule.cutoff_hour, zone)
    if as_local(reference_now, zone) >= cutoff:
        return AvailabilityResult(
            available=False,
            reason=(
                f"Order cutoff for {rule.display_name} has passed "
                f"({format_hour_12(schedule.cutoff_hour)} {_cutoff_phrase(schedule.cutoff_days_before)})"
            ),
        )
    return AVAILABLE


def _evaluate_everyday(
    rule: ItemAvailabilityRule,
    schedule: EverydaySchedule,
    pickup_date: date,
    reference_now: datetime,
    rules: OrderRules,
) -> AvailabilityResult:
    local_now: datetime = as_local(reference_now, rules.zone)
    if pickup_date != local_now.date():
        return AVAILABLE

    if not schedule.same_day_allowed:
        lead_days: int = schedule.min_lead_time_days or 1
        unit: str = "day" if lead_days == 1 else "days"
        return AvailabilityResult(
            available=False,
            reason=f"{rule.display_name} requires at least {lead_days} {unit} advance notice",
        )

    if schedule.same_day_cutoff_hour is not None and local_now.hour >= schedule.same_day_cutoff_hour:
        return AvailabilityResult(
            available=False,
            reason=(
                f"Same-day orders for {rule.display_name} must be placed before "
                f"{format_hour_12(schedule.same_day_cutoff_hour)}"
            ),
        )
    return AVAILABLE


def evaluate_item(
    item_id: str,
    pickup_date: date,
    reference_now: datetime,
    *,
    rules: OrderRules = ORDER_RULES,
) -> AvailabilityResult:
    """Decide whether one item can be ordered for pickup on ``pickup_date``.

    Unknown ids are an ordinary "not found" result. A blackout date wins over
    every other rule.
    """
    rule: ItemAvailabilityRule | None = rules.get_item(item_id)
    if rule is None:
        return AvailabilityResult(available=False, reason=f"Item {item_id} not found")

    if rules.is_blackout(pickup_date):
        return AvailabilityResult(available=False, reason=BLACKOUT_REASON)

    schedule = rule.schedule
    if isinstance(schedule, SpecialtySchedule):
        return _evaluate_specialty(rule, schedule, pickup_date, reference_now, rules)
    if isinstance(schedule, EverydaySchedule):
        return _evaluate_everyday(rule, schedule, pickup_date, reference_now, rules)
    return AVAILABLE


def _to_available_item(rule: ItemAvailabilityRule) -> AvailableItem:
    schedule = rule.schedule
    if isinstance(schedule, SpecialtySchedule):
        return AvailableItem(
            id=rule.item_id,
            name=rule.display_name,
            category=rule.category,
            schedule_kind=schedule.kind,
            daily_limit=rule.daily_limit,
            price_cents=rule.price_cents,
            max_per_order=rule.max_per_order,
            available_days=[DAY_NAMES[day] for day in schedule.available_days],
            cutoff_hour=schedule.cutoff_hour,
        )
    return AvailableItem(
        id=rule.item_id,
        name=rule.display_name,
        category=rule.category,
        schedule_kind=schedule.kind,
        daily_limit=rule.daily_limit,
        price_cents=rule.price_cents,
        max_per_order=rule.max_per_order,
    )


def list_available_items(
    pickup_date: date,
    reference_now: datetime,
    *,
    rules: OrderRules = ORDER_RULES,
) -> dict[str, list[AvailableItem]]:
    """Return orderable items grouped by category, specialty items first."""
    grouped: dict[str, list[AvailableItem]] = {category: [] for category in rules.categories}
    for rule in rules.items.values():
        if evaluate_item(rule.item_id, pickup_date, reference_now, rules=rules).available:
            grouped[rule.category].append(_to_available_item(rule))

    for category, entries in grouped.items():
        # sorted() is stable, so catalog order is kept inside each schedule kind.
        grouped[category] = sorted(entries, key=lambda entry: entry.schedule_kind != "specialty")
    return grouped

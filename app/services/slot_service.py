"""Pickup slot capacity for a requested date."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.order_rules import ORDER_RULES, OrderRules, PickupSlot
from app.services.availability_service import BLACKOUT_REASON
from app.utils.time import as_local

REDUCED_CAPACITY_MULTIPLIER: float = 0.5


class OpenSlot(BaseModel):
    """Pickup time that can still take orders."""

    model_config = ConfigDict(frozen=True)

    time: str
    remaining_slots: int
    max_orders: int


class OpenSlotsResult(BaseModel):
    """Open pickup slots for one date."""

    model_config = ConfigDict(frozen=True)

    available: bool
    slots: list[OpenSlot] = Field(default_factory=list)
    reason: str | None = None


def effective_max_orders(slot: PickupSlot, pickup_date: date, *, rules: OrderRules = ORDER_RULES) -> int:
    """Return a slot's capacity for the date, halved (rounded down) on reduced-capacity days."""
    multiplier: float = REDUCED_CAPACITY_MULTIPLIER if rules.is_reduced_capacity(pickup_date) else 1
    return max(0, int(slot.max_orders * multiplier))


def list_open_slots(
    pickup_date: date,
    booked_counts_by_time: Mapping[str, int],
    reference_now: datetime,
    *,
    rules: OrderRules = ORDER_RULES,
) -> OpenSlotsResult:
    """Return pickup slots with capacity left on ``pickup_date``.

    Booked counts come from the caller's order store. Beyond the plain
    capacity rule, two additions are deliberate: on the bakery's current day
    slots that have already started are skipped, and an empty non-blackout
    day carries the reason "No pickup times left on this date".
    """
    if rules.is_blackout(pickup_date):
        return OpenSlotsResult(available=False, slots=[], reason=BLACKOUT_REASON)

    local_now: datetime = as_local(reference_now, rules.zone)
    earliest_time: str | None = local_now.strftime("%H:%M") if pickup_date == local_now.date() else None

    open_slots: list[OpenSlot] = []
    for slot in rules.slots_for(pickup_date):
        if earliest_time is not None and slot.time <= earliest_time:
            continue
        max_orders: int = effective_max_orders(slot, pickup_date, rules=rules)
        remaining: int = max_orders - booked_counts_by_time.get(slot.time, 0)
        if remaining <= 0:
            continue
        open_slots.append(OpenSlot(time=slot.time, remaining_slots=remaining, max_orders=max_orders))

    if not open_slots:
        return OpenSlotsResult(available=False, slots=[], reason="No pickup times left on this date")
    return OpenSlotsResult(available=True, slots=open_slots)


def slot_is_open(result: OpenSlotsResult, pickup_time: str) -> bool:
    """Return True when ``pickup_time`` is one of the open slots."""
    return any(slot.time == pickup_time for slot in result.slots)

"""Order availability rules: catalog, calendar exceptions and pickup slots.

This module is the single source of truth for every ordering rule. The
tables are validated when the module is imported and are read-only for the
life of the process.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from enum import Enum
from typing import Annotated, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.config import settings
from app.utils.time import day_of_week

logger = logging.getLogger(__name__)

SPECIALTY_CUTOFF_HOUR: int = 17
SAME_DAY_CUTOFF_HOUR: int = 10


class RulesConfigurationError(Exception):
    """Raised at startup when the rule tables are inconsistent."""


class SpecialtySchedule(BaseModel):
    """Baked only on some weekdays, ordered ahead by a cutoff."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["specialty"] = "specialty"
    available_days: tuple[int, ...] = Field(min_length=1)
    cutoff_days_before: int = Field(default=1, ge=0)
    cutoff_hour: int = Field(default=SPECIALTY_CUTOFF_HOUR, ge=0, le=23)

    @field_validator("available_days")
    @classmethod
    def _check_days(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if any(day < 0 or day > 6 for day in value):
            raise ValueError("available_days must be weekday numbers 0-6")
        return tuple(sorted(set(value)))


class EverydaySchedule(BaseModel):
    """Baked daily; same-day orders allowed until an optional cutoff hour."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["everyday"] = "everyday"
    same_day_allowed: bool = True
    same_day_cutoff_hour: int | None = Field(default=None, ge=0, le=23)
    min_lead_time_days: int = Field(default=1, ge=0)


Schedule = Annotated[SpecialtySchedule | EverydaySchedule, Field(discriminator="kind")]


class ItemAvailabilityRule(BaseModel):
    """Ordering rule for one sellable product."""

    model_config = ConfigDict(frozen=True)

    item_id: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    price_cents: int = Field(gt=0)
    schedule: Schedule
    daily_limit: int = Field(ge=1)
    max_per_order: int | None = Field(default=None, ge=1)

    @property
    def is_specialty(self) -> bool:
        return isinstance(self.schedule, SpecialtySchedule)


class CalendarExceptionKind(str, Enum):
    """Kinds of calendar exception."""

    BLACKOUT = "blackout"
    REDUCED_CAPACITY = "reduced_capacity"


class CalendarException(BaseModel):
    """A date on which ordering is closed or slot capacity is halved."""

    model_config = ConfigDict(frozen=True)

    calendar_date: date
    kind: CalendarExceptionKind


class WeekdayClass(str, Enum):
    """Which pickup slot list applies to a date."""

    WEEKDAY = "weekday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def for_date(cls, value: date) -> "WeekdayClass":
        weekday: int = day_of_week(value)
        if weekday == 0:
            return cls.SUNDAY
        if weekday == 6:
            return cls.SATURDAY
        return cls.WEEKDAY


class PickupSlot(BaseModel):
    """Fixed pickup time and the number of orders it can take."""

    model_config = ConfigDict(frozen=True)

    time: str = Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    max_orders: int = Field(ge=1)


class OrderRules(BaseModel):
    """Complete, immutable ordering configuration."""

    model_config = ConfigDict(frozen=True)

    timezone: str
    items: dict[str, ItemAvailabilityRule]
    exceptions: tuple[CalendarException, ...] = ()
    slots: dict[WeekdayClass, tuple[PickupSlot, ...]]

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def categories(self) -> list[str]:
        seen: list[str] = []
        for rule in self.items.values():
            if rule.category not in seen:
                seen.append(rule.category)
        return seen

    def get_item(self, item_id: str) -> ItemAvailabilityRule | None:
        return self.items.get(item_id)

    def _exception_kinds(self, value: date) -> set[CalendarExceptionKind]:
        return {exception.kind for exception in self.exceptions if exception.calendar_date == value}

    def is_blackout(self, value: date) -> bool:
        return CalendarExceptionKind.BLACKOUT in self._exception_kinds(value)

    def is_reduced_capacity(self, value: date) -> bool:
        return CalendarExceptionKind.REDUCED_CAPACITY in self._exception_kinds(value)

    def slots_for(self, value: date) -> tuple[PickupSlot, ...]:
        return self.slots.get(WeekdayClass.for_date(value), ())


def _specialty(item_id: str, name: str, days: list[int], price_cents: int, daily_limit: int = 8) -> ItemAvailabilityRule:
    return ItemAvailabilityRule(
        item_id=item_id,
        display_name=name,
        category="breads",
        price_cents=price_cents,
        schedule=SpecialtySchedule(available_days=tuple(days)),
        daily_limit=daily_limit,
    )


def _everyday(
    item_id: str,
    name: str,
    category: str,
    price_cents: int,
    daily_limit: int,
    *,
    same_day_allowed: bool = True,
    same_day_cutoff_hour: int | None = None,
    max_per_order: int | None = None,
) -> ItemAvailabilityRule:
    return ItemAvailabilityRule(
        item_id=item_id,
        display_name=name,
        category=category,
        price_cents=price_cents,
        schedule=EverydaySchedule(
            same_day_allowed=same_day_allowed,
            same_day_cutoff_hour=same_day_cutoff_hour,
        ),
        daily_limit=daily_limit,
        max_per_order=max_per_order,
    )


def _bread(item_id: str, name: str, price_cents: int, daily_limit: int, **kwargs) -> ItemAvailabilityRule:
    kwargs.setdefault("same_day_cutoff_hour", SAME_DAY_CUTOFF_HOUR)
    return _everyday(item_id, name, "breads", price_cents, daily_limit, **kwargs)


# Days: 0=Sun, 1=Mon, 2=Tue, 3=Wed, 4=Thu, 5=Fri, 6=Sat
CATALOG: list[ItemAvailabilityRule] = [
    _specialty("bread-16", "Norwegian Farm", [1], 950),
    _specialty("sourdough-rye", "Sourdough Rye", [2], 950),
    _specialty("bread-17", "Old World Italian", [3, 5], 900),
    _specialty("bread-4", "Blackfoot", [3], 950),
    _specialty("bread-13", "Golden Raisin Pecan", [4], 1100),
    _specialty("challah", "Challah", [5], 1000),
    _specialty("bread-7", "Cranberry Wild Rice", [5], 1100),
    _specialty("bread-20", "Rustic Multigrain", [6], 950),
    _bread("bread-21", "Sourdough", 850, 10),
    _bread("bread-22", "Sourdough Rustic Loaf", 900, 10),
    _bread("bread-2", "Baguette", 450, 15),
    _bread("bread-8", "Demi Baguette", 300, 20),
    _bread("bread-10", "Ficelli", 300, 15),
    _bread("bread-9", "Epi", 500, 12),
    _bread("bread-5", "Boules", 700, 10),
    _bread("bread-6", "Ciabatta", 650, 12),
    _bread("bread-15", "Mini Ciabatta", 150, 24),
    _bread("bread-12", "French Pan Loaf", 750, 8),
    _bread("bread-11", "Focaccia", 800, 8),
    _bread("bread-1", "7 Grain Pan Loaf", 800, 8),
    _bread("bread-14", "Jocko", 850, 8),
    _bread("bread-3", "Big Sky Country Loaf", 1000, 6, same_day_allowed=False, same_day_cutoff_hour=None),
    _bread("bread-18", "Pizza Dough", 500, 10),
    _bread("bread-19", "Potato Rolls", 700, 8),
    # Staff test item, orderable until 11pm.
    _bread("test-1", "Test Item", 100, 999, same_day_cutoff_hour=23),
    _everyday("bar-1", "Flourless Brownies", "bars", 425, 12),
    _everyday("bar-2", "Lemon Bars", "bars", 400, 12),
    _everyday("bar-3", "Chocolate Chip Peanut Butter Bar", "bars", 400, 12),
    _everyday("bar-4", "Pumpkin Bars", "bars", 400, 12),
    _everyday("bar-5", "Raspberry Crumble Bars", "bars", 400, 12),
    _everyday("bar-6", "Revel Bars", "bars", 400, 12),
    _everyday("bar-7", "Salted Caramel Bars", "bars", 425, 12),
    _everyday("bar-8", "Samoa Bars", "bars", 425, 12),
    _everyday("bar-9", "Truffle Brownies", "bars", 450, 12),
    _everyday("bar-10", "Turtle Brownie", "bars", 450, 12),
    _everyday("cookie-1", "Brown Butter Chocolate Chip Cookie", "cookies", 300, 24),
    _everyday("cookie-2", "Carrot Coconut Cookie", "cookies", 300, 24),
    _everyday("cookie-3", "Coconut Oatmeal Cookie", "cookies", 300, 24),
    _everyday("cookie-4", "Flourless Peanut Butter Chocolate Chip", "cookies", 300, 24),
    _everyday("cookie-5", "Molasses Cookie", "cookies", 275, 24),
    _everyday("cookie-6", "Monster Cookie", "cookies", 300, 24),
    _everyday("cookie-7", "Peanut Butter Cookie", "cookies", 275, 24),
    _everyday("cookie-8", "Snickerdoodle", "cookies", 275, 24),
    # Hand decorated; bulk orders go through the custom order form.
    _everyday(
        "cookie-9",
        "Sugar Cookies - Assorted",
        "cookies",
        350,
        18,
        same_day_allowed=False,
        max_per_order=24,
    ),
]

BLACKOUT_DATES: list[str] = [
    "2026-04-05",  # Easter
    "2026-05-09",  # Mother's Day weekend
    "2026-05-10",
    "2026-11-24",  # Thanksgiving week
    "2026-11-25",
    "2026-11-26",
    "2026-12-24",
    "2026-12-25",
    "2026-12-31",
    "2027-01-01",
]

REDUCED_CAPACITY_DATES: list[str] = [
    "2026-11-27",
    "2026-12-26",
    "2027-01-02",
]


def _slot_table(rows: list[tuple[str, int]]) -> tuple[PickupSlot, ...]:
    return tuple(PickupSlot(time=slot_time, max_orders=max_orders) for slot_time, max_orders in rows)


PICKUP_SLOTS: dict[WeekdayClass, tuple[PickupSlot, ...]] = {
    WeekdayClass.WEEKDAY: _slot_table(
        [
            ("07:00", 4), ("07:30", 4), ("08:00", 5), ("08:30", 5), ("09:00", 5), ("09:30", 5),
            ("10:00", 5), ("10:30", 5), ("11:00", 3), ("11:30", 3), ("12:00", 3), ("12:30", 3),
            ("13:00", 4), ("13:30", 4), ("14:00", 5), ("14:30", 5), ("15:00", 5), ("15:30", 5),
            ("16:00", 4), ("16:30", 4), ("17:00", 3), ("17:30", 3),
        ]
    ),
    WeekdayClass.SATURDAY: _slot_table(
        [
            ("07:00", 3), ("07:30", 3), ("08:00", 3), ("08:30", 3), ("09:00", 3), ("09:30", 4),
            ("10:00", 4), ("10:30", 4), ("11:00", 3), ("11:30", 3), ("12:00", 3), ("12:30", 3),
            ("13:00", 4), ("13:30", 4), ("14:00", 5), ("14:30", 5), ("15:00", 5), ("15:30", 5),
            ("16:00", 4), ("16:30", 4), ("17:00", 3), ("17:30", 3),
        ]
    ),
    WeekdayClass.SUNDAY: _slot_table(
        [
            ("08:00", 3), ("08:30", 3), ("09:00", 3), ("09:30", 3), ("10:00", 4), ("10:30", 4),
            ("11:00", 3), ("11:30", 3), ("12:00", 3), ("12:30", 3), ("13:00", 4), ("13:30", 4),
        ]
    ),
}


def build_order_rules(
    *,
    timezone: str,
    catalog: list[ItemAvailabilityRule],
    blackout_dates: list[str],
    reduced_capacity_dates: list[str],
    slots: Mapping[WeekdayClass, tuple[PickupSlot, ...]],
) -> OrderRules:
    """Assemble an OrderRules object from plain tables."""
    exceptions: list[CalendarException] = [
        CalendarException(calendar_date=date.fromisoformat(value), kind=CalendarExceptionKind.BLACKOUT)
        for value in blackout_dates
    ]
    exceptions.extend(
        CalendarException(calendar_date=date.fromisoformat(value), kind=CalendarExceptionKind.REDUCED_CAPACITY)
        for value in reduced_capacity_dates
    )
    return OrderRules(
        timezone=timezone,
        items={rule.item_id: rule for rule in catalog},
        exceptions=tuple(exceptions),
        slots=dict(slots),
    )


def check_rules_consistency(
    rules: OrderRules,
    catalog: list[ItemAvailabilityRule] | None = None,
) -> list[str]:
    """Return configuration problems that must block startup.

    ``catalog`` is the raw list the rules were built from; passing it lets
    duplicate item ids be detected before they collapse into one mapping key.
    """
    problems: list[str] = []

    try:
        ZoneInfo(rules.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        problems.append(f"Unknown timezone {rules.timezone!r}")

    if catalog is not None:
        seen_ids: set[str] = set()
        for rule in catalog:
            if rule.item_id in seen_ids:
                problems.append(f"Duplicate item id {rule.item_id!r}")
            seen_ids.add(rule.item_id)

    for item_id, rule in rules.items.items():
        if item_id != rule.item_id:
            problems.append(f"Item key {item_id!r} does not match item id {rule.item_id!r}")
        if rule.max_per_order is not None and rule.max_per_order > rule.daily_limit:
            logger.warning(
                "[RULES] %s max_per_order=%s exceeds daily_limit=%s; both caps are enforced",
                item_id,
                rule.max_per_order,
                rule.daily_limit,
            )

    blackout_dates: set[date] = {
        exception.calendar_date for exception in rules.exceptions if exception.kind == CalendarExceptionKind.BLACKOUT
    }
    for exception in rules.exceptions:
        if exception.kind == CalendarExceptionKind.REDUCED_CAPACITY and exception.calendar_date in blackout_dates:
            problems.append(f"{exception.calendar_date.isoformat()} is both a blackout and a reduced-capacity date")

    for weekday_class in WeekdayClass:
        table: tuple[PickupSlot, ...] = rules.slots.get(weekday_class, ())
        if not table:
            problems.append(f"No pickup slots configured for {weekday_class.value}")
            continue
        times: list[str] = [slot.time for slot in table]
        if len(set(times)) != len(times):
            problems.append(f"Duplicate pickup slot times for {weekday_class.value}")
        if times != sorted(times):
            problems.append(f"Pickup slots for {weekday_class.value} are not in time order")

    return problems


ORDER_RULES: OrderRules = build_order_rules(
    timezone=settings.bakery_timezone,
    catalog=CATALOG,
    blackout_dates=BLACKOUT_DATES,
    reduced_capacity_dates=REDUCED_CAPACITY_DATES,
    slots=PICKUP_SLOTS,
)


def assert_rules_consistent(rules: OrderRules = ORDER_RULES, catalog: list[ItemAvailabilityRule] | None = CATALOG) -> None:
    """Raise RulesConfigurationError when the rule tables are inconsistent."""
    problems: list[str] = check_rules_consistency(rules, catalog)
    if problems:
        for problem in problems:
            logger.error("[RULES] %s", problem)
        raise RulesConfigurationError("; ".join(problems))
    logger.info("[RULES] %s catalog items loaded for timezone %s", len(rules.items), rules.timezone)

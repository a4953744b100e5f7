"""Bakery-local clock and civil date helpers.

All business rules are evaluated against the bakery's own civil calendar,
regardless of the host timezone. Date arithmetic works on civil dates so a
daylight-saving shift never moves a cutoff by an hour or a day.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from app.core.config import settings

DAY_NAMES: list[str] = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def bakery_zone(name: str | None = None) -> ZoneInfo:
    """Return the bakery timezone, defaulting to the configured one."""
    return ZoneInfo(name or settings.bakery_timezone)


def now_local(zone: ZoneInfo | None = None) -> datetime:
    """Return the current instant as an aware datetime in the bakery zone."""
    return datetime.now(zone or bakery_zone())


def today_local(zone: ZoneInfo | None = None) -> date:
    """Return today's civil date in the bakery zone."""
    return now_local(zone).date()


def as_local(moment: datetime, zone: ZoneInfo) -> datetime:
    """Render a moment in the bakery zone.

    Naive datetimes are taken to already be bakery civil time.
    """
    if moment.tzinfo is None:
        return moment.replace(tzinfo=zone)
    return moment.astimezone(zone)


def day_of_week(value: date) -> int:
    """Return 0 for Sunday through 6 for Saturday."""
    return value.isoweekday() % 7


def add_days(value: date, days: int) -> date:
    """Shift a civil date by whole days."""
    return value + timedelta(days=days)


def local_instant(value: date, hour: int, zone: ZoneInfo) -> datetime:
    """Return ``hour:00`` on a civil date as an aware bakery-local datetime."""
    return datetime.combine(value, time(hour=hour), tzinfo=zone)


def format_hour_12(hour: int) -> str:
    """Format an hour of day as customer copy, e.g. 17 -> '5pm'."""
    suffix: str = "am" if hour < 12 else "pm"
    display: int = hour % 12 or 12
    return f"{display}{suffix}"

"""Request-scoped helpers shared by the ordering endpoints."""

from datetime import date, datetime

from fastapi import HTTPException

from app.core.config import settings
from app.utils.time import add_days, now_local


def get_reference_now() -> datetime:
    """Read the bakery clock once per request."""
    return now_local()


def ensure_pickup_date_in_window(pickup_date: date, reference_now: datetime) -> None:
    """Reject pickup dates in the past or beyond the advance-order horizon."""
    today: date = reference_now.date()
    if pickup_date < today:
        raise HTTPException(status_code=400, detail="Please select a future pickup date")
    if pickup_date > add_days(today, settings.max_advance_days):
        raise HTTPException(
            status_code=400,
            detail=f"Pickup date must be within {settings.max_advance_days} days",
        )

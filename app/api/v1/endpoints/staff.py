"""Staff session and capacity endpoints."""

import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from app.api.v1.deps import get_reference_now
from app.core.config import settings
from app.core.order_rules import ORDER_RULES
from app.core.security import create_staff_token, is_valid_staff_token, require_staff, verify_staff_password
from app.db.session import get_db
from app.schemas.staff import (
    CapacityResponse,
    ItemCapacityResponse,
    OrderStatusResponse,
    OrderStatusUpdate,
    SlotCapacityResponse,
    StaffLoginRequest,
    StaffSessionResponse,
)
from app.services.order_status import can_transition, set_status
from app.services.order_store import SqlOrderStore, as_utc
from app.services.slot_service import effective_max_orders

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/session", response_model=StaffSessionResponse)
def login(payload: StaffLoginRequest, response: Response) -> StaffSessionResponse:
    """Start a staff session and set the session cookie."""
    if not settings.staff_password_hash:
        logger.error("[STAFF] STAFF_PASSWORD_HASH not set; staff login disabled")
        raise HTTPException(status_code=503, detail="Staff login is not configured")
    if not verify_staff_password(payload.password):
        logger.warning("[STAFF] Rejected staff login attempt")
        raise HTTPException(status_code=401, detail="Incorrect password")

    response.set_cookie(
        key=settings.staff_cookie_name,
        value=create_staff_token(),
        max_age=settings.staff_session_minutes * 60,
        httponly=True,
        samesite="strict",
        secure=settings.cookie_secure,
    )
    return StaffSessionResponse(authenticated=True)


@router.get("/session", response_model=StaffSessionResponse)
def session_status(request: Request) -> StaffSessionResponse:
    """Report whether the caller holds a valid staff session."""
    if not is_valid_staff_token(request.cookies.get(settings.staff_cookie_name)):
        raise HTTPException(status_code=401, detail="Staff login required")
    return StaffSessionResponse(authenticated=True)


@router.delete("/session", response_model=StaffSessionResponse)
def logout(response: Response) -> StaffSessionResponse:
    """End the staff session."""
    response.delete_cookie(settings.staff_cookie_name)
    return StaffSessionResponse(authenticated=False)


@router.get("/capacity", response_model=CapacityResponse, dependencies=[Depends(require_staff)])
def get_capacity(
    pickup_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
    reference_now: datetime = Depends(get_reference_now),
) -> CapacityResponse:
    """Return slot bookings and units left per item for a pickup date."""
    target_date: date = pickup_date or reference_now.date()
    store = SqlOrderStore(db)
    booked: dict[str, int] = store.booked_counts_by_time(target_date, reference_now)
    sold: dict[str, int] = store.units_sold_by_item(target_date, reference_now)
    blackout: bool = ORDER_RULES.is_blackout(target_date)

    slots: list[SlotCapacityResponse] = []
    if not blackout:
        for slot in ORDER_RULES.slots_for(target_date):
            max_orders: int = effective_max_orders(slot, target_date)
            slot_booked: int = booked.get(slot.time, 0)
            slots.append(
                SlotCapacityResponse(
                    time=slot.time,
                    max_orders=max_orders,
                    booked=slot_booked,
                    remaining=max(0, max_orders - slot_booked),
                )
            )

    items: list[ItemCapacityResponse] = [
        ItemCapacityResponse(
            id=rule.item_id,
            name=rule.display_name,
            daily_limit=rule.daily_limit,
            sold=sold.get(rule.item_id, 0),
            remaining=max(0, rule.daily_limit - sold.get(rule.item_id, 0)),
        )
        for rule in ORDER_RULES.items.values()
    ]

    return CapacityResponse(
        pickup_date=target_date,
        blackout=blackout,
        reduced_capacity=ORDER_RULES.is_reduced_capacity(target_date),
        slots=slots,
        items=items,
    )


@router.patch(
    "/orders/{order_number}/status",
    response_model=OrderStatusResponse,
    dependencies=[Depends(require_staff)],
)
def update_order_status(
    order_number: str,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
    reference_now: datetime = Depends(get_reference_now),
) -> OrderStatusResponse:
    """Mark a pickup order paid or cancelled."""
    order = SqlOrderStore(db).get_by_number(order_number)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    if not can_transition(order.status, payload.status):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot change order from {order.status} to {payload.status}",
        )

    previous: str = order.status
    set_status(order, payload.status, as_utc(reference_now))
    db.commit()
    logger.info("[STAFF] Order %s moved from %s to %s", order_number, previous, payload.status)
    return OrderStatusResponse(order_number=order.order_number, status=order.status)

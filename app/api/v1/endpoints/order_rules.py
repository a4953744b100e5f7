"""Order availability endpoints."""

from datetime import date, datetime

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.v1.deps import ensure_pickup_date_in_window, get_reference_now
from app.db.session import get_db
from app.schemas.order_rules import AvailableItemsResponse, SlotQueryRequest, ValidateOrderRequest
from app.services.availability_service import list_available_items
from app.services.order_store import SqlOrderStore
from app.services.order_validation_service import CartLine, OrderValidationResult, validate_order
from app.services.slot_service import OpenSlotsResult, list_open_slots

router: APIRouter = APIRouter()


@router.get("/items", response_model=AvailableItemsResponse)
def get_available_items(
    pickup_date: date = Query(...),
    reference_now: datetime = Depends(get_reference_now),
) -> AvailableItemsResponse:
    """Return what can be ordered for pickup on the given date."""
    ensure_pickup_date_in_window(pickup_date, reference_now)
    return AvailableItemsResponse(
        pickup_date=pickup_date,
        categories=list_available_items(pickup_date, reference_now),
    )


@router.get("/slots", response_model=OpenSlotsResult)
def get_open_slots(
    pickup_date: date = Query(...),
    db: Session = Depends(get_db),
    reference_now: datetime = Depends(get_reference_now),
) -> OpenSlotsResult:
    """Return open pickup slots using bookings from the order store."""
    ensure_pickup_date_in_window(pickup_date, reference_now)
    booked: dict[str, int] = SqlOrderStore(db).booked_counts_by_time(pickup_date, reference_now)
    return list_open_slots(pickup_date, booked, reference_now)


@router.post("/slots", response_model=OpenSlotsResult)
def query_open_slots(
    payload: SlotQueryRequest,
    reference_now: datetime = Depends(get_reference_now),
) -> OpenSlotsResult:
    """Return open pickup slots for caller-supplied booking counts."""
    ensure_pickup_date_in_window(payload.pickup_date, reference_now)
    return list_open_slots(payload.pickup_date, payload.booked_counts_by_time, reference_now)


@router.post("/validate", response_model=OrderValidationResult)
def validate_cart(
    payload: ValidateOrderRequest,
    reference_now: datetime = Depends(get_reference_now),
) -> JSONResponse:
    """Validate a whole cart; responds 400 with every error when invalid."""
    ensure_pickup_date_in_window(payload.pickup_date, reference_now)
    result: OrderValidationResult = validate_order(
        [CartLine(item_id=item.id, quantity=item.quantity) for item in payload.items],
        payload.pickup_date,
        payload.pickup_time,
        reference_now,
    )
    return JSONResponse(status_code=200 if result.valid else 400, content=result.model_dump())

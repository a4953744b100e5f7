"""API v1 router composition."""

from fastapi import APIRouter

from app.api.v1.endpoints import checkout, order_rules, staff

api_router: APIRouter = APIRouter()
api_router.include_router(order_rules.router, prefix="/order-rules", tags=["order-rules"])
api_router.include_router(checkout.router, prefix="/checkout", tags=["checkout"])
api_router.include_router(staff.router, prefix="/staff", tags=["staff"])

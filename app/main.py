"""FastAPI entrypoint for the bakery ordering service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.api import api_router
from app.core.config import settings
from app.core.order_rules import ORDER_RULES, assert_rules_consistent
from app.db.base import Base
from app.db.session import engine
from app.services.payment_gateway import PaymentGatewayError

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.allowed_origin],
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
    allow_credentials=True,
)
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup() -> None:
    assert_rules_consistent()
    Base.metadata.create_all(bind=engine)
    logger.info(
        "[BOOTSTRAP] Ordering rules active: timezone=%s items=%s env=%s",
        ORDER_RULES.timezone,
        len(ORDER_RULES.items),
        settings.app_env,
    )
    if not settings.clover_api_key or not settings.clover_merchant_id:
        logger.warning("[BOOTSTRAP] Clover credentials not set; checkout will fail.")


@app.exception_handler(PaymentGatewayError)
def payment_gateway_error_handler(request: Request, exc: PaymentGatewayError) -> JSONResponse:
    logger.error("[PAYMENT] %s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}

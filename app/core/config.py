"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "Park Avenue Bakery Orders"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    database_url: str = getenv("DATABASE_URL", "sqlite:///./bakery_orders.db")
    bakery_timezone: str = getenv("BAKERY_TIMEZONE", "America/Denver")
    max_advance_days: int = int(getenv("MAX_ADVANCE_DAYS", "14"))
    allowed_origin: str = getenv("ALLOWED_ORIGIN", "https://park-avenue-bakery.vercel.app")

    clover_api_key: str = getenv("CLOVER_API_KEY", "")
    clover_merchant_id: str = getenv("CLOVER_MERCHANT_ID", "")
    clover_checkout_url: str = getenv(
        "CLOVER_CHECKOUT_URL",
        "https://www.clover.com/invoicingcheckoutservice/v1/checkouts",
    )
    clover_timeout_seconds: float = float(getenv("CLOVER_TIMEOUT_SECONDS", "10"))
    checkout_hold_minutes: int = int(getenv("CHECKOUT_HOLD_MINUTES", "15"))
    checkout_success_url: str = getenv(
        "CHECKOUT_SUCCESS_URL",
        "https://park-avenue-bakery.vercel.app/order-confirmation.html",
    )
    checkout_failure_url: str = getenv(
        "CHECKOUT_FAILURE_URL",
        "https://park-avenue-bakery.vercel.app/checkout.html?error=payment_failed",
    )
    checkout_cancel_url: str = getenv(
        "CHECKOUT_CANCEL_URL",
        "https://park-avenue-bakery.vercel.app/checkout.html?error=payment_cancelled",
    )

    staff_password_hash: str = getenv("STAFF_PASSWORD_HASH", "")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    staff_session_minutes: int = int(getenv("STAFF_SESSION_MINUTES", str(60 * 24 * 7)))
    staff_cookie_name: str = getenv("STAFF_COOKIE_NAME", "staff_session")
    cookie_secure: bool = getenv("COOKIE_SECURE", "0") == "1"


settings: Settings = Settings()

"""Staff session helpers: password hashing and signed session cookies."""

from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import HTTPException, Request, status
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings

pwd_context: CryptContext = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
STAFF_SUBJECT: str = "staff"


def get_password_hash(password: str) -> str:
    """Hash a plaintext password, e.g. to produce STAFF_PASSWORD_HASH."""
    return pwd_context.hash(password)


def verify_staff_password(password: str) -> bool:
    """Check a password against the configured staff hash."""
    if not settings.staff_password_hash:
        return False
    return pwd_context.verify(password, settings.staff_password_hash)


def create_staff_token() -> str:
    """Create a signed, expiring staff session token."""
    expire: datetime = datetime.now(timezone.utc) + timedelta(minutes=settings.staff_session_minutes)
    to_encode: dict[str, Any] = {"sub": STAFF_SUBJECT, "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def is_valid_staff_token(token: str | None) -> bool:
    """Return True for an unexpired token issued to staff."""
    if not token:
        return False
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return False
    return payload.get("sub") == STAFF_SUBJECT


def require_staff(request: Request) -> None:
    """Reject requests without a valid staff session cookie."""
    if not is_valid_staff_token(request.cookies.get(settings.staff_cookie_name)):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Staff login required",
        )

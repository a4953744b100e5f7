"""Declarative base for the order store tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for pickup order models."""


# Registers the order tables on Base.metadata for create_all and Alembic.
from app.models import order as _order_tables  # noqa: E402,F401

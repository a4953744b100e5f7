"""Application models package."""

from app.models.order import PickupOrder, PickupOrderLine

__all__ = ["PickupOrder", "PickupOrderLine"]

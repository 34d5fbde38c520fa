"""Selectors for the inventory domain."""

from django.conf import settings
from django.db.models import QuerySet

from .models import StockLevel, StockMovement

DEFAULT_MOVEMENT_LIMIT = 100


def movement_limit(value=None) -> int:
    """Clamp a requested list size to ``1..INVENTORY_MOVEMENT_LIST_LIMIT``."""

    maximum = int(getattr(settings, "INVENTORY_MOVEMENT_LIST_LIMIT", DEFAULT_MOVEMENT_LIMIT))
    try:
        limit = int(value) if value not in (None, "") else maximum
    except (TypeError, ValueError):
        limit = maximum
    return max(1, min(limit, maximum))


def list_movements(limit=None) -> list:
    """Most recent movements first, with product and location identifiers joined."""

    qs = StockMovement.objects.select_related("product", "from_location", "to_location").order_by("-id")
    return list(qs[: movement_limit(limit)])


def list_stock_levels() -> QuerySet[StockLevel]:
    return StockLevel.objects.select_related("product", "location").order_by("product__sku", "location__code")

"""Selectors for the location registry."""

from typing import Optional

from django.db.models import QuerySet

from .models import Location


def resolve_location(location_id) -> Optional[Location]:
    """Return the location with the given id regardless of its active flag.

    Callers decide what an inactive location means for them.
    """

    try:
        return Location.objects.get(id=location_id)
    except (Location.DoesNotExist, ValueError, TypeError):
        return None


def list_locations(*, active: Optional[bool] = None) -> QuerySet[Location]:
    qs = Location.objects.order_by("code")
    if active is not None:
        qs = qs.filter(is_active=active)
    return qs

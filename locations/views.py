"""Read-only list view for the location registry."""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics

from .selectors import list_locations
from .serializers import LocationSerializer


class LocationListView(generics.ListAPIView):
    serializer_class = LocationSerializer
    throttle_scope = "inventory"

    @extend_schema(
        tags=["Location Endpoints"],
        summary="List locations",
        description="List stock locations ordered by code. Filter: active (true/false).",
        parameters=[
            OpenApiParameter("active", OpenApiTypes.BOOL, location="query", description="Filter by active flag"),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        active = self.request.query_params.get("active")
        if active is None:
            return list_locations()
        return list_locations(active=active.lower() in ("1", "true", "yes"))

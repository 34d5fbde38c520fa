"""Read-only viewsets for the product registry."""

from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import filters as drf_filters
from rest_framework import viewsets

from .models import Product
from .serializers import ProductSerializer


class ProductFilterSet(filters.FilterSet):
    category = filters.CharFilter(field_name="category__slug")
    barcode = filters.CharFilter(field_name="barcode", lookup_expr="iexact")

    class Meta:
        model = Product
        fields = ["category", "barcode"]


@extend_schema_view(
    list=extend_schema(
        summary="List products",
        description="Returns stockable products ordered by SKU. Filter by `category` slug or `barcode`; search by text.",
        tags=["Catalog Endpoints"],
        parameters=[
            OpenApiParameter("category", OpenApiTypes.STR, location="query", description="Filter by category slug"),
            OpenApiParameter("barcode", OpenApiTypes.STR, location="query", description="Exact barcode match"),
            OpenApiParameter("search", OpenApiTypes.STR, location="query", description="Search SKU or name"),
        ],
        examples=[
            OpenApiExample(
                "Product list",
                value={
                    "count": 1,
                    "next": None,
                    "previous": None,
                    "results": [
                        {
                            "id": 1,
                            "sku": "PAL-001",
                            "name": "Euro pallet",
                            "barcode": "4006381333931",
                            "category": "Packaging",
                            "created_at": "2025-01-01T12:00:00Z",
                            "updated_at": "2025-01-01T12:00:00Z",
                        }
                    ],
                },
                response_only=True,
            )
        ],
    ),
    retrieve=extend_schema(summary="Get product", tags=["Catalog Endpoints"]),
)
class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Product.objects.select_related("category").order_by("sku")
    serializer_class = ProductSerializer
    throttle_scope = "catalog"
    filter_backends = [filters.DjangoFilterBackend, drf_filters.SearchFilter]
    filterset_class = ProductFilterSet
    search_fields = ["sku", "name"]

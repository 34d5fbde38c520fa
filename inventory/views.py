"""Inventory API: movement ledger and stock level reads."""

from catalog.models import Product
from common.choices import MovementOutcomeKind
from django.shortcuts import get_object_or_404
from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from locations.models import Location
from rest_framework import generics, status
from rest_framework import serializers as rf_serializers
from rest_framework.response import Response
from rest_framework.views import APIView

from .errors import InvalidIdempotencyKeyError, StorageFailure
from .models import StockLevel, StockMovement
from .projection import get_balance
from .selectors import list_movements, list_stock_levels
from .serializers import MovementCreateSerializer, StockLevelSerializer, StockMovementSerializer
from .services import record_movement
from .validation import QUANTITY_STEP, parse_movement_uuid

MovementErrorSerializer = inline_serializer(
    name="MovementError",
    fields={
        "code": rf_serializers.CharField(),
        "detail": rf_serializers.CharField(),
        "field": rf_serializers.CharField(allow_null=True),
        "retryable": rf_serializers.BooleanField(),
    },
)


class InventoryHealthView(APIView):
    throttle_classes = []

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Inventory health",
        description="Simple healthcheck endpoint for the inventory app",
        examples=[OpenApiExample("Health OK", value={"status": "ok", "app": "inventory"})],
    )
    def get(self, request):
        return Response({"status": "ok", "app": "inventory"})


class MovementListCreateView(APIView):
    """List recent ledger entries or submit a new movement."""

    def get_throttles(self):
        self.throttle_scope = "inventory_write" if self.request.method == "POST" else "inventory"
        return super().get_throttles()

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="List stock movements",
        description="Most recent movements first. `limit` defaults to and is capped at 100.",
        parameters=[OpenApiParameter("limit", OpenApiTypes.INT, location="query", description="Max rows (1-100)")],
        responses={200: StockMovementSerializer(many=True)},
    )
    def get(self, request):
        movements = list_movements(request.query_params.get("limit"))
        return Response({"results": StockMovementSerializer(movements, many=True).data})

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Record a stock movement",
        description=(
            "Validates and atomically applies a movement. 201 when recorded, 400 when rejected (see `code`), "
            "409 when the movement_uuid was already applied (body is the original record), 503 when storage "
            "failed and the request may be retried unchanged."
        ),
        parameters=[
            OpenApiParameter(
                name="Idempotency-Key",
                location=OpenApiParameter.HEADER,
                required=False,
                description="Used as movement_uuid when the body does not carry one",
                type=str,
            )
        ],
        request=MovementCreateSerializer,
        responses={
            201: StockMovementSerializer,
            400: MovementErrorSerializer,
            409: StockMovementSerializer,
            503: MovementErrorSerializer,
        },
        examples=[
            OpenApiExample(
                "Receipt",
                value={"movement_type": "IN", "product_id": 1, "to_location_id": 2, "quantity": "10"},
                request_only=True,
            ),
            OpenApiExample(
                "Insufficient stock",
                value={
                    "code": "insufficient_stock",
                    "detail": "Insufficient stock for product 1 at location 2: requested 10.000, available 6.000",
                    "field": "quantity",
                    "retryable": False,
                },
                response_only=True,
                status_codes=["400"],
            ),
        ],
    )
    def post(self, request):
        serializer = MovementCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        header_key = request.headers.get("Idempotency-Key")
        body_key = serializer.validated_data.get("movement_uuid")
        if header_key:
            try:
                header_uuid = parse_movement_uuid(header_key)
            except InvalidIdempotencyKeyError as exc:
                return Response(exc.as_dict(), status=status.HTTP_400_BAD_REQUEST)
            if body_key and body_key != header_uuid:
                error = InvalidIdempotencyKeyError(
                    "Idempotency-Key header does not match movement_uuid", field="movement_uuid"
                )
                return Response(error.as_dict(), status=status.HTTP_400_BAD_REQUEST)
            proposal = serializer.to_proposal(movement_uuid=header_uuid)
        else:
            proposal = serializer.to_proposal()

        try:
            outcome = record_movement(proposal)
        except StorageFailure as exc:
            return Response(exc.as_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)

        if outcome.kind == MovementOutcomeKind.REJECTED:
            return Response(outcome.error.as_dict(), status=status.HTTP_400_BAD_REQUEST)
        data = StockMovementSerializer(outcome.movement).data
        if outcome.kind == MovementOutcomeKind.DUPLICATE:
            return Response(data, status=status.HTTP_409_CONFLICT, headers={"Idempotent-Replayed": "true"})
        return Response(data, status=status.HTTP_201_CREATED)


class MovementDetailView(generics.RetrieveAPIView):
    throttle_scope = "inventory"
    serializer_class = StockMovementSerializer
    queryset = StockMovement.objects.select_related("product", "from_location", "to_location")

    @extend_schema(tags=["Inventory Endpoints"], summary="Get stock movement")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class StockLevelFilterSet(filters.FilterSet):
    product_id = filters.NumberFilter(field_name="product_id")
    location_id = filters.NumberFilter(field_name="location_id")
    sku = filters.CharFilter(field_name="product__sku", lookup_expr="iexact")
    location_code = filters.CharFilter(field_name="location__code", lookup_expr="iexact")

    class Meta:
        model = StockLevel
        fields = ["product_id", "location_id", "sku", "location_code"]


class StockLevelListView(generics.ListAPIView):
    throttle_scope = "inventory"
    serializer_class = StockLevelSerializer
    filter_backends = [filters.DjangoFilterBackend]
    filterset_class = StockLevelFilterSet

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="List stock levels",
        description="Current on-hand quantity per product and location. Filters: product_id, location_id, sku, "
        "location_code.",
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        return list_stock_levels()


class StockBalanceView(APIView):
    throttle_scope = "inventory"

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Get balance",
        description="On-hand quantity of a product at a location; 0 when no movement has touched the pair.",
        responses={
            200: inline_serializer(
                name="StockBalance",
                fields={
                    "product_id": rf_serializers.IntegerField(),
                    "location_id": rf_serializers.IntegerField(),
                    "quantity": rf_serializers.DecimalField(max_digits=15, decimal_places=3),
                },
            )
        },
    )
    def get(self, request, product_id: int, location_id: int):
        product = get_object_or_404(Product, id=product_id)
        location = get_object_or_404(Location, id=location_id)
        quantity = get_balance(product.id, location.id)
        return Response(
            {"product_id": product.id, "location_id": location.id, "quantity": str(quantity.quantize(QUANTITY_STEP))}
        )

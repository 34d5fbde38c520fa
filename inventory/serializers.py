"""Serializers for inventory domain.

Read serializers for movements and stock levels, and a transport-level write
serializer for proposed movements. Business validation of a proposal belongs
to ``inventory.validation``, not to the serializer.
"""

from rest_framework import serializers

from .models import StockLevel, StockMovement
from .validation import MovementProposal


class StockMovementSerializer(serializers.ModelSerializer):
    """Read-only representation of a ledger entry with human-readable identifiers."""

    product_sku = serializers.CharField(source="product.sku", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    from_location_code = serializers.CharField(source="from_location.code", read_only=True, default=None)
    to_location_code = serializers.CharField(source="to_location.code", read_only=True, default=None)

    class Meta:
        model = StockMovement
        fields = [
            "id",
            "movement_uuid",
            "movement_type",
            "product",
            "product_sku",
            "product_name",
            "from_location",
            "from_location_code",
            "to_location",
            "to_location_code",
            "quantity",
            "direction",
            "count_delta",
            "reason",
            "reference",
            "created_at",
        ]
        read_only_fields = fields


class StockLevelSerializer(serializers.ModelSerializer):
    sku = serializers.CharField(source="product.sku", read_only=True)
    location_code = serializers.CharField(source="location.code", read_only=True)

    class Meta:
        model = StockLevel
        fields = ["id", "product", "sku", "location", "location_code", "quantity", "last_movement", "updated_at"]
        read_only_fields = fields


class MovementCreateSerializer(serializers.Serializer):
    """Parse the request body into a ``MovementProposal``.

    Every field is optional here so that missing or unknown values reach the
    validator and come back with their specific rejection code.
    """

    movement_uuid = serializers.UUIDField(required=False, allow_null=True)
    movement_type = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=True)
    product_id = serializers.IntegerField(required=False, allow_null=True)
    from_location_id = serializers.IntegerField(required=False, allow_null=True)
    to_location_id = serializers.IntegerField(required=False, allow_null=True)
    quantity = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    direction = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    # Free-form metadata; the validator truncates to the stored lengths
    reason = serializers.CharField(required=False, allow_blank=True, default="")
    reference = serializers.CharField(required=False, allow_blank=True, default="")

    def to_proposal(self, *, movement_uuid=None) -> MovementProposal:
        data = self.validated_data
        return MovementProposal(
            movement_type=data.get("movement_type"),
            product_id=data.get("product_id"),
            quantity=data.get("quantity"),
            from_location_id=data.get("from_location_id"),
            to_location_id=data.get("to_location_id"),
            direction=data.get("direction"),
            movement_uuid=data.get("movement_uuid") or movement_uuid,
            reason=data.get("reason", ""),
            reference=data.get("reference", ""),
        )

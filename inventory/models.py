"""Inventory models (multi-location ledger).

``StockMovement`` is the append-only source of truth. ``StockLevel`` is the
projection of current on-hand quantity per (product, location), maintained by
``inventory.services.apply_movement`` and always reconstructible by replaying
movements in ascending id order.
"""

from common.choices import AdjustDirection, MovementType
from django.core.exceptions import ValidationError
from django.db import models

from .validation import (
    QUANTITY_DECIMAL_PLACES,
    QUANTITY_MAX_DIGITS,
    REASON_MAX_LENGTH,
    REFERENCE_MAX_LENGTH,
    movement_deltas,
)


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class StockMovement(models.Model):
    TYPE_IN = MovementType.IN
    TYPE_OUT = MovementType.OUT
    TYPE_MOVE = MovementType.MOVE
    TYPE_ADJUST = MovementType.ADJUST
    TYPE_COUNT = MovementType.COUNT
    TYPE_CHOICES = MovementType.choices

    movement_uuid = models.UUIDField(unique=True, editable=False)
    movement_type = models.CharField(max_length=8, choices=TYPE_CHOICES)
    product = models.ForeignKey("catalog.Product", related_name="movements", on_delete=models.PROTECT)
    from_location = models.ForeignKey(
        "locations.Location",
        null=True,
        blank=True,
        related_name="outgoing_movements",
        on_delete=models.PROTECT,
    )
    to_location = models.ForeignKey(
        "locations.Location",
        null=True,
        blank=True,
        related_name="incoming_movements",
        on_delete=models.PROTECT,
    )
    quantity = models.DecimalField(max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES)
    # ADJUST only
    direction = models.CharField(max_length=8, choices=AdjustDirection.choices, blank=True)
    # COUNT only: signed change from the balance observed at acceptance to the counted quantity
    count_delta = models.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES, null=True, blank=True
    )
    reason = models.CharField(max_length=REASON_MAX_LENGTH, blank=True)
    reference = models.CharField(max_length=REFERENCE_MAX_LENGTH, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-id"]
        constraints = [
            models.CheckConstraint(name="movement_quantity_positive", condition=models.Q(quantity__gt=0)),
        ]
        indexes = [
            models.Index(fields=["product", "id"], name="movement_product_idx"),
            models.Index(fields=["movement_type"], name="movement_type_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"#{self.id} {self.movement_type} {self.quantity} of {self.product_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Stock movements are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Stock movements are immutable and cannot be deleted")

    def signed_deltas(self):
        """Return ``[(location_id, signed_quantity), ...]`` this movement contributed."""
        return movement_deltas(
            movement_type=self.movement_type,
            quantity=self.quantity,
            from_location_id=self.from_location_id,
            to_location_id=self.to_location_id,
            direction=self.direction,
            count_delta=self.count_delta,
        )


class StockLevel(TimeStampedModel):
    product = models.ForeignKey("catalog.Product", related_name="stock_levels", on_delete=models.PROTECT)
    location = models.ForeignKey("locations.Location", related_name="stock_levels", on_delete=models.PROTECT)
    quantity = models.DecimalField(max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES, default=0)
    last_movement = models.ForeignKey(
        StockMovement,
        null=True,
        blank=True,
        related_name="+",
        on_delete=models.PROTECT,
    )

    class Meta:
        ordering = ["product_id", "location_id"]
        constraints = [
            models.UniqueConstraint(fields=["product", "location"], name="unique_stocklevel_per_pair"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"StockLevel<{self.product_id}@{self.location_id}> q={self.quantity}"

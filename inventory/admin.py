"""Admin registrations for inventory app.

Movements and stock levels are read-only here: the ledger is append-only and
the projection is written by ``inventory.services.apply_movement`` alone.
"""

from django.contrib import admin

from .models import StockLevel, StockMovement


class ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(StockMovement)
class StockMovementAdmin(ReadOnlyAdmin):
    list_display = (
        "id",
        "movement_type",
        "product",
        "from_location",
        "to_location",
        "quantity",
        "direction",
        "reference",
        "created_at",
    )
    list_filter = ("movement_type",)
    search_fields = ("product__sku", "reference", "movement_uuid")


@admin.register(StockLevel)
class StockLevelAdmin(ReadOnlyAdmin):
    list_display = ("id", "product", "location", "quantity", "last_movement", "updated_at")
    list_filter = ("location",)
    search_fields = ("product__sku", "location__code")


# EOF

from django.urls import path

from .views import (
    InventoryHealthView,
    MovementDetailView,
    MovementListCreateView,
    StockBalanceView,
    StockLevelListView,
)

urlpatterns = [
    path("health/", InventoryHealthView.as_view(), name="inventory-health"),
    path("movements/", MovementListCreateView.as_view(), name="movement-list"),
    path("movements/<int:pk>/", MovementDetailView.as_view(), name="movement-detail"),
    path("stock-levels/", StockLevelListView.as_view(), name="stock-level-list"),
    path(
        "stock-levels/<int:product_id>/<int:location_id>/",
        StockBalanceView.as_view(),
        name="stock-balance",
    ),
]

# EOF

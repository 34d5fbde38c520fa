"""Django app configuration for inventory."""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    """Movement ledger and stock level projection."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "inventory"

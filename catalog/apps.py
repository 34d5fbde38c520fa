"""Django app configuration for catalog."""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """Product registry consulted by the stock ledger."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"

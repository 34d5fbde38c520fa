"""Django app configuration for locations."""

from django.apps import AppConfig


class LocationsConfig(AppConfig):
    """Location registry consulted by the stock ledger."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "locations"

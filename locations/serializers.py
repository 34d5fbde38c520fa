from rest_framework import serializers

from .models import Location


class LocationSerializer(serializers.ModelSerializer):
    """Read-only representation of a stock location."""

    class Meta:
        model = Location
        fields = ["id", "code", "name", "description", "is_active", "created_at", "updated_at"]
        read_only_fields = fields

"""Serializers for the product registry (read-only)."""

from rest_framework import serializers

from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    category = serializers.CharField(source="category.name", read_only=True, default=None)

    class Meta:
        model = Product
        fields = ["id", "sku", "name", "barcode", "category", "created_at", "updated_at"]
        read_only_fields = fields

"""Selectors for the catalog domain.

Expose read-only query helpers to keep views thin and allow reuse across
APIs and services. Selectors should return querysets or lightweight data
structures and avoid side effects.
"""

from typing import Optional

from django.db.models import Q, QuerySet

from .models import Product


def resolve_product(product_id) -> Optional[Product]:
    """Return the product with the given id, or None if it does not exist."""

    try:
        return Product.objects.get(id=product_id)
    except (Product.DoesNotExist, ValueError, TypeError):
        return None


def list_products(*, category_slug: Optional[str] = None, search: Optional[str] = None) -> QuerySet[Product]:
    """Return products ordered by SKU, optionally filtered by category and a search term."""

    qs = Product.objects.select_related("category").order_by("sku")
    if category_slug:
        qs = qs.filter(category__slug=category_slug)
    if search:
        qs = qs.filter(Q(sku__icontains=search) | Q(name__icontains=search) | Q(barcode__iexact=search))
    return qs

from io import StringIO

import pytest
from catalog.tests.factories import ProductFactory
from django.core.management import call_command
from django.core.management.base import CommandError
from inventory.models import StockLevel
from inventory.services import apply_movement
from inventory.tests.factories import receipt, transfer
from locations.tests.factories import LocationFactory


@pytest.mark.django_db
def test_verify_stock_levels_clean():
    product = ProductFactory()
    a = LocationFactory()
    b = LocationFactory()
    apply_movement(receipt(product, a, 8))
    apply_movement(transfer(product, a, b, 3))

    out = StringIO()
    call_command("verify_stock_levels", stdout=out)
    assert "match the ledger" in out.getvalue()


@pytest.mark.django_db
def test_verify_stock_levels_reports_drift():
    product = ProductFactory()
    location = LocationFactory()
    apply_movement(receipt(product, location, 8))
    # Bypass the ledger to corrupt the projection
    StockLevel.objects.filter(product=product, location=location).update(quantity=5)

    err = StringIO()
    with pytest.raises(CommandError):
        call_command("verify_stock_levels", stderr=err)
    assert f"location={location.id}" in err.getvalue()
    assert "expected=8" in err.getvalue()


# EOF

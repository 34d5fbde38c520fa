import random
from decimal import Decimal

import pytest
from catalog.tests.factories import ProductFactory
from common.choices import MovementOutcomeKind
from django.core.exceptions import ValidationError
from django.db import OperationalError
from django.db.models import ProtectedError
from inventory import projection, services
from inventory.errors import (
    InsufficientStockError,
    InvalidQuantityError,
    InvalidTypeError,
    MovementError,
    StorageFailure,
    UnknownOrInactiveLocationError,
    UnknownProductError,
)
from inventory.models import StockLevel, StockMovement
from inventory.projection import find_drift, get_balance, replay_balances
from inventory.selectors import list_movements
from inventory.services import apply_movement, record_movement
from inventory.tests.factories import adjustment, count, issue, new_key, receipt, transfer
from inventory.validation import MovementProposal
from locations.tests.factories import LocationFactory


@pytest.mark.django_db
def test_receipt_transfer_issue_and_duplicate_scenario():
    product = ProductFactory()
    l1 = LocationFactory()
    l2 = LocationFactory()

    in_key = new_key()
    received = apply_movement(receipt(product, l1, 10, movement_uuid=in_key))
    assert received.created is True
    assert get_balance(product.id, l1.id) == Decimal("10")

    apply_movement(transfer(product, l1, l2, 4))
    assert get_balance(product.id, l1.id) == Decimal("6")
    assert get_balance(product.id, l2.id) == Decimal("4")

    with pytest.raises(InsufficientStockError):
        apply_movement(issue(product, l1, 10))
    assert get_balance(product.id, l1.id) == Decimal("6")
    assert get_balance(product.id, l2.id) == Decimal("4")

    # Same OUT request retried under the key of the accepted receipt
    replay = apply_movement(issue(product, l1, 10, movement_uuid=in_key))
    assert replay.created is False
    assert replay.movement.id == received.movement.id
    assert replay.movement.movement_type == StockMovement.TYPE_IN
    assert get_balance(product.id, l1.id) == Decimal("6")
    assert get_balance(product.id, l2.id) == Decimal("4")
    assert StockMovement.objects.count() == 2


@pytest.mark.django_db
def test_move_preserves_total_between_locations():
    product = ProductFactory()
    a = LocationFactory()
    b = LocationFactory()
    apply_movement(receipt(product, a, "12.5"))
    apply_movement(receipt(product, b, 3))

    apply_movement(transfer(product, a, b, "2.25"))

    assert get_balance(product.id, a.id) == Decimal("10.25")
    assert get_balance(product.id, b.id) == Decimal("5.25")
    assert get_balance(product.id, a.id) + get_balance(product.id, b.id) == Decimal("15.5")


@pytest.mark.django_db
def test_insufficient_issue_from_untouched_location_leaves_no_trace():
    product = ProductFactory()
    location = LocationFactory()

    with pytest.raises(InsufficientStockError) as exc:
        apply_movement(issue(product, location, 1))

    assert exc.value.available == Decimal("0")
    assert StockMovement.objects.count() == 0
    # The lazily created level row is rolled back with the rejection
    assert not StockLevel.objects.filter(product=product, location=location).exists()


@pytest.mark.django_db
@pytest.mark.parametrize(
    "build,error",
    [
        (lambda p, loc: MovementProposal(movement_type="SHIP", product_id=p.id, to_location_id=loc.id, quantity="1"),
         InvalidTypeError),
        (lambda p, loc: receipt(p, loc, 0), InvalidQuantityError),
        (lambda p, loc: receipt(p, loc, -5), InvalidQuantityError),
        (lambda p, loc: MovementProposal(movement_type="IN", product_id=p.id + 1000, to_location_id=loc.id,
                                         quantity="1"), UnknownProductError),
        (lambda p, loc: receipt(p, LocationFactory(is_active=False), 1), UnknownOrInactiveLocationError),
    ],
)
def test_structurally_invalid_movements_never_reach_the_ledger(build, error):
    product = ProductFactory()
    location = LocationFactory()

    with pytest.raises(error):
        apply_movement(build(product, location))

    assert StockMovement.objects.count() == 0
    assert StockLevel.objects.count() == 0


@pytest.mark.django_db
def test_same_uuid_twice_applies_once():
    product = ProductFactory()
    location = LocationFactory()
    key = new_key()

    first = apply_movement(receipt(product, location, 5, movement_uuid=key))
    second = apply_movement(receipt(product, location, 5, movement_uuid=key))

    assert first.created is True and second.created is False
    assert first.movement.id == second.movement.id
    assert StockMovement.objects.filter(movement_uuid=key).count() == 1
    assert get_balance(product.id, location.id) == Decimal("5")


@pytest.mark.django_db
def test_uniqueness_violation_at_insert_resolves_to_duplicate(monkeypatch):
    product = ProductFactory()
    location = LocationFactory()
    key = new_key()
    first = apply_movement(receipt(product, location, 5, movement_uuid=key))

    # Simulate the race where the key was not yet visible to validation
    monkeypatch.setattr(services.LedgerView, "find_movement", lambda self, movement_uuid: None)
    second = apply_movement(receipt(product, location, 5, movement_uuid=key))

    assert second.created is False
    assert second.movement.id == first.movement.id
    assert StockMovement.objects.count() == 1
    assert get_balance(product.id, location.id) == Decimal("5")


@pytest.mark.django_db
def test_storage_failure_is_retryable_and_rolls_back(monkeypatch):
    product = ProductFactory()
    location = LocationFactory()
    apply_movement(receipt(product, location, 5))

    def broken(level, delta, movement):
        raise OperationalError("database is locked")

    monkeypatch.setattr(projection, "apply_delta", broken)
    with pytest.raises(StorageFailure) as exc:
        apply_movement(receipt(product, location, 3))

    assert exc.value.retryable is True
    assert StockMovement.objects.count() == 1
    assert get_balance(product.id, location.id) == Decimal("5")


@pytest.mark.django_db
def test_adjustments_and_counts():
    product = ProductFactory()
    location = LocationFactory()
    apply_movement(receipt(product, location, 10))

    apply_movement(adjustment(product, location, 3, "decrease"))
    assert get_balance(product.id, location.id) == Decimal("7")
    apply_movement(adjustment(product, location, 1, "increase"))
    assert get_balance(product.id, location.id) == Decimal("8")

    counted = apply_movement(count(product, location, 5)).movement
    assert counted.count_delta == Decimal("-3")
    assert get_balance(product.id, location.id) == Decimal("5")

    counted = apply_movement(count(product, location, 9)).movement
    assert counted.count_delta == Decimal("4")
    assert get_balance(product.id, location.id) == Decimal("9")
    assert find_drift() == []


@pytest.mark.django_db
def test_negative_stock_allowed_by_setting(settings):
    settings.INVENTORY_ALLOW_NEGATIVE_STOCK = True
    product = ProductFactory()
    location = LocationFactory()

    apply_movement(issue(product, location, 4))

    assert get_balance(product.id, location.id) == Decimal("-4")


@pytest.mark.django_db
def test_projection_equals_replay_of_random_history():
    rng = random.Random(20241018)
    products = [ProductFactory() for _ in range(2)]
    locations = [LocationFactory() for _ in range(3)]

    for _ in range(80):
        product = rng.choice(products)
        a, b = rng.sample(locations, 2)
        qty = Decimal(rng.randint(1, 40)) / 4
        builder = rng.choice(
            [
                lambda: receipt(product, a, qty),
                lambda: issue(product, a, qty),
                lambda: transfer(product, a, b, qty),
                lambda: adjustment(product, a, qty, rng.choice(["increase", "decrease"])),
                lambda: count(product, a, qty),
            ]
        )
        try:
            apply_movement(builder())
        except InsufficientStockError:
            pass

    expected = replay_balances()
    stored = {(lvl.product_id, lvl.location_id): lvl.quantity for lvl in StockLevel.objects.all()}
    assert stored == expected
    assert all(quantity >= 0 for quantity in stored.values())
    assert find_drift() == []


@pytest.mark.django_db
def test_levels_track_last_movement_in_id_order():
    product = ProductFactory()
    location = LocationFactory()
    first = apply_movement(receipt(product, location, 1)).movement
    second = apply_movement(receipt(product, location, 2)).movement

    level = StockLevel.objects.get(product=product, location=location)
    assert second.id > first.id
    assert level.last_movement_id == second.id


@pytest.mark.django_db
def test_movements_are_append_only():
    product = ProductFactory()
    location = LocationFactory()
    movement = apply_movement(receipt(product, location, 1)).movement

    movement.reason = "edited"
    with pytest.raises(ValidationError):
        movement.save()
    with pytest.raises(ValidationError):
        movement.delete()
    with pytest.raises(ProtectedError):
        location.delete()


@pytest.mark.django_db
def test_record_movement_reports_three_way_outcome():
    product = ProductFactory()
    location = LocationFactory()
    key = new_key()

    created = record_movement(receipt(product, location, 2, movement_uuid=key))
    duplicate = record_movement(receipt(product, location, 2, movement_uuid=key))
    rejected = record_movement(issue(product, location, 50))

    assert created.kind == MovementOutcomeKind.CREATED
    assert duplicate.kind == MovementOutcomeKind.DUPLICATE
    assert duplicate.movement.id == created.movement.id
    assert rejected.kind == MovementOutcomeKind.REJECTED
    assert isinstance(rejected.error, MovementError)
    assert rejected.error.code == "insufficient_stock"


@pytest.mark.django_db
def test_list_movements_most_recent_first_and_bounded(settings):
    product = ProductFactory()
    location = LocationFactory()
    ids = [apply_movement(receipt(product, location, 1)).movement.id for _ in range(5)]

    assert [m.id for m in list_movements()] == sorted(ids, reverse=True)
    assert [m.id for m in list_movements(2)] == sorted(ids, reverse=True)[:2]
    assert len(list_movements(0)) == 1
    assert len(list_movements("junk")) == 5

    settings.INVENTORY_MOVEMENT_LIST_LIMIT = 3
    assert len(list_movements(500)) == 3


@pytest.mark.django_db
def test_balance_beyond_stored_precision_is_rejected():
    product = ProductFactory()
    location = LocationFactory()
    apply_movement(receipt(product, location, "999999999999"))

    with pytest.raises(InvalidQuantityError) as exc:
        apply_movement(receipt(product, location, "999999999999"))

    assert "resulting balance" in exc.value.message
    assert StockMovement.objects.count() == 1
    assert get_balance(product.id, location.id) == Decimal("999999999999")
    assert find_drift() == []


@pytest.mark.django_db
def test_count_difference_beyond_stored_precision_is_rejected(settings):
    settings.INVENTORY_ALLOW_NEGATIVE_STOCK = True
    product = ProductFactory()
    location = LocationFactory()
    apply_movement(issue(product, location, "999999999999"))

    with pytest.raises(InvalidQuantityError):
        apply_movement(count(product, location, "999999999999"))

    assert StockMovement.objects.count() == 1
    assert get_balance(product.id, location.id) == Decimal("-999999999999")

import json
import logging
from decimal import Decimal

import pytest
from catalog.tests.factories import ProductFactory
from config.logging import JsonFormatter, SamplingFilter
from inventory.errors import InsufficientStockError
from inventory.services import apply_movement
from inventory.tests.factories import issue, new_key, receipt
from locations.tests.factories import LocationFactory


def _record(msg, level=logging.INFO, **extra):
    record = logging.LogRecord("stockpilot.inventory", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extras():
    record = _record("inventory.movement_applied", event="inventory.movement_applied", quantity=Decimal("2.500"))
    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["message"] == "inventory.movement_applied"
    assert payload["event"] == "inventory.movement_applied"
    assert payload["quantity"] == "2.500"
    assert payload["time"].endswith("Z")


def test_sampling_filter_keeps_allowed_events_and_other_levels():
    drop_all = SamplingFilter(rate=0.0, levels=["INFO"], allow_events=["inventory.movement_rejected"])
    assert drop_all.filter(_record("inventory.movement_applied")) is False
    assert drop_all.filter(_record("inventory.movement_rejected")) is True
    assert drop_all.filter(_record("anything", event="inventory.movement_rejected")) is True
    assert drop_all.filter(_record("inventory.storage_failure", level=logging.ERROR)) is True
    assert SamplingFilter(rate=5).filter(_record("inventory.movement_applied")) is True


@pytest.mark.django_db
def test_ledger_emits_applied_duplicate_and_rejected_events(caplog):
    product = ProductFactory()
    location = LocationFactory()
    key = new_key()

    with caplog.at_level(logging.INFO, logger="stockpilot.inventory"):
        apply_movement(receipt(product, location, 1, movement_uuid=key))
        apply_movement(receipt(product, location, 1, movement_uuid=key))
        with pytest.raises(InsufficientStockError):
            apply_movement(issue(product, location, 5))

    records = [r for r in caplog.records if r.name == "stockpilot.inventory"]
    events = [getattr(r, "event", None) for r in records]
    assert events == [
        "inventory.movement_applied",
        "inventory.movement_duplicate",
        "inventory.movement_rejected",
    ]
    rejected = records[-1]
    assert rejected.code == "insufficient_stock"


# EOF

"""Stock level projection: current on-hand quantity per (product, location).

Rows are created lazily the first time a movement touches a pair and are
never deleted. ``apply_delta`` is reserved for ``services.apply_movement``;
nothing else writes to ``StockLevel``.
"""

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from .models import StockLevel, StockMovement
from .validation import ZERO

Pair = Tuple[int, int]


@dataclass(frozen=True)
class Drift:
    product_id: int
    location_id: int
    stored: Optional[Decimal]
    expected: Decimal


def get_balance(product_id: int, location_id: int) -> Decimal:
    """Return the on-hand quantity, 0 for a pair no movement has touched."""

    quantity = (
        StockLevel.objects.filter(product_id=product_id, location_id=location_id)
        .values_list("quantity", flat=True)
        .first()
    )
    return quantity if quantity is not None else ZERO


def lock_levels(product_id: int, location_ids: Iterable[int]) -> Dict[int, StockLevel]:
    """Lock (creating when missing) the level rows for ``product_id`` at each location.

    Must run inside ``transaction.atomic``. Rows are locked in ascending
    location id order so concurrent applies cannot deadlock on each other.
    """

    levels = {}
    for location_id in sorted(set(location_ids)):
        level, _ = StockLevel.objects.select_for_update().get_or_create(
            product_id=product_id, location_id=location_id, defaults={"quantity": ZERO}
        )
        levels[location_id] = level
    return levels


def apply_delta(level: StockLevel, delta: Decimal, movement: StockMovement) -> StockLevel:
    level.quantity = Decimal(level.quantity) + delta
    level.last_movement = movement
    level.save(update_fields=["quantity", "last_movement", "updated_at"])
    return level


def replay_balances() -> Dict[Pair, Decimal]:
    """Derive every balance from the ledger by summing contributions in id order."""

    balances: Dict[Pair, Decimal] = defaultdict(lambda: ZERO)
    movements = StockMovement.objects.order_by("id").only(
        "id",
        "movement_type",
        "product_id",
        "from_location_id",
        "to_location_id",
        "quantity",
        "direction",
        "count_delta",
    )
    for movement in movements.iterator():
        for location_id, delta in movement.signed_deltas():
            balances[(movement.product_id, location_id)] += delta
    return dict(balances)


def find_drift() -> List[Drift]:
    """Return pairs whose stored level differs from the ledger replay."""

    expected = replay_balances()
    stored = {
        (row["product_id"], row["location_id"]): row["quantity"]
        for row in StockLevel.objects.values("product_id", "location_id", "quantity")
    }
    drift = []
    for pair in sorted(set(expected) | set(stored)):
        want = expected.get(pair, ZERO)
        have = stored.get(pair)
        if have is None or have != want:
            drift.append(Drift(product_id=pair[0], location_id=pair[1], stored=have, expected=want))
    return drift

"""Inventory services: the movement ledger.

``apply_movement`` is the only mutating entry point for stock. Validation,
the balance read, the ledger append and the projection update run inside one
transaction that holds row locks on every affected ``StockLevel``; either all
of it commits or none of it does.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Tuple

from catalog.selectors import resolve_product
from common.choices import MovementOutcomeKind
from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from locations.selectors import resolve_location

from . import projection
from .errors import MovementError, StorageFailure
from .models import StockLevel, StockMovement
from .validation import Duplicate, MovementProposal, Rejected, parse_movement_uuid, validate_movement

logger = logging.getLogger("stockpilot.inventory")


@dataclass(frozen=True)
class ApplyResult:
    movement: StockMovement
    created: bool


@dataclass(frozen=True)
class MovementOutcome:
    """Three-way result of ``record_movement``: created, duplicate, or rejected."""

    kind: str
    movement: Optional[StockMovement] = None
    error: Optional[MovementError] = None


class LedgerView:
    """Database-backed ``LedgerState`` for the validator.

    Balances for pairs in ``locked`` are read from the locked rows, so the
    second validation pass decides on exactly the state this transaction holds.
    """

    def __init__(self, *, allow_negative_stock: bool, locked: Optional[Dict[Tuple[int, int], StockLevel]] = None):
        self.allow_negative_stock = allow_negative_stock
        self.locked = locked or {}

    def find_movement(self, movement_uuid):
        return find_movement(movement_uuid)

    def resolve_product(self, product_id):
        return resolve_product(product_id)

    def resolve_location(self, location_id):
        return resolve_location(location_id)

    def balance(self, product_id: int, location_id: int) -> Decimal:
        level = self.locked.get((product_id, location_id))
        if level is not None:
            return Decimal(level.quantity)
        return projection.get_balance(product_id, location_id)


def find_movement(movement_uuid) -> Optional[StockMovement]:
    return (
        StockMovement.objects.select_related("product", "from_location", "to_location")
        .filter(movement_uuid=movement_uuid)
        .first()
    )


def apply_movement(proposal: MovementProposal, *, allow_negative_stock: Optional[bool] = None) -> ApplyResult:
    """Validate and atomically apply a proposed movement.

    Returns ``ApplyResult(created=True)`` for a new ledger row, or the stored
    row with ``created=False`` when the idempotency key was already used.
    Raises a ``MovementError`` subclass on rejection and ``StorageFailure``
    when the database refused the transaction.
    """

    if allow_negative_stock is None:
        allow_negative_stock = getattr(settings, "INVENTORY_ALLOW_NEGATIVE_STOCK", False)
    proposal = proposal.with_generated_uuid()

    try:
        result = _apply_atomically(proposal, allow_negative_stock)
    except IntegrityError as exc:
        # A concurrent apply committed the same movement_uuid first
        existing = find_movement(parse_movement_uuid(proposal.movement_uuid))
        if existing is None:
            logger.exception(
                "inventory.storage_failure",
                extra={"event": "inventory.storage_failure", "movement_uuid": str(proposal.movement_uuid)},
            )
            raise StorageFailure("Movement could not be stored; retry the request") from exc
        result = ApplyResult(movement=existing, created=False)
    except DatabaseError as exc:
        logger.exception(
            "inventory.storage_failure",
            extra={"event": "inventory.storage_failure", "movement_uuid": str(proposal.movement_uuid)},
        )
        raise StorageFailure("Movement could not be stored; retry the request") from exc
    except MovementError as exc:
        logger.info(
            "inventory.movement_rejected",
            extra={
                "event": "inventory.movement_rejected",
                "code": exc.code,
                "field": exc.field,
                "movement_uuid": str(proposal.movement_uuid),
                "movement_type": str(proposal.movement_type),
            },
        )
        raise

    movement = result.movement
    event = "inventory.movement_applied" if result.created else "inventory.movement_duplicate"
    logger.info(
        event,
        extra={
            "event": event,
            "movement_id": movement.id,
            "movement_uuid": str(movement.movement_uuid),
            "movement_type": movement.movement_type,
            "product_id": movement.product_id,
            "from_location_id": movement.from_location_id,
            "to_location_id": movement.to_location_id,
            "quantity": str(movement.quantity),
        },
    )
    return result


@transaction.atomic
def _apply_atomically(proposal: MovementProposal, allow_negative_stock: bool) -> ApplyResult:
    decision = validate_movement(proposal, LedgerView(allow_negative_stock=allow_negative_stock))
    if isinstance(decision, Duplicate):
        return ApplyResult(movement=decision.movement, created=False)
    if isinstance(decision, Rejected):
        raise decision.error

    levels = projection.lock_levels(decision.product_id, [location_id for location_id, _ in decision.deltas])
    locked = {(decision.product_id, location_id): level for location_id, level in levels.items()}

    # Balances may have moved between the unlocked read and acquiring the locks
    decision = validate_movement(proposal, LedgerView(allow_negative_stock=allow_negative_stock, locked=locked))
    if isinstance(decision, Duplicate):
        return ApplyResult(movement=decision.movement, created=False)
    if isinstance(decision, Rejected):
        raise decision.error

    movement = StockMovement.objects.create(
        movement_uuid=decision.movement_uuid,
        movement_type=decision.movement_type,
        product_id=decision.product_id,
        from_location_id=decision.from_location_id,
        to_location_id=decision.to_location_id,
        quantity=decision.quantity,
        direction=decision.direction,
        count_delta=decision.count_delta,
        reason=decision.reason,
        reference=decision.reference,
    )
    for location_id, delta in decision.deltas:
        projection.apply_delta(levels[location_id], delta, movement)
    return ApplyResult(movement=movement, created=True)


def record_movement(proposal: MovementProposal) -> MovementOutcome:
    """Apply a movement and report the three-way outcome.

    Input errors become a ``REJECTED`` outcome; ``StorageFailure`` propagates
    so transports can report it as retryable.
    """

    try:
        result = apply_movement(proposal)
    except StorageFailure:
        raise
    except MovementError as exc:
        return MovementOutcome(kind=MovementOutcomeKind.REJECTED, error=exc)
    kind = MovementOutcomeKind.CREATED if result.created else MovementOutcomeKind.DUPLICATE
    return MovementOutcome(kind=kind, movement=result.movement)

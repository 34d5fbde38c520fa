"""Movement validation.

``validate_movement`` decides whether a proposed movement may be applied and
which signed stock deltas it implies. It is a pure function of its inputs: all
reads go through the ``LedgerState`` it is given and nothing is written. The
ledger calls it twice per apply, once against an unlocked view and again
under the row locks of the applying transaction.

Per-type location rules:

======  ==========  ==========  ==========================================
Type    from        to          Effect
======  ==========  ==========  ==========================================
IN      forbidden   required    +q at to
OUT     required    forbidden   -q at from
MOVE    required    required    -q at from, +q at to (from != to)
ADJUST  forbidden   required    +q or -q at to, per ``direction``
COUNT   forbidden   required    balance at to becomes q
======  ==========  ==========  ==========================================
"""

import uuid
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Protocol, Tuple, Union

from common.choices import AdjustDirection, MovementType

from .errors import (
    InsufficientStockError,
    InvalidDirectionError,
    InvalidIdempotencyKeyError,
    InvalidLocationForTypeError,
    InvalidQuantityError,
    InvalidTypeError,
    MissingFieldError,
    MissingLocationForTypeError,
    MovementError,
    UnknownOrInactiveLocationError,
    UnknownProductError,
)

QUANTITY_MAX_DIGITS = 15
QUANTITY_DECIMAL_PLACES = 3
QUANTITY_STEP = Decimal(1).scaleb(-QUANTITY_DECIMAL_PLACES)
QUANTITY_LIMIT = Decimal(10) ** (QUANTITY_MAX_DIGITS - QUANTITY_DECIMAL_PLACES)
ZERO = Decimal("0")
REASON_MAX_LENGTH = 200
REFERENCE_MAX_LENGTH = 120

# (from_location required, to_location required); anything not required is forbidden
LOCATION_RULES = {
    MovementType.IN.value: (False, True),
    MovementType.OUT.value: (True, False),
    MovementType.MOVE.value: (True, True),
    MovementType.ADJUST.value: (False, True),
    MovementType.COUNT.value: (False, True),
}

Deltas = Tuple[Tuple[int, Decimal], ...]


@dataclass(frozen=True)
class MovementProposal:
    """Raw, unvalidated input for a movement. Fields are as received."""

    movement_type: Any = None
    product_id: Any = None
    quantity: Any = None
    from_location_id: Any = None
    to_location_id: Any = None
    direction: Any = None
    movement_uuid: Any = None
    reason: str = ""
    reference: str = ""

    def with_generated_uuid(self) -> "MovementProposal":
        if _is_blank(self.movement_uuid):
            return replace(self, movement_uuid=uuid.uuid4())
        return self


class LedgerState(Protocol):
    """Read-only view of the registries, the ledger and the projection."""

    allow_negative_stock: bool

    def find_movement(self, movement_uuid: uuid.UUID) -> Any: ...

    def resolve_product(self, product_id: Any) -> Any: ...

    def resolve_location(self, location_id: Any) -> Any: ...

    def balance(self, product_id: int, location_id: int) -> Decimal: ...


@dataclass(frozen=True)
class Accepted:
    movement_uuid: Optional[uuid.UUID]
    movement_type: str
    product_id: int
    quantity: Decimal
    from_location_id: Optional[int]
    to_location_id: Optional[int]
    direction: str
    count_delta: Optional[Decimal]
    deltas: Deltas
    reason: str = ""
    reference: str = ""


@dataclass(frozen=True)
class Rejected:
    error: MovementError


@dataclass(frozen=True)
class Duplicate:
    movement: Any


Decision = Union[Accepted, Rejected, Duplicate]


def movement_deltas(
    *,
    movement_type: str,
    quantity: Decimal,
    from_location_id: Optional[int],
    to_location_id: Optional[int],
    direction: str = "",
    count_delta: Optional[Decimal] = None,
) -> Deltas:
    """Signed contribution of a movement to each location it touches."""

    if movement_type == MovementType.IN:
        return ((to_location_id, quantity),)
    if movement_type == MovementType.OUT:
        return ((from_location_id, -quantity),)
    if movement_type == MovementType.MOVE:
        return ((from_location_id, -quantity), (to_location_id, quantity))
    if movement_type == MovementType.ADJUST:
        signed = quantity if direction == AdjustDirection.INCREASE else -quantity
        return ((to_location_id, signed),)
    if movement_type == MovementType.COUNT:
        return ((to_location_id, count_delta if count_delta is not None else ZERO),)
    raise ValueError(f"Unknown movement type {movement_type!r}")


def parse_movement_uuid(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except ValueError:
        raise InvalidIdempotencyKeyError("movement_uuid must be a UUID", field="movement_uuid")


def parse_quantity(value: Any) -> Decimal:
    """Return ``value`` as a Decimal in stored precision, or raise InvalidQuantityError."""

    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise InvalidQuantityError("quantity must be a number", field="quantity")
    try:
        quantity = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidQuantityError("quantity must be a number", field="quantity")
    if not quantity.is_finite():
        raise InvalidQuantityError("quantity must be finite", field="quantity")
    if quantity <= ZERO:
        raise InvalidQuantityError("quantity must be greater than zero", field="quantity")
    if quantity >= QUANTITY_LIMIT:
        raise InvalidQuantityError("quantity is too large", field="quantity")
    if quantity != quantity.quantize(QUANTITY_STEP):
        raise InvalidQuantityError(
            f"quantity allows at most {QUANTITY_DECIMAL_PLACES} decimal places", field="quantity"
        )
    return quantity.quantize(QUANTITY_STEP)


def validate_movement(proposal: MovementProposal, state: LedgerState) -> Decision:
    """Decide a proposal: ``Duplicate`` if its key is already in the ledger,
    ``Rejected`` with the first failing rule, otherwise ``Accepted`` with deltas.
    """

    key = None
    if not _is_blank(proposal.movement_uuid):
        try:
            key = parse_movement_uuid(proposal.movement_uuid)
        except MovementError as exc:
            return Rejected(exc)
        existing = state.find_movement(key)
        if existing is not None:
            return Duplicate(existing)

    try:
        return _accept(proposal, key, state)
    except MovementError as exc:
        return Rejected(exc)


def _accept(proposal: MovementProposal, key: Optional[uuid.UUID], state: LedgerState) -> Accepted:
    movement_type = proposal.movement_type
    if _is_blank(movement_type):
        raise InvalidTypeError("movement_type is required", field="movement_type")
    if not isinstance(movement_type, str) or movement_type not in MovementType.values:
        raise InvalidTypeError(
            f"movement_type must be one of {', '.join(MovementType.values)}", field="movement_type"
        )

    if _is_blank(proposal.product_id):
        raise MissingFieldError("product_id is required", field="product_id")
    if _is_blank(proposal.quantity):
        raise MissingFieldError("quantity is required", field="quantity")
    quantity = parse_quantity(proposal.quantity)

    product_id = _coerce_id(proposal.product_id)
    product = state.resolve_product(product_id) if product_id is not None else None
    if product is None:
        raise UnknownProductError(f"Product {proposal.product_id} does not exist", field="product_id")

    from_id = _resolve_active_location(state, proposal.from_location_id, "from_location_id")
    to_id = _resolve_active_location(state, proposal.to_location_id, "to_location_id")
    _check_locations_for_type(movement_type, from_id, to_id)

    direction = ""
    if movement_type == MovementType.ADJUST:
        direction = _parse_direction(proposal.direction)

    count_delta = None
    if movement_type == MovementType.COUNT:
        count_delta = quantity - state.balance(product.id, to_id)
        if abs(count_delta) >= QUANTITY_LIMIT:
            raise InvalidQuantityError("count difference is too large", field="quantity")

    deltas = movement_deltas(
        movement_type=movement_type,
        quantity=quantity,
        from_location_id=from_id,
        to_location_id=to_id,
        direction=direction,
        count_delta=count_delta,
    )
    # Resulting balances must fit the stored precision
    for location_id, delta in deltas:
        if abs(state.balance(product.id, location_id) + delta) >= QUANTITY_LIMIT:
            raise InvalidQuantityError("resulting balance is too large", field="quantity")

    if not state.allow_negative_stock:
        for location_id, delta in deltas:
            if delta >= ZERO:
                continue
            available = state.balance(product.id, location_id)
            if available + delta < ZERO:
                raise InsufficientStockError(
                    product_id=product.id, location_id=location_id, available=available, requested=-delta
                )

    return Accepted(
        movement_uuid=key,
        movement_type=str(movement_type),
        product_id=product.id,
        quantity=quantity,
        from_location_id=from_id,
        to_location_id=to_id,
        direction=direction,
        count_delta=count_delta,
        deltas=deltas,
        reason=str(proposal.reason or "")[:REASON_MAX_LENGTH],
        reference=str(proposal.reference or "")[:REFERENCE_MAX_LENGTH],
    )


def _resolve_active_location(state: LedgerState, raw_id: Any, field: str) -> Optional[int]:
    if _is_blank(raw_id):
        return None
    location_id = _coerce_id(raw_id)
    location = state.resolve_location(location_id) if location_id is not None else None
    if location is None or not location.is_active:
        raise UnknownOrInactiveLocationError(f"Location {raw_id} does not exist or is inactive", field=field)
    return location.id


def _check_locations_for_type(movement_type: str, from_id: Optional[int], to_id: Optional[int]) -> None:
    from_required, to_required = LOCATION_RULES[str(movement_type)]
    if from_required and from_id is None:
        raise MissingLocationForTypeError(f"{movement_type} requires from_location", field="from_location_id")
    if to_required and to_id is None:
        raise MissingLocationForTypeError(f"{movement_type} requires to_location", field="to_location_id")
    if not from_required and from_id is not None:
        raise InvalidLocationForTypeError(f"{movement_type} does not take a from_location", field="from_location_id")
    if not to_required and to_id is not None:
        raise InvalidLocationForTypeError(f"{movement_type} does not take a to_location", field="to_location_id")
    if from_id is not None and from_id == to_id:
        raise InvalidLocationForTypeError(
            f"{movement_type} requires different from_location and to_location", field="to_location_id"
        )


def _parse_direction(value: Any) -> str:
    if _is_blank(value):
        raise MissingFieldError("ADJUST requires direction (increase or decrease)", field="direction")
    if not isinstance(value, str) or value.strip().lower() not in AdjustDirection.values:
        raise InvalidDirectionError("direction must be 'increase' or 'decrease'", field="direction")
    return value.strip().lower()


def _coerce_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())

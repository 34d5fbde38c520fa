"""Error taxonomy for stock movements.

Every rejection carries a stable ``code`` and a ``retryable`` flag so callers
can tell "fix your input" from "try again". Input errors never leave a trace
in the ledger; ``StorageFailure`` is raised only after the surrounding
transaction has rolled back, so a blind retry is safe.
"""

from decimal import Decimal
from typing import Optional


class MovementError(Exception):
    """Base class for a movement that was not applied."""

    code = "movement_error"
    retryable = False

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "detail": self.message,
            "field": self.field,
            "retryable": self.retryable,
        }


class InvalidTypeError(MovementError):
    code = "invalid_type"


class MissingFieldError(MovementError):
    code = "missing_required_field"


class InvalidQuantityError(MovementError):
    code = "invalid_quantity"


class UnknownProductError(MovementError):
    code = "unknown_product"


class UnknownOrInactiveLocationError(MovementError):
    code = "unknown_or_inactive_location"


class MissingLocationForTypeError(MovementError):
    code = "missing_location_for_type"


class InvalidLocationForTypeError(MovementError):
    code = "invalid_location_for_type"


class InvalidDirectionError(MovementError):
    code = "invalid_direction"


class InvalidIdempotencyKeyError(MovementError):
    code = "invalid_idempotency_key"


class InsufficientStockError(MovementError):
    code = "insufficient_stock"

    def __init__(self, *, product_id: int, location_id: int, available: Decimal, requested: Decimal):
        super().__init__(
            f"Insufficient stock for product {product_id} at location {location_id}: "
            f"requested {requested}, available {available}",
            field="quantity",
        )
        self.product_id = product_id
        self.location_id = location_id
        self.available = available
        self.requested = requested

    def as_dict(self) -> dict:
        data = super().as_dict()
        data.update(
            {
                "product_id": self.product_id,
                "location_id": self.location_id,
                "available": str(self.available),
                "requested": str(self.requested),
            }
        )
        return data


class StorageFailure(MovementError):
    """Transaction conflict, unexpected constraint violation, or lost connection."""

    code = "storage_failure"
    retryable = True

"""Shared enumerations and choices used across apps."""

from django.db import models


class MovementType(models.TextChoices):
    """Closed set of stock movement kinds recorded in the ledger."""

    IN = "IN", "Receipt"
    OUT = "OUT", "Issue"
    MOVE = "MOVE", "Transfer"
    ADJUST = "ADJUST", "Adjustment"
    COUNT = "COUNT", "Physical count"


class AdjustDirection(models.TextChoices):
    """Explicit sign of an ADJUST movement."""

    INCREASE = "increase", "Increase"
    DECREASE = "decrease", "Decrease"


class MovementOutcomeKind(models.TextChoices):
    CREATED = "created", "Created"
    DUPLICATE = "duplicate", "Duplicate"
    REJECTED = "rejected", "Rejected"

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from ..core.constants import MONEY_QUANTUM
from ..core.exceptions import ValidationError


def to_decimal(value: Any, field_name: str = "value") -> Decimal:
    """Convert request/DB values to Decimal without going through binary floats."""

    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents. Only used at the persistence/display boundary."""
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)

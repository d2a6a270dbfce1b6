from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Final

from ..core.errors import InvalidInterval, InvalidRate

_CENT: Final[Decimal] = Decimal("0.01")


def _to_decimal(value: object, *, label: str) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError(f"Invalid {label} value: {value!r}") from exc


def validate_rate(price_per_hour: object) -> Decimal:
    """Return the hourly rate as ``Decimal`` or raise ``InvalidRate``."""

    if price_per_hour is None:
        raise InvalidRate("Price per hour is not available")
    try:
        rate = _to_decimal(price_per_hour, label="rate")
    except ValueError as exc:
        raise InvalidRate(str(exc)) from exc
    if not rate.is_finite() or rate < 0:
        raise InvalidRate(f"Price per hour must be non-negative, got {price_per_hour!r}")
    return rate


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def compute_cost(duration_hours: float, price_per_hour: object) -> Decimal:
    """Cost of ``duration_hours`` at ``price_per_hour``, rounded half-up to cents."""

    rate = validate_rate(price_per_hour)
    hours = _to_decimal(duration_hours, label="duration")
    if hours < 0:
        raise InvalidInterval(f"Duration must be non-negative, got {duration_hours!r}")
    return round_money(hours * rate)


def compute_extension_cost(extend_hours: float, price_per_hour: object) -> Decimal:
    # Priced on the increment alone; callers add it to the running total.
    return compute_cost(extend_hours, price_per_hour)


__all__ = ["validate_rate", "round_money", "compute_cost", "compute_extension_cost"]

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from ..core.booking import Booking, BookingStatus
from ..core.constants import (
    MAX_EXTENSION_HOURS,
    MIN_EXTENSION_HOURS,
    NEAR_START_EXTENSION_WINDOW,
)
from ..core.errors import (
    Conflict,
    EligibilityReason,
    InvalidDuration,
    InvalidRate,
    NotEligible,
    PricingUnavailable,
)
from ..core.timeutils import ensure_aware
from .pricing import compute_extension_cost, validate_rate


@dataclass(frozen=True, slots=True)
class ExtensionQuote:
    new_end_time: datetime
    additional_cost: Decimal


def check_version(booking: Booking, expected_version: int | None) -> None:
    if expected_version is not None and expected_version != booking.version:
        raise Conflict(expected_version, booking.version)


def validate_extension_hours(
    extend_hours: float,
    *,
    min_hours: float = MIN_EXTENSION_HOURS,
    max_hours: float = MAX_EXTENSION_HOURS,
) -> None:
    if isinstance(extend_hours, bool) or not isinstance(extend_hours, (int, float, Decimal)):
        raise InvalidDuration(f"Extension must be a number of hours, got {extend_hours!r}")
    if not min_hours <= extend_hours <= max_hours:
        raise InvalidDuration(
            f"Extension must be between {min_hours} and {max_hours} hours, got {extend_hours}"
        )


def check_eligibility(
    booking: Booking,
    now: datetime,
    *,
    near_start_window: timedelta = NEAR_START_EXTENSION_WINDOW,
) -> None:
    if booking.status == BookingStatus.active:
        return
    if booking.status != BookingStatus.upcoming:
        raise NotEligible(
            EligibilityReason.wrong_status,
            f"Cannot extend a {booking.status.value} booking",
        )
    if booking.start_time - ensure_aware(now) >= near_start_window:
        raise NotEligible(
            EligibilityReason.not_yet_eligible,
            "Extension opens closer to the start of the booking",
        )


def _rate_or_unavailable(price_per_hour: object) -> Decimal:
    try:
        return validate_rate(price_per_hour)
    except InvalidRate as exc:
        raise PricingUnavailable(str(exc)) from exc


def quote_extension(booking: Booking, extend_hours: float, price_per_hour: object) -> ExtensionQuote:
    """Preview the new end time and the extra charge without applying them."""

    validate_extension_hours(extend_hours)
    rate = _rate_or_unavailable(price_per_hour)
    return ExtensionQuote(
        new_end_time=booking.end_time + timedelta(hours=float(extend_hours)),
        additional_cost=compute_extension_cost(extend_hours, rate),
    )


def extend(
    booking: Booking,
    now: datetime,
    extend_hours: float,
    price_per_hour: object,
    *,
    expected_version: int | None = None,
    near_start_window: timedelta = NEAR_START_EXTENSION_WINDOW,
    min_hours: float = MIN_EXTENSION_HOURS,
    max_hours: float = MAX_EXTENSION_HOURS,
) -> Booking:
    """Push the end of ``booking`` back by ``extend_hours`` and charge for it.

    The status is left as is; callers re-evaluate afterwards. Raises an
    ``ExtensionError`` subclass and changes nothing when any check fails.
    """

    check_version(booking, expected_version)
    validate_extension_hours(extend_hours, min_hours=min_hours, max_hours=max_hours)
    check_eligibility(booking, now, near_start_window=near_start_window)
    rate = _rate_or_unavailable(price_per_hour)
    additional_cost = compute_extension_cost(extend_hours, rate)
    return booking.evolve(
        end_time=booking.end_time + timedelta(hours=float(extend_hours)),
        total_cost=booking.total_cost + additional_cost,
        version=booking.version + 1,
    )


def can_extend(
    booking: Booking,
    now: datetime,
    price_per_hour: object,
    *,
    near_start_window: timedelta = NEAR_START_EXTENSION_WINDOW,
) -> bool:
    if price_per_hour is None:
        return False
    try:
        check_eligibility(booking, now, near_start_window=near_start_window)
        _rate_or_unavailable(price_per_hour)
    except (NotEligible, PricingUnavailable):
        return False
    return True


__all__ = [
    "ExtensionQuote",
    "check_version",
    "validate_extension_hours",
    "check_eligibility",
    "quote_extension",
    "extend",
    "can_extend",
]

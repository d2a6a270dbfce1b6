from __future__ import annotations

from datetime import datetime, timedelta

from ..core.booking import Booking, BookingStatus
from ..core.constants import CANCELLATION_LEAD_TIME
from ..core.errors import EligibilityReason, NotEligible
from ..core.timeutils import ensure_aware
from .extension_policy import check_version


def check_eligibility(
    booking: Booking,
    now: datetime,
    *,
    lead_time: timedelta = CANCELLATION_LEAD_TIME,
) -> None:
    if booking.status != BookingStatus.upcoming:
        raise NotEligible(
            EligibilityReason.wrong_status,
            f"Cannot cancel a {booking.status.value} booking",
        )
    if booking.start_time - ensure_aware(now) <= lead_time:
        minutes = int(lead_time.total_seconds() // 60)
        raise NotEligible(
            EligibilityReason.too_late,
            f"Bookings can only be cancelled more than {minutes} minutes before the start",
        )


def cancel(
    booking: Booking,
    now: datetime,
    *,
    expected_version: int | None = None,
    lead_time: timedelta = CANCELLATION_LEAD_TIME,
) -> Booking:
    # Cost and window are kept; refunds belong to the payment provider.
    check_version(booking, expected_version)
    check_eligibility(booking, now, lead_time=lead_time)
    return booking.evolve(status=BookingStatus.cancelled, version=booking.version + 1)


def can_cancel(
    booking: Booking,
    now: datetime,
    *,
    lead_time: timedelta = CANCELLATION_LEAD_TIME,
) -> bool:
    try:
        check_eligibility(booking, now, lead_time=lead_time)
    except NotEligible:
        return False
    return True


__all__ = ["check_eligibility", "cancel", "can_cancel"]

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.core.booking import Booking, BookingStatus
from app.core.errors import CancellationError, Conflict, EligibilityReason, NotEligible
from app.services import booking_service, cancellation_policy

T = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_booking(status=BookingStatus.upcoming, version=0):
    return Booking(
        id="b1",
        space_id="ps1",
        facility_name="City Center Parking",
        facility_address="123 Main St, Anytown",
        start_time=T + timedelta(hours=2),
        end_time=T + timedelta(hours=4),
        total_cost=Decimal("5.00"),
        status=status,
        price_per_hour=Decimal("2.50"),
        version=version,
    )


def test_cancellation_rules():
    booking = make_booking()

    with pytest.raises(NotEligible) as exc_info:
        cancellation_policy.cancel(booking, T + timedelta(hours=1, minutes=20))
    assert exc_info.value.reason == EligibilityReason.too_late

    cancelled = cancellation_policy.cancel(booking, T)
    assert cancelled.status == BookingStatus.cancelled
    assert cancelled.total_cost == booking.total_cost
    assert (cancelled.start_time, cancelled.end_time) == (booking.start_time, booking.end_time)
    assert cancelled.version == booking.version + 1


@pytest.mark.parametrize(
    "minutes_before_start, allowed",
    [(240, True), (61, True), (60, False), (59, False), (0, False), (-30, False)],
)
def test_lead_time_boundary(minutes_before_start, allowed):
    booking = make_booking()
    now = booking.start_time - timedelta(minutes=minutes_before_start)
    assert cancellation_policy.can_cancel(booking, now) is allowed


@pytest.mark.parametrize(
    "status", [BookingStatus.active, BookingStatus.completed, BookingStatus.cancelled]
)
def test_only_upcoming_bookings_can_be_cancelled(status):
    with pytest.raises(NotEligible) as exc_info:
        cancellation_policy.cancel(make_booking(status=status), T)
    assert exc_info.value.reason == EligibilityReason.wrong_status


def test_cancel_with_stale_version_conflicts():
    with pytest.raises(Conflict):
        cancellation_policy.cancel(make_booking(version=2), T, expected_version=1)


def test_on_cancel_returns_errors_as_values():
    result = booking_service.on_cancel(make_booking(), T + timedelta(hours=1))
    assert isinstance(result, CancellationError)
    assert result.kind == "not_eligible"
    assert result.reason == EligibilityReason.too_late

    result = booking_service.on_cancel(make_booking(), T)
    assert isinstance(result, Booking)
    assert result.status == BookingStatus.cancelled

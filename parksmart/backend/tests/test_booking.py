from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.core.booking import Booking, BookingStatus
from app.core.errors import (
    BookingNotFound,
    Conflict,
    ExtensionError,
    InvalidDuration,
    InvalidInterval,
    NotEligible,
    PricingUnavailable,
)
from app.db import models
from app.services import booking_service

T = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def create_space(session, space_id="ps1", price_per_hour=2.5):
    space = models.ParkingSpace(
        id=space_id,
        slot_label="A1",
        floor_level="P1",
        facility_name="City Center Parking",
        facility_address="123 Main St, Anytown",
        price_per_hour=price_per_hour,
    )
    session.add(space)
    session.commit()
    session.refresh(space)
    return space


def create_booking(session, space=None, start=T + timedelta(hours=2), hours=2):
    space = space or create_space(session)
    return booking_service.create_booking(
        session, space, start, hours, now=T, vehicle_plate="UPC 001"
    )


def test_create_booking_prices_the_window(db_session):
    booking = create_booking(db_session)

    assert booking.id.startswith("bk_")
    assert booking.status == BookingStatus.upcoming
    assert Decimal(str(booking.total_cost)) == Decimal("5.00")
    assert booking.facility_name == "City Center Parking"
    assert booking.version == 0


@pytest.mark.parametrize("hours", [0, 25])
def test_create_booking_rejects_invalid_duration(db_session, hours):
    space = create_space(db_session)
    with pytest.raises(InvalidDuration):
        booking_service.create_booking(db_session, space, T + timedelta(hours=1), hours, now=T)


def test_create_booking_rejects_past_start(db_session):
    space = create_space(db_session)
    with pytest.raises(InvalidInterval):
        booking_service.create_booking(db_session, space, T - timedelta(minutes=5), 1, now=T)


def test_create_booking_requires_price(db_session):
    space = create_space(db_session, price_per_hour=None)
    with pytest.raises(PricingUnavailable):
        booking_service.create_booking(db_session, space, T + timedelta(hours=1), 1, now=T)


def test_fetch_booking_and_price(db_session):
    booking = create_booking(db_session)

    value = booking_service.fetch_booking(db_session, booking.id)
    assert isinstance(value, Booking)
    assert value.start_time == T + timedelta(hours=2)
    assert booking_service.fetch_price_per_hour(db_session, "ps1") == Decimal("2.5")

    with pytest.raises(BookingNotFound):
        booking_service.fetch_booking(db_session, "missing")
    with pytest.raises(PricingUnavailable):
        booking_service.fetch_price_per_hour(db_session, "missing")


def test_refresh_status_persists_and_audits(db_session):
    booking = create_booking(db_session)

    booking_service.refresh_status(db_session, booking, T + timedelta(hours=3))
    assert booking.status == BookingStatus.active

    logs = db_session.query(models.AuditLog).filter_by(booking_id=booking.id).all()
    assert [log.action for log in logs] == ["booking_status_changed"]
    assert logs[0].payload == {"from": "upcoming", "to": "active"}
    assert logs[0].actor_type == models.ActorType.system


def test_extend_booking(db_session):
    booking = create_booking(db_session)

    booking_service.extend_booking(db_session, booking, 1, now=T + timedelta(hours=3), expected_version=0)

    db_session.refresh(booking)
    assert booking.status == BookingStatus.active
    assert Decimal(str(booking.total_cost)) == Decimal("7.50")
    assert booking_service.to_value(booking).end_time == T + timedelta(hours=5)
    assert booking.version == 1
    actions = [log.action for log in db_session.query(models.AuditLog).order_by(models.AuditLog.id)]
    assert actions == ["booking_status_changed", "booking_extended"]


def test_extend_booking_after_end_is_rejected(db_session):
    booking = create_booking(db_session)
    with pytest.raises(NotEligible):
        booking_service.extend_booking(db_session, booking, 1, now=T + timedelta(hours=6))
    db_session.refresh(booking)
    assert booking.status == BookingStatus.completed
    assert Decimal(str(booking.total_cost)) == Decimal("5.00")


def test_extend_booking_with_stale_version(db_session):
    booking = create_booking(db_session)
    booking_service.extend_booking(db_session, booking, 1, now=T + timedelta(hours=3))
    with pytest.raises(Conflict):
        booking_service.extend_booking(
            db_session, booking, 1, now=T + timedelta(hours=3), expected_version=0
        )


def test_extend_booking_falls_back_to_space_price(db_session):
    booking = create_booking(db_session)
    booking.price_per_hour = None
    db_session.commit()

    booking_service.extend_booking(db_session, booking, 2, now=T + timedelta(hours=3))
    assert Decimal(str(booking.total_cost)) == Decimal("10.00")


def test_cancel_booking(db_session):
    booking = create_booking(db_session)

    with pytest.raises(NotEligible):
        booking_service.cancel_booking(db_session, booking, now=T + timedelta(hours=1, minutes=30))

    result = booking_service.cancel_booking(
        db_session, booking, actor="driver", now=T, reason="plans changed"
    )
    assert result.status == BookingStatus.cancelled
    assert result.canceled_by == "driver"
    assert result.cancellation_reason == "plans changed"
    assert Decimal(str(result.total_cost)) == Decimal("5.00")

    with pytest.raises(ExtensionError):
        booking_service.extend_booking(db_session, booking, 1, now=T + timedelta(hours=3))


def test_on_extend_returns_errors_as_values():
    booking = Booking(
        id="b1",
        space_id="ps1",
        facility_name="Downtown Garage",
        facility_address="456 Oak Ave, Metropolis",
        start_time=T - timedelta(hours=1),
        end_time=T + timedelta(hours=1),
        total_cost=Decimal("6.00"),
        status=BookingStatus.active,
        price_per_hour=Decimal("3.00"),
    )

    error = booking_service.on_extend(booking, T, 13, Decimal("3.00"))
    assert isinstance(error, InvalidDuration)
    assert error.kind == "invalid_duration"

    extended = booking_service.on_extend(booking, T, 2, Decimal("3.00"))
    assert extended.total_cost == Decimal("12.00")
    assert booking_service.on_evaluate(extended, T + timedelta(hours=3)).status == BookingStatus.completed


def test_sweep_booking_statuses(db_session):
    space = create_space(db_session)
    soon = create_booking(db_session, space, start=T + timedelta(hours=1), hours=1)
    later = create_booking(db_session, space, start=T + timedelta(days=1), hours=1)

    assert booking_service.sweep_booking_statuses(db_session, T + timedelta(hours=1, minutes=30)) == 1
    assert booking_service.sweep_booking_statuses(db_session, T + timedelta(hours=1, minutes=30)) == 0
    db_session.refresh(soon)
    db_session.refresh(later)
    assert soon.status == BookingStatus.active
    assert later.status == BookingStatus.upcoming

    assert booking_service.sweep_booking_statuses(db_session, T + timedelta(hours=3)) == 1
    db_session.refresh(soon)
    assert soon.status == BookingStatus.completed


def test_list_bookings_filters_history(db_session):
    space = create_space(db_session)
    first = create_booking(db_session, space, start=T + timedelta(hours=1), hours=1)
    second = create_booking(db_session, space, start=T + timedelta(hours=2), hours=1)
    third = create_booking(db_session, space, start=T + timedelta(days=2), hours=1)
    booking_service.cancel_booking(db_session, third, now=T)

    now = T + timedelta(hours=2, minutes=30)
    assert [b.id for b in booking_service.list_bookings(db_session, now=now)] == [
        third.id,
        second.id,
        first.id,
    ]
    history = booking_service.list_bookings(db_session, now=now, status_filter="history")
    assert [(b.id, b.status) for b in history] == [
        (third.id, BookingStatus.cancelled),
        (first.id, BookingStatus.completed),
    ]
    active = booking_service.list_bookings(db_session, now=now, status_filter="active")
    assert [b.id for b in active] == [second.id]


def test_offset_start_times_are_stored_in_utc(db_session):
    space = create_space(db_session)
    plus_two = timezone(timedelta(hours=2))
    local_start = datetime(2025, 3, 1, 16, 0, tzinfo=plus_two)

    booking = booking_service.create_booking(db_session, space, local_start, 1, now=T)

    value = booking_service.fetch_booking(db_session, booking.id)
    assert value.start_time == T + timedelta(hours=2)
    assert value.start_time.utcoffset() == timedelta(0)

    local_now = datetime(2025, 3, 1, 16, 30, tzinfo=plus_two)
    assert booking_service.sweep_booking_statuses(db_session, local_now) == 1
    db_session.refresh(booking)
    assert booking.status == BookingStatus.active

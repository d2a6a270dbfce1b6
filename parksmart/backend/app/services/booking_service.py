import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..config import get_settings
from ..core.booking import Booking, BookingStatus, TERMINAL_STATUSES
from ..core.constants import MIN_BOOKING_HOURS, SYSTEM_ACTOR, USER_ACTOR
from ..core.errors import (
    BookingError,
    BookingNotFound,
    CancellationError,
    ExtensionError,
    InvalidDuration,
    InvalidInterval,
    PricingUnavailable,
)
from ..core.timeutils import ensure_aware
from ..db import models
from . import booking_state, cancellation_policy, extension_policy
from .pricing import compute_cost

logger = logging.getLogger(__name__)

HISTORY_FILTER = "history"
ALL_FILTER = "all"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _extension_kwargs() -> dict:
    settings = get_settings()
    return {
        "near_start_window": settings.near_start_window,
        "min_hours": settings.min_extension_hours,
        "max_hours": settings.max_extension_hours,
    }


def _cancellation_lead_time() -> timedelta:
    return get_settings().cancellation_lead_time


def policy_windows() -> dict:
    """Configured eligibility windows, in the keywords ``live_view.project`` takes."""

    settings = get_settings()
    return {
        "near_start_window": settings.near_start_window,
        "lead_time": settings.cancellation_lead_time,
    }


def to_value(record: models.Booking) -> Booking:
    return Booking(
        id=record.id,
        space_id=record.space_id,
        facility_name=record.facility_name,
        facility_address=record.facility_address,
        start_time=record.start_time,
        end_time=record.end_time,
        total_cost=record.total_cost if record.total_cost is not None else Decimal("0"),
        status=record.status,
        price_per_hour=record.price_per_hour,
        vehicle_plate=record.vehicle_plate,
        version=record.version or 0,
    )


def apply_value(record: models.Booking, value: Booking) -> models.Booking:
    record.end_time = value.end_time
    record.total_cost = value.total_cost
    record.status = value.status
    record.version = value.version
    return record


def _audit(
    db: Session,
    action: str,
    booking_id: str,
    *,
    actor: str,
    payload: dict,
) -> None:
    actor_type = models.ActorType.system if actor == SYSTEM_ACTOR else models.ActorType.user
    db.add(
        models.AuditLog(
            actor_type=actor_type,
            actor=actor,
            booking_id=booking_id,
            action=action,
            payload=payload,
        )
    )


# Entry points for callers that hold booking values and want errors as values.


def on_evaluate(booking: Booking, now: datetime) -> Booking:
    return booking_state.evaluate(booking, now)


def on_extend(
    booking: Booking,
    now: datetime,
    hours: float,
    rate: object,
    *,
    expected_version: int | None = None,
) -> Booking | ExtensionError:
    try:
        return extension_policy.extend(
            booking,
            now,
            hours,
            rate,
            expected_version=expected_version,
            **_extension_kwargs(),
        )
    except ExtensionError as exc:
        logger.warning(
            "Extension rejected",
            extra={"booking_id": booking.id, "kind": exc.kind, "hours": hours},
        )
        return exc


def on_cancel(
    booking: Booking,
    now: datetime,
    *,
    expected_version: int | None = None,
) -> Booking | CancellationError:
    try:
        return cancellation_policy.cancel(
            booking,
            now,
            expected_version=expected_version,
            lead_time=_cancellation_lead_time(),
        )
    except CancellationError as exc:
        logger.warning(
            "Cancellation rejected",
            extra={"booking_id": booking.id, "kind": exc.kind},
        )
        return exc


# Lookups


def get_booking_record(db: Session, booking_id: str) -> models.Booking:
    record = db.get(models.Booking, booking_id)
    if record is None:
        raise BookingNotFound(f"Booking {booking_id} not found")
    return record


def fetch_booking(db: Session, booking_id: str) -> Booking:
    return to_value(get_booking_record(db, booking_id))


def fetch_price_per_hour(db: Session, space_id: str) -> Decimal:
    space = db.get(models.ParkingSpace, space_id)
    if space is None or space.price_per_hour is None:
        raise PricingUnavailable(f"No price available for space {space_id}")
    return Decimal(str(space.price_per_hour))


def resolve_rate(db: Session, record: models.Booking) -> Decimal | None:
    if record.price_per_hour is not None:
        return Decimal(str(record.price_per_hour))
    try:
        return fetch_price_per_hour(db, record.space_id)
    except PricingUnavailable:
        return None


# Persistence-backed operations


def create_booking(
    db: Session,
    space: models.ParkingSpace,
    start_time: datetime,
    duration_hours: int,
    *,
    now: datetime | None = None,
    vehicle_plate: str | None = None,
) -> models.Booking:
    now = ensure_aware(now or _utc_now())
    start_time = ensure_aware(start_time)
    max_hours = get_settings().max_booking_hours
    if isinstance(duration_hours, bool) or not MIN_BOOKING_HOURS <= duration_hours <= max_hours:
        raise InvalidDuration(
            f"Booking duration must be between {MIN_BOOKING_HOURS} and {max_hours} hours"
        )
    if start_time < now:
        raise InvalidInterval("Start time cannot be in the past")
    rate = fetch_price_per_hour(db, space.id)
    booking = models.Booking(
        space_id=space.id,
        facility_name=space.facility_name,
        facility_address=space.facility_address,
        start_time=start_time,
        end_time=start_time + timedelta(hours=duration_hours),
        price_per_hour=rate,
        total_cost=compute_cost(duration_hours, rate),
        status=BookingStatus.upcoming,
        vehicle_plate=vehicle_plate,
        version=0,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info(
        "Booking created",
        extra={"booking_id": booking.id, "space_id": space.id, "total_cost": str(booking.total_cost)},
    )
    return booking


def _advance(db: Session, record: models.Booking, now: datetime, *, actor: str) -> Booking:
    value = to_value(record)
    evaluated = booking_state.evaluate(value, now)
    if evaluated.status != value.status:
        apply_value(record, evaluated)
        _audit(
            db,
            "booking_status_changed",
            record.id,
            actor=actor,
            payload={"from": value.status.value, "to": evaluated.status.value},
        )
        logger.info(
            "Booking status advanced",
            extra={"booking_id": record.id, "status": evaluated.status.value},
        )
    return evaluated


def refresh_status(db: Session, record: models.Booking, now: datetime | None = None) -> models.Booking:
    now = ensure_aware(now or _utc_now())
    before = record.status
    _advance(db, record, now, actor=SYSTEM_ACTOR)
    if record.status != before:
        db.commit()
        db.refresh(record)
    return record


def extend_booking(
    db: Session,
    record: models.Booking,
    hours: float,
    *,
    now: datetime | None = None,
    expected_version: int | None = None,
    actor: str = USER_ACTOR,
) -> models.Booking:
    now = ensure_aware(now or _utc_now())
    current = _advance(db, record, now, actor=SYSTEM_ACTOR)
    try:
        extended = extension_policy.extend(
            current,
            now,
            hours,
            resolve_rate(db, record),
            expected_version=expected_version,
            **_extension_kwargs(),
        )
    except BookingError:
        db.commit()
        raise
    additional_cost = extended.total_cost - current.total_cost
    apply_value(record, booking_state.evaluate(extended, now))
    _audit(
        db,
        "booking_extended",
        record.id,
        actor=actor,
        payload={
            "hours": hours,
            "additional_cost": str(additional_cost),
            "new_end_time": extended.end_time.isoformat(),
        },
    )
    db.commit()
    db.refresh(record)
    logger.info(
        "Booking extended",
        extra={"booking_id": record.id, "hours": hours, "additional_cost": str(additional_cost)},
    )
    return record


def cancel_booking(
    db: Session,
    record: models.Booking,
    *,
    actor: str = USER_ACTOR,
    now: datetime | None = None,
    expected_version: int | None = None,
    reason: str | None = None,
) -> models.Booking:
    now = ensure_aware(now or _utc_now())
    current = _advance(db, record, now, actor=SYSTEM_ACTOR)
    try:
        cancelled = cancellation_policy.cancel(
            current,
            now,
            expected_version=expected_version,
            lead_time=_cancellation_lead_time(),
        )
    except BookingError:
        db.commit()
        raise
    apply_value(record, cancelled)
    record.canceled_at = now
    record.canceled_by = actor
    record.cancellation_reason = reason
    _audit(db, "booking_cancelled", record.id, actor=actor, payload={"reason": reason})
    db.commit()
    db.refresh(record)
    logger.info("Booking cancelled", extra={"booking_id": record.id, "actor": actor})
    return record


def sweep_booking_statuses(db: Session, now: datetime | None = None) -> int:
    """Advance every non-terminal booking whose window has started; return how many changed."""

    now = ensure_aware(now or _utc_now())
    candidates = (
        db.execute(
            select(models.Booking)
            .where(models.Booking.status.in_([BookingStatus.upcoming, BookingStatus.active]))
            .where(models.Booking.start_time <= now)
        )
        .scalars()
        .all()
    )
    changed = 0
    for record in candidates:
        before = record.status
        _advance(db, record, now, actor=SYSTEM_ACTOR)
        if record.status != before:
            changed += 1
    db.commit()
    return changed


# History


def filter_bookings(bookings: Iterable[Booking], status_filter: str = ALL_FILTER) -> list[Booking]:
    if status_filter == ALL_FILTER:
        selected = list(bookings)
    elif status_filter == HISTORY_FILTER:
        selected = [b for b in bookings if b.status in TERMINAL_STATUSES]
    else:
        status = BookingStatus(status_filter)
        selected = [b for b in bookings if b.status == status]
    return sorted(selected, key=lambda b: b.start_time, reverse=True)


def list_bookings(
    db: Session,
    *,
    now: datetime | None = None,
    status_filter: str = ALL_FILTER,
) -> list[Booking]:
    now = ensure_aware(now or _utc_now())
    records = db.execute(select(models.Booking)).scalars().all()
    return filter_bookings((booking_state.evaluate(to_value(r), now) for r in records), status_filter)


__all__ = [
    "ALL_FILTER",
    "HISTORY_FILTER",
    "to_value",
    "apply_value",
    "on_evaluate",
    "on_extend",
    "on_cancel",
    "get_booking_record",
    "fetch_booking",
    "fetch_price_per_hour",
    "resolve_rate",
    "policy_windows",
    "create_booking",
    "refresh_status",
    "extend_booking",
    "cancel_booking",
    "sweep_booking_statuses",
    "filter_bookings",
    "list_bookings",
]

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from ...api import deps
from ...core.errors import BookingError
from ...db.session import get_db
from ...db import models, schemas
from ...services import booking_service, extension_policy, live_view

router = APIRouter(prefix="/bookings", tags=["bookings"])

_STATUS_FILTER_PATTERN = "^(all|history|upcoming|active|completed|cancelled)$"


def _load(db: Session, booking_id: str) -> models.Booking:
    try:
        return booking_service.get_booking_record(db, booking_id)
    except BookingError as exc:
        raise deps.http_error(exc) from exc


@router.get("", response_model=list[schemas.Booking])
def list_bookings(
    status_filter: str = Query(default="all", pattern=_STATUS_FILTER_PATTERN),
    db: Session = Depends(get_db),
    now: datetime = Depends(deps.get_now),
):
    bookings = booking_service.list_bookings(db, now=now, status_filter=status_filter)
    return [schemas.Booking.model_validate(booking) for booking in bookings]


@router.post("", response_model=schemas.Booking, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: schemas.BookingCreate,
    db: Session = Depends(get_db),
    now: datetime = Depends(deps.get_now),
):
    space = db.get(models.ParkingSpace, payload.space_id)
    if not space:
        raise HTTPException(status_code=404, detail="Space not found")
    try:
        return booking_service.create_booking(
            db,
            space,
            payload.start_time,
            payload.duration_hours,
            now=now,
            vehicle_plate=payload.vehicle_plate,
        )
    except BookingError as exc:
        raise deps.http_error(exc) from exc


@router.get("/{booking_id}", response_model=schemas.Booking)
def get_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    now: datetime = Depends(deps.get_now),
):
    record = _load(db, booking_id)
    return booking_service.refresh_status(db, record, now)


@router.get("/{booking_id}/live", response_model=schemas.LiveView)
def get_live_view(
    booking_id: str,
    db: Session = Depends(get_db),
    now: datetime = Depends(deps.get_now),
):
    record = booking_service.refresh_status(db, _load(db, booking_id), now)
    view = live_view.project(
        booking_service.to_value(record),
        now,
        price_per_hour=booking_service.resolve_rate(db, record),
        **booking_service.policy_windows(),
    )
    return schemas.LiveView.model_validate(view)


@router.get("/{booking_id}/extension-quote", response_model=schemas.ExtensionQuote)
def get_extension_quote(
    booking_id: str,
    hours: float,
    db: Session = Depends(get_db),
):
    record = _load(db, booking_id)
    try:
        quote = extension_policy.quote_extension(
            booking_service.to_value(record),
            hours,
            booking_service.resolve_rate(db, record),
        )
    except BookingError as exc:
        raise deps.http_error(exc) from exc
    return schemas.ExtensionQuote.model_validate(quote)


@router.post("/{booking_id}/extend", response_model=schemas.Booking)
def extend_booking(
    booking_id: str,
    payload: schemas.BookingExtend,
    db: Session = Depends(get_db),
    now: datetime = Depends(deps.get_now),
):
    record = _load(db, booking_id)
    try:
        return booking_service.extend_booking(
            db,
            record,
            payload.hours,
            now=now,
            expected_version=payload.version,
        )
    except BookingError as exc:
        raise deps.http_error(exc) from exc


@router.post("/{booking_id}/cancel", response_model=schemas.Booking)
def cancel_booking(
    booking_id: str,
    payload: schemas.BookingCancel,
    db: Session = Depends(get_db),
    now: datetime = Depends(deps.get_now),
):
    record = _load(db, booking_id)
    try:
        return booking_service.cancel_booking(
            db,
            record,
            now=now,
            expected_version=payload.version,
            reason=payload.reason,
        )
    except BookingError as exc:
        raise deps.http_error(exc) from exc

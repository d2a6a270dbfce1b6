"""Authoritative status transitions of a booking.

Time-driven transitions::

    upcoming --(start <= now < end)--> active --(now >= end)--> completed
    upcoming --(now >= end)--> completed    (a stale booking skips active)

User-driven transitions (via the cancellation policy)::

    upcoming | active --> cancelled

``completed`` and ``cancelled`` are terminal.
"""

from __future__ import annotations

import logging
from datetime import datetime

from ..core.booking import TERMINAL_STATUSES, Booking, BookingStatus
from ..core.timeutils import ensure_aware

logger = logging.getLogger(__name__)

_ORDINALS = {
    BookingStatus.upcoming: 0,
    BookingStatus.active: 1,
    BookingStatus.completed: 2,
    BookingStatus.cancelled: 2,
}

_ALLOWED_TRANSITIONS = {
    BookingStatus.upcoming: frozenset(
        {BookingStatus.active, BookingStatus.completed, BookingStatus.cancelled}
    ),
    BookingStatus.active: frozenset({BookingStatus.completed, BookingStatus.cancelled}),
    BookingStatus.completed: frozenset(),
    BookingStatus.cancelled: frozenset(),
}


def status_ordinal(status: BookingStatus) -> int:
    return _ORDINALS[BookingStatus(status)]


def is_terminal(status: BookingStatus) -> bool:
    return BookingStatus(status) in TERMINAL_STATUSES


def can_transition(source: BookingStatus, target: BookingStatus) -> bool:
    return BookingStatus(target) in _ALLOWED_TRANSITIONS[BookingStatus(source)]


def status_at(booking: Booking, now: datetime) -> BookingStatus:
    """Status the booking should have at ``now``, ignoring user actions."""

    if booking.is_terminal:
        return booking.status
    now = ensure_aware(now)
    status = booking.status
    if status == BookingStatus.upcoming and now >= booking.start_time:
        status = BookingStatus.active
    if status == BookingStatus.active and now >= booking.end_time:
        status = BookingStatus.completed
    return status


def evaluate(booking: Booking, now: datetime) -> Booking:
    """Return ``booking`` with its status advanced to match ``now``.

    The input is never mutated. Evaluating again with the same ``now`` is a
    no-op, and terminal bookings are returned unchanged.
    """

    status = status_at(booking, now)
    if status == booking.status:
        return booking
    logger.debug(
        "Booking status advanced",
        extra={"booking_id": booking.id, "from": booking.status.value, "to": status.value},
    )
    return booking.evolve(status=status)


__all__ = [
    "status_ordinal",
    "is_terminal",
    "can_transition",
    "status_at",
    "evaluate",
]

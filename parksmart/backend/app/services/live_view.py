"""Countdown and progress snapshots derived from a booking and the clock.

Projections are recomputed on every tick and never persisted. They tolerate
a status that lags behind the clock: an ``active`` booking past its end shows
zero time left and full progress until the state machine catches up.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import AsyncIterator, Awaitable, Callable

from ..config import get_settings
from ..core.booking import Booking, BookingStatus
from ..core.constants import CANCELLATION_LEAD_TIME, NEAR_START_EXTENSION_WINDOW
from ..core.timeutils import ZERO, Remaining, elapsed_fraction, ensure_aware, remaining, utc_now
from . import booking_state
from .cancellation_policy import can_cancel
from .extension_policy import can_extend

logger = logging.getLogger(__name__)

_TITLES = {
    BookingStatus.upcoming: "Manage Your Booking",
    BookingStatus.active: "Active Parking Session",
    BookingStatus.completed: "Completed Booking",
    BookingStatus.cancelled: "Cancelled Booking",
}

_TERMINAL_MESSAGES = {
    BookingStatus.completed: "This parking session has ended.",
    BookingStatus.cancelled: "This booking has been cancelled.",
}


@dataclass(frozen=True, slots=True)
class LiveView:
    booking_id: str
    status: BookingStatus
    title: str
    terminal: bool = False
    message: str | None = None
    time_remaining: Remaining | None = None
    time_until_start: Remaining | None = None
    progress_percent: float | None = None
    can_extend: bool = False
    can_cancel: bool = False


def _clamp_percent(value: float) -> float:
    return min(100.0, max(0.0, value))


def project(
    booking: Booking,
    now: datetime,
    *,
    price_per_hour: object = None,
    near_start_window: timedelta = NEAR_START_EXTENSION_WINDOW,
    lead_time: timedelta = CANCELLATION_LEAD_TIME,
) -> LiveView:
    now = ensure_aware(now)
    status = booking.status
    title = _TITLES[status]
    if booking.is_terminal:
        return LiveView(
            booking_id=booking.id,
            status=status,
            title=title,
            terminal=True,
            message=_TERMINAL_MESSAGES[status],
        )

    flags = {
        "can_extend": can_extend(
            booking, now, price_per_hour, near_start_window=near_start_window
        ),
        "can_cancel": can_cancel(booking, now, lead_time=lead_time),
    }
    if status == BookingStatus.active:
        return LiveView(
            booking_id=booking.id,
            status=status,
            title=title,
            time_remaining=remaining(now, booking.end_time),
            progress_percent=_clamp_percent(
                elapsed_fraction(booking.start_time, booking.end_time, now) * 100
            ),
            **flags,
        )
    return LiveView(
        booking_id=booking.id,
        status=status,
        title=title,
        time_until_start=remaining(now, booking.start_time) if now < booking.start_time else ZERO,
        progress_percent=0.0,
        **flags,
    )


async def watch(
    booking: Booking,
    *,
    clock: Callable[[], datetime] = utc_now,
    interval: float | None = None,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    evaluate_every: int = 60,
    price_per_hour: object = None,
    near_start_window: timedelta | None = None,
    lead_time: timedelta | None = None,
) -> AsyncIterator[LiveView]:
    """Yield a projection per tick until the booking reaches a terminal state.

    The status is re-evaluated every ``evaluate_every`` ticks (and on the
    first one). Readings from ``clock`` that go backwards are clamped to the
    latest reading so countdowns never move back. The tick interval and the
    eligibility windows default to the configured settings.
    """

    if evaluate_every < 1:
        raise ValueError("evaluate_every must be at least 1")
    settings = get_settings()
    if interval is None:
        interval = settings.tick_interval_seconds
    windows = {
        "near_start_window": settings.near_start_window if near_start_window is None else near_start_window,
        "lead_time": settings.cancellation_lead_time if lead_time is None else lead_time,
    }
    current = booking
    latest: datetime | None = None
    tick = 0
    while True:
        now = ensure_aware(clock())
        if latest is not None and now < latest:
            now = latest
        latest = now
        if tick % evaluate_every == 0:
            current = booking_state.evaluate(current, now)
        view = project(current, now, price_per_hour=price_per_hour, **windows)
        yield view
        if view.terminal:
            logger.info("Stopped watching booking", extra={"booking_id": current.id})
            return
        tick += 1
        await sleep(interval)


__all__ = ["LiveView", "project", "watch"]

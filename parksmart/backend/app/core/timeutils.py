"""Interval arithmetic on timezone-aware datetimes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from .errors import InvalidInterval


@dataclass(frozen=True, slots=True)
class Remaining:
    hours: int
    minutes: int
    seconds: int

    @property
    def total_seconds(self) -> int:
        return self.hours * 3600 + self.minutes * 60 + self.seconds

    def is_zero(self) -> bool:
        return self.total_seconds == 0

    def format(self) -> str:
        """Render as ``HH:MM:SS``; hours are not wrapped into days."""

        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"


ZERO = Remaining(0, 0, 0)


def ensure_aware(value: datetime) -> datetime:
    """Return ``value`` in UTC; naive datetimes (SQLite drops tzinfo) are taken as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_before(a: datetime, b: datetime) -> bool:
    return ensure_aware(a) < ensure_aware(b)


def is_after(a: datetime, b: datetime) -> bool:
    return ensure_aware(a) > ensure_aware(b)


def duration_hours(start: datetime, end: datetime) -> float:
    start, end = ensure_aware(start), ensure_aware(end)
    if end <= start:
        raise InvalidInterval(f"End time {end.isoformat()} is not after start time {start.isoformat()}")
    return (end - start).total_seconds() / 3600


def elapsed_fraction(start: datetime, end: datetime, now: datetime) -> float:
    start, end, now = ensure_aware(start), ensure_aware(end), ensure_aware(now)
    if now <= start:
        return 0.0
    if now >= end:
        return 1.0
    return (now - start) / (end - start)


def remaining(now: datetime, target: datetime) -> Remaining:
    now, target = ensure_aware(now), ensure_aware(target)
    if now >= target:
        return ZERO
    total = int((target - now).total_seconds())
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return Remaining(hours=hours, minutes=minutes, seconds=seconds)


__all__ = [
    "Remaining",
    "ZERO",
    "ensure_aware",
    "utc_now",
    "is_before",
    "is_after",
    "duration_hours",
    "elapsed_fraction",
    "remaining",
]

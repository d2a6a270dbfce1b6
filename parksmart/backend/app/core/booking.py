from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum

from .errors import InvalidInterval
from .timeutils import ensure_aware


class BookingStatus(str, PyEnum):
    upcoming = "upcoming"
    active = "active"
    completed = "completed"
    cancelled = "cancelled"


TERMINAL_STATUSES = frozenset({BookingStatus.completed, BookingStatus.cancelled})


@dataclass(frozen=True, slots=True)
class Booking:
    """Immutable snapshot of a reservation.

    Every lifecycle operation returns a new value; persistence rows are
    converted to and from this type by ``booking_service``.
    """

    id: str
    space_id: str
    facility_name: str
    facility_address: str
    start_time: datetime
    end_time: datetime
    total_cost: Decimal
    status: BookingStatus = BookingStatus.upcoming
    price_per_hour: Decimal | None = None
    vehicle_plate: str | None = None
    version: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_time", ensure_aware(self.start_time))
        object.__setattr__(self, "end_time", ensure_aware(self.end_time))
        object.__setattr__(self, "status", BookingStatus(self.status))
        object.__setattr__(self, "total_cost", Decimal(str(self.total_cost)))
        if self.price_per_hour is not None:
            object.__setattr__(self, "price_per_hour", Decimal(str(self.price_per_hour)))
        if self.end_time <= self.start_time:
            raise InvalidInterval("Booking end time must be after its start time")
        if self.total_cost < 0:
            raise ValueError("Booking total cost cannot be negative")

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def evolve(self, **changes) -> "Booking":
        return replace(self, **changes)


__all__ = ["Booking", "BookingStatus", "TERMINAL_STATUSES"]

"""Error taxonomy of the booking lifecycle.

Every error carries a ``kind`` so that callers which receive errors as values
(see ``booking_service.on_extend``) can branch without ``isinstance`` chains.
"""

from __future__ import annotations

from enum import Enum as PyEnum


class EligibilityReason(str, PyEnum):
    too_late = "too_late"
    wrong_status = "wrong_status"
    not_yet_eligible = "not_yet_eligible"


class BookingError(Exception):
    kind = "booking_error"


class BookingNotFound(BookingError):
    kind = "not_found"


class InvalidInterval(BookingError, ValueError):
    kind = "invalid_interval"


class InvalidRate(BookingError, ValueError):
    kind = "invalid_rate"


class ExtensionError(BookingError):
    """Base class for errors raised by the extension policy."""


class CancellationError(BookingError):
    """Base class for errors raised by the cancellation policy."""


class PricingUnavailable(ExtensionError):
    kind = "pricing_unavailable"


class InvalidDuration(ExtensionError):
    kind = "invalid_duration"


class NotEligible(ExtensionError, CancellationError):
    kind = "not_eligible"

    def __init__(self, reason: EligibilityReason, message: str | None = None) -> None:
        self.reason = EligibilityReason(reason)
        super().__init__(message or f"Not eligible: {self.reason.value}")


class Conflict(ExtensionError, CancellationError):
    kind = "conflict"

    def __init__(self, expected_version: int, actual_version: int) -> None:
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Booking was modified concurrently (expected version {expected_version}, "
            f"found {actual_version})"
        )


__all__ = [
    "EligibilityReason",
    "BookingError",
    "BookingNotFound",
    "InvalidInterval",
    "InvalidRate",
    "ExtensionError",
    "CancellationError",
    "PricingUnavailable",
    "InvalidDuration",
    "NotEligible",
    "Conflict",
]

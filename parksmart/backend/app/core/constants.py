"""Common application-wide constants."""

from datetime import timedelta

# An upcoming booking may be extended once its start is closer than this
NEAR_START_EXTENSION_WINDOW = timedelta(hours=2)

# Upcoming bookings can be cancelled only while the start is further away than this
CANCELLATION_LEAD_TIME = timedelta(minutes=60)

# Bounds for a single extension request, inclusive
MIN_EXTENSION_HOURS = 1
MAX_EXTENSION_HOURS = 12

# Bounds for the duration of a new booking, inclusive
MIN_BOOKING_HOURS = 1
MAX_BOOKING_HOURS = 24

# Default period of the live countdown tick
DEFAULT_TICK_INTERVAL_SECONDS = 1.0

# Actor names recorded in the audit trail
SYSTEM_ACTOR = "system"
USER_ACTOR = "user"


__all__ = [
    "NEAR_START_EXTENSION_WINDOW",
    "CANCELLATION_LEAD_TIME",
    "MIN_EXTENSION_HOURS",
    "MAX_EXTENSION_HOURS",
    "MIN_BOOKING_HOURS",
    "MAX_BOOKING_HOURS",
    "DEFAULT_TICK_INTERVAL_SECONDS",
    "SYSTEM_ACTOR",
    "USER_ACTOR",
]

from . import (
    pricing,
    booking_state,
    extension_policy,
    cancellation_policy,
    live_view,
    booking_service,
)
__all__ = [
    "pricing",
    "booking_state",
    "extension_policy",
    "cancellation_policy",
    "live_view",
    "booking_service",
]

from . import (
    bookings,
    spaces,
    misc,
)

__all__ = [
    "bookings",
    "spaces",
    "misc",
]

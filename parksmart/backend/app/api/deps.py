from datetime import datetime, timezone

from fastapi import HTTPException, status

from ..core.errors import BookingError


def get_now() -> datetime:
    return datetime.now(timezone.utc)


_STATUS_BY_KIND = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "pricing_unavailable": status.HTTP_409_CONFLICT,
}


def http_error(exc: BookingError) -> HTTPException:
    return HTTPException(
        status_code=_STATUS_BY_KIND.get(exc.kind, status.HTTP_400_BAD_REQUEST),
        detail=str(exc),
    )

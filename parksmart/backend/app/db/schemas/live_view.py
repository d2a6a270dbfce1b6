from pydantic import BaseModel

from ...core.booking import BookingStatus


class Remaining(BaseModel):
    hours: int
    minutes: int
    seconds: int

    class Config:
        from_attributes = True


class LiveView(BaseModel):
    booking_id: str
    status: BookingStatus
    title: str
    terminal: bool
    message: str | None = None
    time_remaining: Remaining | None = None
    time_until_start: Remaining | None = None
    progress_percent: float | None = None
    can_extend: bool
    can_cancel: bool

    class Config:
        from_attributes = True

from datetime import datetime
from pydantic import BaseModel, Field

from ...core.booking import BookingStatus


class BookingCreate(BaseModel):
    space_id: str
    start_time: datetime
    duration_hours: int = Field(ge=1)
    vehicle_plate: str | None = None


class BookingExtend(BaseModel):
    hours: float
    version: int | None = None


class BookingCancel(BaseModel):
    version: int | None = None
    reason: str | None = None


class ExtensionQuote(BaseModel):
    new_end_time: datetime
    additional_cost: float

    class Config:
        from_attributes = True


class Booking(BaseModel):
    id: str
    space_id: str
    facility_name: str
    facility_address: str
    start_time: datetime
    end_time: datetime
    price_per_hour: float | None = None
    total_cost: float
    status: BookingStatus
    vehicle_plate: str | None = None
    version: int

    class Config:
        from_attributes = True

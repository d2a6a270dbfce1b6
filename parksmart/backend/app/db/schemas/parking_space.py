from pydantic import BaseModel, Field

from ..models.parking_space import SlotType


class ParkingSpaceBase(BaseModel):
    slot_label: str
    floor_level: str | None = None
    slot_type: SlotType = SlotType.standard
    facility_name: str
    facility_address: str
    price_per_hour: float | None = Field(default=None, ge=0)
    is_occupied: bool = False


class ParkingSpaceCreate(ParkingSpaceBase):
    id: str


class ParkingSpace(ParkingSpaceBase):
    id: str

    class Config:
        from_attributes = True

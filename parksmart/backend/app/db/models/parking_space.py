from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import Boolean, DateTime, Enum, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..session import Base


class SlotType(str, PyEnum):
    standard = "standard"
    accessible = "accessible"
    ev_charging = "ev-charging"


class ParkingSpace(Base):
    __tablename__ = "parking_spaces"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    slot_label: Mapped[str] = mapped_column(String(32))
    floor_level: Mapped[str | None] = mapped_column(String(32))
    slot_type: Mapped[SlotType] = mapped_column(Enum(SlotType), default=SlotType.standard)
    facility_name: Mapped[str] = mapped_column(String(255))
    facility_address: Mapped[str] = mapped_column(String(512))
    price_per_hour: Mapped[float | None] = mapped_column(Numeric(10, 2))
    is_occupied: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    bookings = relationship("Booking", back_populates="space")

import uuid
from datetime import datetime
from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..session import Base
from ...core.booking import BookingStatus


def _new_booking_id() -> str:
    return f"bk_{uuid.uuid4().hex[:12]}"


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_booking_window_positive"),
        CheckConstraint("total_cost >= 0", name="ck_booking_cost_non_negative"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_booking_id)
    space_id: Mapped[str] = mapped_column(ForeignKey("parking_spaces.id", ondelete="CASCADE"))
    facility_name: Mapped[str] = mapped_column(String(255))
    facility_address: Mapped[str] = mapped_column(String(512))
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    price_per_hour: Mapped[float | None] = mapped_column(Numeric(10, 2))
    total_cost: Mapped[float] = mapped_column(Numeric(10, 2), default=0)
    status: Mapped[BookingStatus] = mapped_column(Enum(BookingStatus), default=BookingStatus.upcoming, index=True)
    vehicle_plate: Mapped[str | None] = mapped_column(String(32))
    version: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    canceled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    canceled_by: Mapped[str | None] = mapped_column(String(64))
    cancellation_reason: Mapped[str | None] = mapped_column(String(255))

    space = relationship("ParkingSpace", back_populates="bookings")

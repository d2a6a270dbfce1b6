from .parking_space import ParkingSpace, SlotType
from .booking import Booking, BookingStatus
from .audit_log import AuditLog, ActorType

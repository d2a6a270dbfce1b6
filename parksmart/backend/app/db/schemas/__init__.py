from .parking_space import ParkingSpace, ParkingSpaceCreate
from .booking import Booking, BookingCreate, BookingExtend, BookingCancel, ExtensionQuote
from .live_view import LiveView, Remaining

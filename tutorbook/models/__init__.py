from .availability import AvailabilityRule
from .bookings import Booking, BookingStatus
from .tutors import Tutor


__all__ = ["AvailabilityRule", "Booking", "BookingStatus", "Tutor"]

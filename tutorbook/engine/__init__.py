from .conflicts import mark_booked, refresh_booked
from .expander import SlotInstance, expand_availability
from .selection import SelectedSlot, SelectionSet, ToggleOutcome, ToggleResult
from .session import BookingSession
from .submitter import BookingResult, BookingSubmitter


__all__ = [
    "BookingResult",
    "BookingSession",
    "BookingSubmitter",
    "SelectedSlot",
    "SelectionSet",
    "SlotInstance",
    "ToggleOutcome",
    "ToggleResult",
    "expand_availability",
    "mark_booked",
    "refresh_booked",
]

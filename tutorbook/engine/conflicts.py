from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Iterable, Protocol

from tutorbook.engine.expander import SlotInstance
from tutorbook.utils.utc import iso_instant


class BookedInstant(Protocol):
    start_time: datetime
    status: Any


def is_confirmed(booking: BookedInstant) -> bool:
    return getattr(booking.status, "value", booking.status) == "confirmed"


def booked_keys(bookings: Iterable[BookedInstant]) -> set[str]:
    return {iso_instant(booking.start_time) for booking in bookings if is_confirmed(booking)}


def mark_booked(slots: Iterable[SlotInstance], bookings: Iterable[BookedInstant]) -> list[SlotInstance]:
    """Classify every slot: booked iff a confirmed booking starts at exactly the same instant."""

    keys = booked_keys(bookings)
    return [replace(slot, is_booked=slot.key in keys) for slot in slots]


def refresh_booked(slots: Iterable[SlotInstance], bookings: Iterable[BookedInstant]) -> list[SlotInstance]:
    """
    Re-evaluate slots against a partial set of bookings.

    A booked slot stays booked even if the given bookings do not contain it.
    """

    keys = booked_keys(bookings)
    return [
        slot if slot.is_booked else replace(slot, is_booked=slot.key in keys)
        for slot in slots
    ]

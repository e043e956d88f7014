from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Protocol

from tutorbook.engine.selection import SelectedSlot
from tutorbook.exceptions.bookings import BookingConflictException, BookingFailedException, BookingValidationException
from tutorbook.logger import get_logger


logger = get_logger(__name__)


class BookingStore(Protocol):
    async def create_booking(
        self, tutor_id: str, student_name: str, student_email: str, start_time: datetime, end_time: datetime
    ) -> str:
        """Store a confirmed booking and return its id. Raises BookingConflictException if the start is taken."""


@dataclass(frozen=True)
class BookingResult:
    booking_ids: list[str]
    recipient: str

    @property
    def count(self) -> int:
        return len(self.booking_ids)

    @property
    def message(self) -> str:
        return f"Booking confirmed! {self.count} session(s) booked. Confirmation sent to {self.recipient}"


class BookingSubmitter:
    """
    Commit a selection as one booking per slot.

    Slots are inserted one after another in start order and every insert is committed on its own.
    The first failure aborts the remaining inserts, bookings stored before it are kept and
    reported on the raised error.
    """

    def __init__(self, store: BookingStore) -> None:
        self.store = store

    @staticmethod
    def validate(
        student_name: str | None, student_email: str | None, selection: Iterable[SelectedSlot]
    ) -> tuple[str, str, list[SelectedSlot]]:
        """Return the trimmed student fields and the slots in start order, without touching the store."""

        slots = sorted(selection, key=lambda slot: slot.start)
        if not slots:
            raise BookingValidationException("Please select at least one session")

        student_name = (student_name or "").strip()
        student_email = (student_email or "").strip()
        if not student_name or not student_email:
            raise BookingValidationException("Please fill in all required fields")

        return student_name, student_email, slots

    async def submit(
        self, tutor_id: str, student_name: str, student_email: str, selection: Iterable[SelectedSlot]
    ) -> BookingResult:
        student_name, student_email, slots = self.validate(student_name, student_email, selection)

        committed: list[str] = []
        for slot in slots:
            try:
                booking_id = await self.store.create_booking(
                    tutor_id, student_name, student_email, slot.start, slot.end
                )
            except BookingConflictException as exc:
                logger.warning(
                    "Slot %s of tutor %s was taken, aborting after %d booking(s)", slot.key, tutor_id, len(committed)
                )
                raise BookingConflictException(committed=committed) from exc
            except Exception as exc:
                logger.error(
                    "Could not book slot %s of tutor %s, aborting after %d booking(s): %r",
                    slot.key,
                    tutor_id,
                    len(committed),
                    exc,
                )
                raise BookingFailedException(committed=committed) from exc

            logger.info("Booked slot %s of tutor %s for %s", slot.key, tutor_id, student_email)
            committed.append(booking_id)

        return BookingResult(booking_ids=committed, recipient=student_email)

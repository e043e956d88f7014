from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Any, Iterable, Protocol

from tutorbook.engine.conflicts import BookedInstant, mark_booked, refresh_booked
from tutorbook.engine.expander import HORIZON_DAYS, SlotInstance, WeeklyRule, expand_availability
from tutorbook.engine.selection import SelectionSet, ToggleOutcome, ToggleResult
from tutorbook.engine.submitter import BookingResult, BookingStore, BookingSubmitter
from tutorbook.exceptions.bookings import BookingFailedException, BookingValidationException
from tutorbook.logger import get_logger
from tutorbook.schemas.bookings import BookingCreated
from tutorbook.utils.utc import local_timezone, parse_instant, utcnow


logger = get_logger(__name__)


class SessionStore(BookingStore, Protocol):
    async def get_rules(self, tutor_id: str) -> list[Any]:
        ...

    async def get_confirmed_bookings(
        self, tutor_id: str, start: datetime | None = None, end: datetime | None = None
    ) -> list[Any]:
        ...


@dataclass
class BookingSession:
    """State of one student browsing and booking the slots of one tutor at a time."""

    store: SessionStore
    tz: tzinfo = field(default_factory=local_timezone)
    horizon_days: int = HORIZON_DAYS
    tutor_id: str | None = None
    rules: list[WeeklyRule] = field(default_factory=list)
    slots: list[SlotInstance] = field(default_factory=list)
    selection: SelectionSet = field(default_factory=SelectionSet)
    window: tuple[datetime, datetime] | None = None

    async def select_tutor(self, tutor_id: str, now: datetime | None = None) -> list[SlotInstance]:
        self.tutor_id = tutor_id
        self.selection = self.selection.clear()
        self.slots = []
        self.window = None
        self.rules = list(await self.store.get_rules(tutor_id))
        return await self.render(now)

    async def render(self, now: datetime | None = None) -> list[SlotInstance]:
        """Derive the slots of the selected tutor from scratch."""

        if self.tutor_id is None:
            return []
        candidates = expand_availability(self.tutor_id, self.rules, now or utcnow(), self.horizon_days, self.tz)
        self.slots = mark_booked(candidates, await self.store.get_confirmed_bookings(self.tutor_id))
        return self.slots

    async def refresh(self, now: datetime | None = None) -> bool:
        """Re-render after a submission. A failed read keeps the previous slots."""

        try:
            await self.render(now)
        except BookingFailedException:
            logger.exception("Could not refresh the slots of tutor %s", self.tutor_id)
            return False
        return True

    async def change_window(self, start: datetime, end: datetime) -> list[SlotInstance]:
        """Move the visible range and refresh the booked state using only the bookings inside it."""

        self.window = (start, end)
        if self.tutor_id is not None:
            self.apply_bookings(await self.store.get_confirmed_bookings(self.tutor_id, start, end))
        return self.visible_slots()

    def apply_bookings(self, bookings: Iterable[BookedInstant]) -> None:
        self.slots = refresh_booked(self.slots, bookings)

    async def on_booking_created(self, event: BookingCreated) -> None:
        if event.tutor_id != self.tutor_id:
            return
        logger.debug("Booking %s of tutor %s created elsewhere", event.id, event.tutor_id)
        self.apply_bookings([event])
        if self.window is not None:
            await self.change_window(*self.window)

    def visible_slots(self) -> list[SlotInstance]:
        if self.window is None:
            return self.slots
        start, end = self.window
        return [slot for slot in self.slots if start <= slot.start < end]

    def find_slot(self, key: str | datetime) -> SlotInstance | None:
        start = parse_instant(key) if isinstance(key, str) else key
        return next((slot for slot in self.slots if slot.start == start), None)

    def toggle(self, slot: SlotInstance) -> ToggleResult:
        result = self.selection.toggle(slot)
        if result.outcome != ToggleOutcome.REJECTED:
            self.selection = result.selection
        return result

    def remove(self, index: int) -> SelectionSet:
        self.selection = self.selection.remove(index)
        return self.selection

    def clear(self) -> SelectionSet:
        self.selection = self.selection.clear()
        return self.selection

    async def submit(self, student_name: str, student_email: str, now: datetime | None = None) -> BookingResult:
        if self.tutor_id is None:
            raise BookingValidationException("Please select a tutor first")

        result = await BookingSubmitter(self.store).submit(self.tutor_id, student_name, student_email, self.selection)
        self.selection = self.selection.clear()
        await self.refresh(now)
        return result

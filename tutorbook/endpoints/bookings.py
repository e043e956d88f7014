"""Endpoints related to selecting and booking slots."""

from typing import Any, Iterable

from fastapi import APIRouter, Depends

from tutorbook.dependencies import get_store
from tutorbook.engine.conflicts import mark_booked
from tutorbook.engine.display import selection_summary
from tutorbook.engine.expander import SlotInstance
from tutorbook.engine.selection import SelectedSlot, SelectionSet, ToggleOutcome
from tutorbook.engine.submitter import BookingSubmitter
from tutorbook.exceptions.api_exception import responses
from tutorbook.exceptions.bookings import (
    BookingConflictException,
    BookingFailedException,
    BookingValidationException,
    SlotAlreadyBookedException,
)
from tutorbook.exceptions.tutors import TutorNotFoundException
from tutorbook.schemas.bookings import BookingResult, CreateBookings
from tutorbook.schemas.slots import SlotTime, ToggleResponse, ToggleSlot
from tutorbook.services.confirmation import send_confirmation
from tutorbook.services.store import DatabaseStore
from tutorbook.utils.utc import ensure_utc


router = APIRouter()


def _selection(slots: Iterable[SlotTime]) -> SelectionSet:
    return SelectionSet.of(SelectedSlot(start=ensure_utc(slot.start), end=ensure_utc(slot.end)) for slot in slots)


@router.post(
    "/tutors/{tutor_id}/selection",
    responses=responses(ToggleResponse, SlotAlreadyBookedException, BookingFailedException),
)
async def toggle_slot(tutor_id: str, data: ToggleSlot, store: DatabaseStore = Depends(get_store)) -> Any:
    """
    Add the clicked slot to the selection or remove it if it is already selected.

    Booked slots cannot be selected.
    """

    start, end = ensure_utc(data.slot.start), ensure_utc(data.slot.end)
    bookings = await store.get_confirmed_bookings(tutor_id, start, end)
    [slot] = mark_booked([SlotInstance(tutor_id=tutor_id, start=start, end=end)], bookings)

    result = _selection(data.selection).toggle(slot)
    if result.outcome == ToggleOutcome.REJECTED:
        raise SlotAlreadyBookedException

    return ToggleResponse(
        outcome=result.outcome.value,
        selection=[SlotTime(start=item.start, end=item.end) for item in result.selection],
        summary=selection_summary(result.selection),
    )


@router.post(
    "/tutors/{tutor_id}/bookings",
    responses=responses(
        BookingResult,
        TutorNotFoundException,
        BookingValidationException,
        BookingConflictException,
        BookingFailedException,
    ),
)
async def create_bookings(tutor_id: str, data: CreateBookings, store: DatabaseStore = Depends(get_store)) -> Any:
    """
    Book every selected slot for the student.

    Slots are booked one after another. If one of them has been booked by someone else in the meantime,
    the remaining slots are not booked, but the ones booked before are kept and returned as `committed`.
    """

    selection = _selection(data.slots)
    BookingSubmitter.validate(data.student_name, data.student_email, selection)

    if not (tutor := await store.get_tutor(tutor_id)):
        raise TutorNotFoundException

    result = await BookingSubmitter(store).submit(tutor_id, data.student_name, data.student_email, selection)

    await send_confirmation(tutor, data.student_name, result, selection)

    return BookingResult(
        booking_ids=result.booking_ids, count=result.count, recipient=result.recipient, message=result.message
    )

"""Endpoints related to tutors and their bookable slots."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query

from tutorbook.dependencies import get_store
from tutorbook.engine.conflicts import mark_booked
from tutorbook.engine.display import render_slots
from tutorbook.engine.expander import expand_availability
from tutorbook.exceptions.api_exception import responses
from tutorbook.exceptions.bookings import BookingFailedException
from tutorbook.exceptions.tutors import TutorNotFoundException
from tutorbook.schemas.slots import DisplaySlot
from tutorbook.schemas.tutors import AvailabilityRule, Tutor
from tutorbook.services.store import DatabaseStore
from tutorbook.settings import settings
from tutorbook.utils.utc import ensure_utc, utcnow


router = APIRouter()


@router.get("/tutors", responses=responses(list[Tutor], BookingFailedException))
async def list_tutors(
    name: str | None = Query(None, description="Return only the tutor with exactly this name"),
    store: DatabaseStore = Depends(get_store),
) -> Any:
    """Return all tutors ordered by name."""

    return [tutor.serialize for tutor in await store.list_tutors(name)]


@router.get("/tutors/{tutor_id}", responses=responses(Tutor, TutorNotFoundException, BookingFailedException))
async def get_tutor(tutor_id: str, store: DatabaseStore = Depends(get_store)) -> Any:
    """Return a tutor."""

    if not (tutor := await store.get_tutor(tutor_id)):
        raise TutorNotFoundException
    return tutor.serialize


@router.get(
    "/tutors/{tutor_id}/availability",
    responses=responses(list[AvailabilityRule], TutorNotFoundException, BookingFailedException),
)
async def get_availability(tutor_id: str, store: DatabaseStore = Depends(get_store)) -> Any:
    """Return the weekly availability rules of a tutor."""

    if not await store.get_tutor(tutor_id):
        raise TutorNotFoundException
    return [rule.serialize for rule in await store.get_rules(tutor_id)]


@router.get(
    "/tutors/{tutor_id}/slots", responses=responses(list[DisplaySlot], TutorNotFoundException, BookingFailedException)
)
async def get_slots(
    tutor_id: str,
    start: datetime | None = Query(None, description="Return only slots starting at or after this instant"),
    end: datetime | None = Query(None, description="Return only slots starting before this instant"),
    store: DatabaseStore = Depends(get_store),
) -> Any:
    """
    Return the one-hour slots of a tutor for the upcoming weeks.

    Each slot is marked as available or booked.
    """

    if not await store.get_tutor(tutor_id):
        raise TutorNotFoundException

    candidates = expand_availability(tutor_id, await store.get_rules(tutor_id), utcnow(), settings.horizon_days)
    slots = mark_booked(candidates, await store.get_confirmed_bookings(tutor_id))
    if start is not None:
        slots = [slot for slot in slots if slot.start >= ensure_utc(start)]
    if end is not None:
        slots = [slot for slot in slots if slot.start < ensure_utc(end)]

    return render_slots(slots)

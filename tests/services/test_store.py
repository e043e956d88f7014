from datetime import time, timedelta

import pytest

from tests.fakes import TUTOR, local
from tutorbook import models
from tutorbook.engine.selection import SelectedSlot, SelectionSet
from tutorbook.engine.submitter import BookingSubmitter
from tutorbook.exceptions.bookings import BookingConflictException
from tutorbook.schemas.bookings import BookingCreated
from tutorbook.services.store import DatabaseStore


HOUR = timedelta(hours=1)


@pytest.fixture
async def seeded(db_session):
    async with db_session() as db:
        await db.add(models.Tutor(id=TUTOR, name="Grace", subject="Maths"))
        await db.add(models.Tutor(id="tutor-2", name="Alan", subject=None))
        await models.AvailabilityRule.create(TUTOR, 1, time(14), time(16))
        await models.AvailabilityRule.create(TUTOR, 1, time(9), time(12))
    return db_session


async def test__list_tutors_ordered_by_name(seeded) -> None:
    async with seeded():
        tutors = await DatabaseStore().list_tutors()
        assert [t.name for t in tutors] == ["Alan", "Grace"]
        assert tutors[0].serialize == {"id": "tutor-2", "name": "Alan", "subject": "Tutor"}
        assert [t.id for t in await DatabaseStore().list_tutors("Grace")] == [TUTOR]


async def test__rules_ordered_by_start(seeded) -> None:
    async with seeded():
        rules = await DatabaseStore().get_rules(TUTOR)
        assert [rule.start_time for rule in rules] == [time(9), time(14)]
        assert rules[0].serialize["start_time"] == "09:00"


async def test__create_and_read_bookings(seeded) -> None:
    published: list[BookingCreated] = []

    async def publish(event: BookingCreated) -> None:
        published.append(event)

    store = DatabaseStore(publish)
    async with seeded():
        monday, next_monday = local(2026, 10, 19, 9), local(2026, 10, 26, 9)
        first = await store.create_booking(TUTOR, "Ada", "ada@example.com", monday, monday + HOUR)
        await store.create_booking(TUTOR, "Ada", "ada@example.com", next_monday, next_monday + HOUR)

    async with seeded():
        bookings = await store.get_confirmed_bookings(TUTOR)
        assert bookings[0].id == first
        assert bookings[0].start_time == local(2026, 10, 19, 9)
        assert bookings[0].confirmed

        week = await store.get_confirmed_bookings(TUTOR, local(2026, 10, 19), local(2026, 10, 26))
        assert [b.id for b in week] == [first]

    assert [e.id for e in published][0] == first
    assert len(published) == 2
    assert published[0].tutor_id == TUTOR
    assert published[0].status == "confirmed"


async def test__duplicate_start_is_a_conflict(seeded) -> None:
    store = DatabaseStore()
    start = local(2026, 10, 19, 9)
    async with seeded():
        await store.create_booking(TUTOR, "Ada", "ada@example.com", start, start + HOUR)
        with pytest.raises(BookingConflictException):
            await store.create_booking(TUTOR, "Bob", "bob@example.com", start, start + HOUR)
        other = await store.create_booking("tutor-2", "Bob", "bob@example.com", start, start + HOUR)
        assert other

    async with seeded():
        assert len(await store.get_confirmed_bookings(TUTOR)) == 1


async def test__cancelled_booking_frees_the_slot(seeded) -> None:
    store = DatabaseStore()
    start = local(2026, 10, 19, 9)
    async with seeded() as db:
        booking = await models.Booking.create(TUTOR, "Ada", "ada@example.com", start, start + HOUR)
        booking.status = models.BookingStatus.CANCELLED
        await db.commit()

        await store.create_booking(TUTOR, "Bob", "bob@example.com", start, start + HOUR)

    async with seeded():
        assert [b.student_name for b in await store.get_confirmed_bookings(TUTOR)] == ["Bob"]


async def test__partial_submission_is_kept(seeded) -> None:
    store = DatabaseStore()
    nine, eleven = local(2026, 10, 19, 9), local(2026, 10, 19, 11)
    async with seeded():
        await store.create_booking(TUTOR, "Bob", "bob@example.com", eleven, eleven + HOUR)

    selection = SelectionSet.of([SelectedSlot(nine, nine + HOUR), SelectedSlot(eleven, eleven + HOUR)])
    async with seeded():
        with pytest.raises(BookingConflictException) as exc_info:
            await BookingSubmitter(store).submit(TUTOR, "Ada", "ada@example.com", selection)

    async with seeded():
        bookings = await store.get_confirmed_bookings(TUTOR)
        assert [(b.student_name, b.start_time) for b in bookings] == [("Ada", nine), ("Bob", eleven)]
        assert exc_info.value.committed == [bookings[0].id]

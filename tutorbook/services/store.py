from __future__ import annotations

from datetime import datetime
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from tutorbook import models
from tutorbook.database import db, filter_by, select
from tutorbook.exceptions.bookings import BookingConflictException, BookingFailedException
from tutorbook.logger import get_logger
from tutorbook.schemas.bookings import BookingCreated


logger = get_logger(__name__)

T = TypeVar("T")

Publisher = Callable[[BookingCreated], Awaitable[None]]


class DatabaseStore:
    """Tutors, availability rules and bookings stored in the database of the current session."""

    def __init__(self, publish: Publisher | None = None) -> None:
        self.publish = publish

    async def list_tutors(self, name: str | None = None) -> list[models.Tutor]:
        query = select(models.Tutor).order_by(models.Tutor.name)
        if name is not None:
            query = query.filter_by(name=name)
        return await self._read(db.all(query))

    async def get_tutor(self, tutor_id: str) -> models.Tutor | None:
        return await self._read(db.get(models.Tutor, id=tutor_id))

    async def get_rules(self, tutor_id: str) -> list[models.AvailabilityRule]:
        query = filter_by(models.AvailabilityRule, tutor_id=tutor_id).order_by(
            models.AvailabilityRule.start_time, models.AvailabilityRule.id
        )
        return await self._read(db.all(query))

    async def get_confirmed_bookings(
        self, tutor_id: str, start: datetime | None = None, end: datetime | None = None
    ) -> list[models.Booking]:
        query = filter_by(models.Booking, tutor_id=tutor_id, status=models.BookingStatus.CONFIRMED)
        if start is not None:
            query = query.where(models.Booking.start_time >= start)
        if end is not None:
            query = query.where(models.Booking.start_time < end)
        return await self._read(db.all(query.order_by(models.Booking.start_time)))

    async def create_booking(
        self, tutor_id: str, student_name: str, student_email: str, start_time: datetime, end_time: datetime
    ) -> str:
        try:
            booking = await models.Booking.create(tutor_id, student_name, student_email, start_time, end_time)
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            logger.info("Slot %s of tutor %s is already booked", start_time.isoformat(), tutor_id)
            raise BookingConflictException from exc
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Could not store booking of tutor %s at %s", tutor_id, start_time.isoformat())
            raise BookingFailedException from exc

        if self.publish is not None:
            await self.publish(
                BookingCreated(
                    id=booking.id,
                    tutor_id=booking.tutor_id,
                    start_time=booking.start_time,
                    end_time=booking.end_time,
                    status=booking.status.value,
                )
            )
        return booking.id

    @staticmethod
    async def _read(coro: Awaitable[T]) -> T:
        try:
            return await coro
        except SQLAlchemyError as exc:
            logger.exception("Could not load data from the database")
            raise BookingFailedException("Could not load the calendar. Please try again later.") from exc

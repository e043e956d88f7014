from __future__ import annotations

import enum
from datetime import datetime
from uuid import uuid4

from sqlalchemy import Enum, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from tutorbook.database import Base, db
from tutorbook.database.database import UTCDateTime
from tutorbook.utils.utc import utcnow


class BookingStatus(enum.Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        # no two confirmed bookings of the same tutor may start at the same instant
        Index(
            "bookings_unique_confirmed_start",
            "tutor_id",
            "start_time",
            unique=True,
            sqlite_where=text("status = 'CONFIRMED'"),
            postgresql_where=text("status = 'CONFIRMED'"),
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, unique=True)
    tutor_id: Mapped[str] = mapped_column(String(36), ForeignKey("tutors.id"))
    student_name: Mapped[str] = mapped_column(String(256))
    student_email: Mapped[str] = mapped_column(String(256))
    start_time: Mapped[datetime] = mapped_column(UTCDateTime)
    end_time: Mapped[datetime] = mapped_column(UTCDateTime)
    status: Mapped[BookingStatus] = mapped_column(Enum(BookingStatus), default=BookingStatus.CONFIRMED)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime)

    @property
    def confirmed(self) -> bool:
        return self.status == BookingStatus.CONFIRMED

    @classmethod
    async def create(
        cls, tutor_id: str, student_name: str, student_email: str, start_time: datetime, end_time: datetime
    ) -> Booking:
        booking = cls(
            id=str(uuid4()),
            tutor_id=tutor_id,
            student_name=student_name,
            student_email=student_email,
            start_time=start_time,
            end_time=end_time,
            status=BookingStatus.CONFIRMED,
            created_at=utcnow(),
        )
        await db.add(booking)
        return booking

from __future__ import annotations

from datetime import time
from typing import Any
from uuid import uuid4

from sqlalchemy import ForeignKey, SmallInteger, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from tutorbook.database import Base, db


class AvailabilityRule(Base):
    """A recurring weekly window in which a tutor can be booked. `day_of_week` counts from 0 = Sunday."""

    __tablename__ = "availability"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, unique=True)
    tutor_id: Mapped[str] = mapped_column(String(36), ForeignKey("tutors.id"), index=True)
    day_of_week: Mapped[int] = mapped_column(SmallInteger)
    start_time: Mapped[time] = mapped_column(Time)
    end_time: Mapped[time] = mapped_column(Time)

    @property
    def serialize(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "day_of_week": self.day_of_week,
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
        }

    @classmethod
    async def create(cls, tutor_id: str, day_of_week: int, start_time: time, end_time: time) -> AvailabilityRule:
        rule = cls(
            id=str(uuid4()), tutor_id=tutor_id, day_of_week=day_of_week, start_time=start_time, end_time=end_time
        )
        await db.add(rule)
        return rule

from __future__ import annotations

from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from tutorbook.database import Base


class Tutor(Base):
    __tablename__ = "tutors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, unique=True)
    name: Mapped[str] = mapped_column(String(256))
    subject: Mapped[str | None] = mapped_column(String(256), nullable=True)

    @property
    def serialize(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "subject": self.subject or "Tutor"}

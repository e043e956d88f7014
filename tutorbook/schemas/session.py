from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class SessionCommand(BaseModel):
    action: Literal["select_tutor", "window", "toggle", "remove", "clear", "submit"]
    tutor_id: str | None = Field(None, description="Tutor to switch to (select_tutor)")
    start: datetime | None = Field(None, description="Start of the visible range (window)")
    end: datetime | None = Field(None, description="End of the visible range (window)")
    slot: str | None = Field(None, description="ID of the clicked slot (toggle)")
    index: int | None = Field(None, description="Position of the slot to remove (remove)")
    student_name: str = Field("", description="Name of the student (submit)")
    student_email: str = Field("", description="Email address of the student (submit)")

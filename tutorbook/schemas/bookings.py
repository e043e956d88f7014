from datetime import datetime

from pydantic import BaseModel, Field

from tutorbook.schemas.slots import SlotTime


class CreateBookings(BaseModel):
    student_name: str = Field(max_length=256, description="Name of the student")
    student_email: str = Field(max_length=256, description="Email address the confirmation is sent to")
    slots: list[SlotTime] = Field(description="The selected slots")


class BookingResult(BaseModel):
    booking_ids: list[str] = Field(description="IDs of the created bookings")
    count: int = Field(description="Number of booked sessions")
    recipient: str = Field(description="Email address the confirmation is sent to")
    message: str = Field(description="Confirmation message")


class SubmissionError(BaseModel):
    detail: str
    committed: list[str] = Field(description="IDs of the bookings committed before the failure")


class BookingCreated(BaseModel):
    """Notification published whenever a booking has been stored."""

    id: str
    tutor_id: str
    start_time: datetime
    end_time: datetime
    status: str = "confirmed"

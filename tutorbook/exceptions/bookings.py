from starlette import status

from tutorbook.exceptions.api_exception import APIException


class SlotAlreadyBookedException(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "This slot is already booked"
    description = "The clicked slot already has a confirmed booking and cannot be selected."


class BookingValidationException(APIException):
    status_code = 422
    detail = "Please fill in all required fields"
    description = "The selection is empty or the student's name or email is missing."


class BookingSubmissionException(APIException):
    """A failure while committing a submission. Bookings committed before the failure are kept."""

    def __init__(self, detail: str | None = None, committed: list[str] | None = None) -> None:
        super().__init__(detail)
        self.committed: list[str] = committed or []


class BookingConflictException(BookingSubmissionException):
    status_code = status.HTTP_409_CONFLICT
    detail = "One or more slots were just booked. Please refresh and try again."
    description = "Another student booked one of the selected slots first."


class BookingFailedException(BookingSubmissionException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Booking failed. Please try again later."
    description = "The booking could not be stored."

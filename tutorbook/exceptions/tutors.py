from starlette import status

from tutorbook.exceptions.api_exception import APIException


class TutorNotFoundException(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Tutor not found"
    description = "The requested tutor does not exist."

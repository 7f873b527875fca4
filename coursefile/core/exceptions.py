# coursefile/core/exceptions.py

from fastapi import status


class CourseFileError(Exception):
    """
    Base class for workflow errors.
    Every subclass carries the HTTP status the API layer answers with;
    the message is shown to the user verbatim.
    """
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Forbidden(CourseFileError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(CourseFileError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidState(CourseFileError):
    status_code = status.HTTP_409_CONFLICT


class Locked(InvalidState):
    # Task has a final HOD decision and the actor cannot override it
    status_code = status.HTTP_423_LOCKED


class InvalidInput(CourseFileError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class Conflict(CourseFileError):
    status_code = status.HTTP_409_CONFLICT

# util/errors.py
from typing import Optional
from httpx import codes
from util.enums import ErrorMessage


class AppError(Exception):
    # Flow: raise AppError subclasses to surface a typed status & message.
    def __init__(self, message: str, http_status: int = codes.BAD_REQUEST) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status

    @property
    def status(self) -> int:
        return self.http_status


class AuthenticationError(AppError):
    def __init__(self, message: str = ErrorMessage.NOT_LOGGED_IN.value.message) -> None:
        super().__init__(message, ErrorMessage.NOT_LOGGED_IN.value.http_status)


class NotFoundError(AppError):
    def __init__(self, message: str = ErrorMessage.NOT_FOUND.value.message) -> None:
        super().__init__(message, ErrorMessage.NOT_FOUND.value.http_status)


class NotReadyError(AppError):
    """The resource exists but the server has not finished materializing it."""

    def __init__(self, message: str = ErrorMessage.NOT_READY.value.message) -> None:
        super().__init__(message, ErrorMessage.NOT_READY.value.http_status)


class RequestFailedError(AppError):
    def __init__(self, http_status: int, message: Optional[str] = None) -> None:
        text = message or f"{ErrorMessage.REQUEST_FAILED.value.message} (HTTP {http_status})"
        super().__init__(text, http_status)


class TimeoutExceededError(AppError, TimeoutError):
    def __init__(self, message: str = ErrorMessage.TIMED_OUT.value.message) -> None:
        super().__init__(message, ErrorMessage.TIMED_OUT.value.http_status)


def error_for_status(http_status: int, message: Optional[str] = None) -> AppError:
    """
    Map a non-success HTTP status onto the error taxonomy.
    """
    if http_status == codes.UNAUTHORIZED:
        return AuthenticationError(message or ErrorMessage.NOT_LOGGED_IN.value.message)
    if http_status == codes.NOT_FOUND:
        return NotFoundError(message or ErrorMessage.NOT_FOUND.value.message)
    return RequestFailedError(http_status, message)

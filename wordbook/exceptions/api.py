"""REST API related exceptions."""

from .base import WordbookException


class ApiError(WordbookException):
    """Raised when a remote mutation fails (transport error or non-2xx status)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ApiError):
    """Raised when a privileged request is attempted without a bearer token."""

    pass

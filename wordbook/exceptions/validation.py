"""Validation-related exceptions."""

from .base import WordbookException


class ValidationError(WordbookException):
    """Raised when validation fails."""

    pass

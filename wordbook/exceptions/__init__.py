"""Custom exceptions for Wordbook."""

from .api import ApiError, AuthenticationError
from .base import WordbookException
from .storage import BundledDataError, PayloadError, StorageError
from .validation import ValidationError

__all__ = [
    "WordbookException",
    "ValidationError",
    "ApiError",
    "AuthenticationError",
    "StorageError",
    "PayloadError",
    "BundledDataError",
]

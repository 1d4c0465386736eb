"""On-device storage and cached payload exceptions."""

from .base import WordbookException


class StorageError(WordbookException):
    """Raised when the key-value storage cannot be read or written."""

    pass


class PayloadError(WordbookException):
    """Raised when a payload cannot be decoded into entity shapes."""

    pass


class BundledDataError(WordbookException):
    """Raised when the dataset shipped with the package is missing or malformed."""

    pass

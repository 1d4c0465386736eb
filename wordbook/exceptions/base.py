"""Base exception classes for Wordbook."""


class WordbookException(Exception):
    """Base exception for all Wordbook errors.

    All custom exceptions in the wordbook package should inherit
    from this base class for consistent error handling.
    """

    pass

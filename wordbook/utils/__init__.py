"""Utility functions for Wordbook."""

from .file_utils import ensure_directory, safe_filename
from .time_utils import local_date, parse_timestamp, utc_now_iso

__all__ = [
    "ensure_directory",
    "safe_filename",
    "local_date",
    "parse_timestamp",
    "utc_now_iso",
]

"""Data models for Wordbook."""

from .api import ApiResponse, UploadFile
from .category import Category
from .dictionary_data import DictionaryData
from .loading import DataSource, FailureKind, LoadResult, TierResult
from .settings import FONT_SCALE_FACTORS, Settings
from .text import Text
from .word import Attachment, Word

__all__ = [
    "Category",
    "DictionaryData",
    "Word",
    "Attachment",
    "Text",
    "Settings",
    "FONT_SCALE_FACTORS",
    "ApiResponse",
    "UploadFile",
    "DataSource",
    "FailureKind",
    "TierResult",
    "LoadResult",
]

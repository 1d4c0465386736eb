"""Observable state stores consumed by the UI layer."""

from .base import Store, require_success
from .dictionary import DictionaryState, DictionaryStore
from .settings import SettingsStore
from .texts import TextsState, TextsStore

__all__ = [
    "Store",
    "require_success",
    "DictionaryState",
    "DictionaryStore",
    "TextsState",
    "TextsStore",
    "SettingsStore",
]

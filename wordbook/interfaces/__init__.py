"""Interface protocols for Wordbook."""

from .key_value_storage import KeyValueStorage
from .state_listener import StateListener

__all__ = ["KeyValueStorage", "StateListener"]

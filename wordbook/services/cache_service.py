"""JSON payload cache on top of the key-value storage."""

import json
import logging
from typing import Any

from wordbook.exceptions import PayloadError, StorageError
from wordbook.interfaces import KeyValueStorage

logger = logging.getLogger(__name__)

# Persisted keys
SETTINGS_KEY = "settings"
BOOKMARKS_KEY = "bookmarks"
CATEGORIES_KEY = "categories_data"
WORDS_KEY = "words_data"
WORDS_LAST_FETCH_KEY = "last_api_fetch"
TEXTS_KEY = "texts_data"
TEXTS_LAST_FETCH_KEY = "texts_last_fetch"
AUTH_TOKEN_KEY = "auth_token"
APP_CONFIG_KEY = "app_config"


class CacheService:
    """Read and write JSON blobs and fetch timestamps in a KeyValueStorage.

    Storage errors propagate as StorageError; undecodable blobs as
    PayloadError. Callers decide whether either is fatal.
    """

    def __init__(self, storage: KeyValueStorage):
        """Initialize the cache.

        Args:
            storage: Backing key-value storage
        """
        self.storage = storage

    def read_json(self, key: str) -> Any | None:
        """Read and decode a JSON blob.

        Returns:
            Decoded value, or None if nothing is stored under the key

        Raises:
            StorageError: If the storage cannot be read
            PayloadError: If the stored value is not valid JSON
        """
        raw = self.storage.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise PayloadError(f"Stored value for '{key}' is not valid JSON: {e}") from e

    def write_json(self, key: str, value: Any) -> None:
        """Encode and store a JSON blob, overwriting the previous value.

        Raises:
            StorageError: If the storage cannot be written
        """
        self.storage.set_item(key, json.dumps(value, ensure_ascii=False))

    def write_json_group(self, values: dict[str, Any]) -> None:
        """Write several blobs that are only valid together.

        If any write fails, the blobs already written are put back to their
        previous values so a reader never sees a mix of old and new.

        Args:
            values: Mapping of storage key to value

        Raises:
            StorageError: If the storage cannot be read or written
        """
        previous = {key: self.storage.get_item(key) for key in values}
        written: list[str] = []
        try:
            for key, value in values.items():
                self.write_json(key, value)
                written.append(key)
        except StorageError:
            for key in written:
                self._restore(key, previous[key])
            raise

    def _restore(self, key: str, raw: str | None) -> None:
        try:
            if raw is None:
                self.storage.remove_item(key)
            else:
                self.storage.set_item(key, raw)
        except StorageError as e:
            logger.warning(f"Could not roll back '{key}' after a failed write: {e}")

    def read_timestamp(self, key: str) -> str | None:
        """Read a stored ISO-8601 timestamp.

        Raises:
            StorageError: If the storage cannot be read
        """
        value = self.storage.get_item(key)
        return value.strip() if value else None

    def write_timestamp(self, key: str, timestamp: str) -> None:
        """Store an ISO-8601 timestamp.

        Raises:
            StorageError: If the storage cannot be written
        """
        self.storage.set_item(key, timestamp)

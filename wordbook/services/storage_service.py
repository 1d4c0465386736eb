"""File-backed key-value storage for on-device persistence."""

import logging
import os
import uuid
from pathlib import Path

from wordbook.exceptions import StorageError
from wordbook.utils import ensure_directory, safe_filename

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Key-value storage keeping one file per key in a directory.

    Implements KeyValueStorage protocol. Writes go to a temporary file that
    is then renamed over the target, so a reader never sees a half-written
    value.
    """

    SUFFIX = ".json"

    def __init__(self, storage_dir: Path):
        """Initialize the storage.

        Args:
            storage_dir: Directory holding one file per key (created lazily)
        """
        self.storage_dir = Path(storage_dir)

    def get_item(self, key: str) -> str | None:
        """Read the value stored under a key.

        Returns:
            The stored string, or None if the key was never written

        Raises:
            StorageError: If the file exists but cannot be read
        """
        path = self._path_for(key)
        if not path.exists():
            return None

        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read storage key '{key}': {e}") from e

    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one atomically.

        Raises:
            StorageError: If the directory or file cannot be written
        """
        path = self._path_for(key)
        temp_path = path.with_name(f"{path.name}.{uuid.uuid4().hex[:8]}.tmp")

        try:
            ensure_directory(self.storage_dir)
            temp_path.write_text(value, encoding="utf-8")
            os.replace(temp_path, path)
        except OSError as e:
            # Clean up temp file on failure
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                logger.debug(f"Could not remove temp file {temp_path}", exc_info=True)
            raise StorageError(f"Cannot write storage key '{key}': {e}") from e

    def remove_item(self, key: str) -> None:
        """Remove a key if present.

        Raises:
            StorageError: If the file exists but cannot be deleted
        """
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot remove storage key '{key}': {e}") from e

    def keys(self) -> list[str]:
        """List the keys currently stored (sorted)."""
        if not self.storage_dir.exists():
            return []
        return sorted(p.name[: -len(self.SUFFIX)] for p in self.storage_dir.glob(f"*{self.SUFFIX}"))

    def _path_for(self, key: str) -> Path:
        return self.storage_dir / f"{safe_filename(key)}{self.SUFFIX}"

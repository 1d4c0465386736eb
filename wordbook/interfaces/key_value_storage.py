"""Protocol for on-device key-value storage."""

from typing import Protocol


class KeyValueStorage(Protocol):
    """Interface for a string key-value store that survives restarts.

    Values are whole strings (usually JSON); writes overwrite the previous
    value entirely. Implementations raise StorageError on I/O failure.
    """

    def get_item(self, key: str) -> str | None:
        """Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if nothing is stored under the key.

        Raises:
            StorageError: If the storage cannot be read
        """
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous value.

        Raises:
            StorageError: If the storage cannot be written
        """
        ...

    def remove_item(self, key: str) -> None:
        """Remove a key. Removing a missing key is not an error.

        Raises:
            StorageError: If the storage cannot be written
        """
        ...

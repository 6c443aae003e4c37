"""Abstract interfaces for the storage layer."""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract interface for string storage addressed by key."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Read the value stored under a key.

        Args:
            key: The storage key.

        Returns:
            The stored string, or None if nothing is stored.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing whatever was stored under the key.

        Args:
            key: The storage key.
            value: The string to store.
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Removing a missing key is not an error.

        Args:
            key: The storage key.
        """
        pass

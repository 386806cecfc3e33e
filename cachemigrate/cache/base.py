"""Base key-value store interface for cachemigrate."""

from abc import ABC, abstractmethod


class CacheStore(ABC):
    """Abstract base class for string key-value stores.

    Values are the serialized (text) form of a cache. Stores know
    nothing about versions or migrations.
    """

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Get the stored text for a key.

        Args:
            key: The store key

        Returns:
            The stored text or None if the key is absent
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store text under a key, replacing any previous value.

        Args:
            key: The store key
            value: The serialized value
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> bool:
        """Remove a key.

        Args:
            key: The store key

        Returns:
            True if the key existed and was removed
        """
        pass

    def has_item(self, key: str) -> bool:
        return self.get_item(key) is not None

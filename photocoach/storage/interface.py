"""
Storage Interface - Abstract base class for all storage implementations.
Session data is addressed by key, so the same store can run on the local
filesystem, in memory for tests, or on any other key/value backend.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StorageError(Exception):
    """Raised when a storage backend cannot read or write a key."""


class StorageInterface(ABC):
    """
    Abstract storage interface that defines the contract for all storage implementations.
    """

    @abstractmethod
    async def save(self, key: str, content: str) -> None:
        """
        Save content under the specified key, replacing any previous value.

        Args:
            key: Storage key (e.g., "photography_coach_sessions.json")
            content: Text content to save

        Raises:
            StorageError: If the content could not be written
        """
        pass

    @abstractmethod
    async def load(self, key: str) -> Optional[str]:
        """
        Load content stored under the specified key.

        Args:
            key: Storage key to load

        Returns:
            Optional[str]: Stored content, or None if the key doesn't exist

        Raises:
            StorageError: If the key exists but could not be read
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """
        Check if a value is stored under the specified key.

        Args:
            key: Storage key to check

        Returns:
            bool: True if the key exists, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete the value stored under the specified key.

        Args:
            key: Storage key to delete

        Returns:
            bool: True if a value was removed, False if the key didn't exist

        Raises:
            StorageError: If the value could not be removed
        """
        pass

"""
Abstract Storage Interface

DESIGN DECISION: The ledger persists through a tiny key-value contract.
This allows us to:
1. Swap the JSON file for Google Sheets (or a real database) later
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally simple - two operations over string values.
The ledger owns serialization; stores only move strings around.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for the persistent key-value store.

    Any storage implementation (JSON file, Google Sheets, etc.)
    must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under `key`.

        Args:
            key: Logical key (e.g. 'accounts', 'theme')

        Returns:
            The stored string, or None if the key was never written

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store `value` under `key`, replacing any previous value.

        Args:
            key: Logical key
            value: Serialized payload

        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass


class CorruptDataError(StorageError):
    """Stored payload could not be parsed."""
    pass

"""
Storage Services Package

Provides the abstract key-value interface and its implementations:
in-memory, a local JSON file, and Google Sheets.
"""

from src.services.storage.interface import (
    ConnectionError,
    CorruptDataError,
    KeyValueStore,
    StorageError,
)
from src.services.storage.memory import InMemoryKeyValueStore
from src.services.storage.json_file import JsonFileKeyValueStore
from src.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
)

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "ConnectionError",
    "CorruptDataError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
]

"""Services package."""

from src.services.preferences import Theme, ThemePreferences
from src.services.storage import (
    ConnectionError,
    CorruptDataError,
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    StorageError,
)

__all__ = [
    # Preferences
    "Theme",
    "ThemePreferences",
    # Storage services
    "ConnectionError",
    "CorruptDataError",
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "StorageError",
]

"""
Theme preference, kept on its own key next to the account collection.

The core never renders anything; this only remembers which theme
the presentation layer should use.
"""

from enum import Enum
from typing import Optional

import structlog

from src.audit import AuditLogger
from src.models.audit import AuditEventBuilder
from src.services.storage.interface import KeyValueStore, StorageError


logger = structlog.get_logger(__name__)


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class ThemePreferences:
    """Load, save and toggle the stored theme."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = "theme",
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._key = key
        self._audit_logger = audit_logger

    def load(self) -> Theme:
        """Stored theme, or light when missing, unknown or unreadable."""
        try:
            raw = self._store.get(self._key)
        except StorageError as e:
            logger.warning("theme_load_failed", error=str(e))
            return Theme.LIGHT
        try:
            return Theme(raw) if raw else Theme.LIGHT
        except ValueError:
            return Theme.LIGHT

    def save(self, theme: Theme) -> bool:
        """Persist `theme`. Returns False if the store refused the write."""
        try:
            self._store.set(self._key, theme.value)
        except StorageError as e:
            logger.warning("theme_save_failed", theme=theme.value, error=str(e))
            return False
        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.theme_changed(theme.value))
        return True

    def toggle(self) -> Theme:
        new_theme = Theme.DARK if self.load() is Theme.LIGHT else Theme.LIGHT
        self.save(new_theme)
        return new_theme

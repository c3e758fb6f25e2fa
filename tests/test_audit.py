"""Tests for the audit logger and the stored theme preference."""

from unittest.mock import MagicMock

from src.audit import AuditLogger
from src.models.audit import AuditEventBuilder, AuditEventType
from src.services.preferences import Theme, ThemePreferences
from src.services.storage import InMemoryKeyValueStore, StorageError


class BrokenStore(InMemoryKeyValueStore):
    """Every call fails."""

    def get(self, key):
        raise StorageError("unreachable")

    def set(self, key, value):
        raise StorageError("unreachable")


class TestAuditLogger:
    """Tests for the in-memory audit history."""

    def test_recent_events_newest_first(self):
        audit = AuditLogger()
        audit.log(AuditEventBuilder.account_created("a", "Sofa", "300.00", 3))
        audit.log(AuditEventBuilder.account_deleted("a", "Sofa"))

        events = audit.recent_events()
        assert [e.event_type for e in events] == [
            AuditEventType.ACCOUNT_DELETED,
            AuditEventType.ACCOUNT_CREATED,
        ]
        assert len(audit.recent_events(limit=1)) == 1

    def test_history_is_bounded(self):
        audit = AuditLogger(history_size=2)
        for number in range(1, 4):
            audit.log(AuditEventBuilder.installment_toggled("a", number, "paid"))

        events = audit.recent_events()
        assert len(events) == 2
        assert events[-1].details["installment_number"] == 2

    def test_logs_every_severity(self):
        audit = AuditLogger()
        audit.log(AuditEventBuilder.accounts_loaded(0, "accounts"))
        audit.log(AuditEventBuilder.schedule_truncated("a", [4], "truncate"))
        audit.log(AuditEventBuilder.persistence_failed("create", "accounts", "disk full"))
        assert len(audit.recent_events()) == 3

    def test_sink_failure_does_not_reach_caller(self):
        """A broken log sink must not undo the mutation that was audited."""
        audit = AuditLogger()
        audit._logger = MagicMock()
        for method in ("debug", "info", "warning", "error"):
            getattr(audit._logger, method).side_effect = RuntimeError("sink closed")

        event = AuditEventBuilder.account_created("a", "Sofa", "300.00", 3)
        audit.log(event)

        assert audit.recent_events() == [event]


class TestThemePreferences:
    """Tests for the theme preference."""

    def test_defaults_to_light(self):
        assert ThemePreferences(InMemoryKeyValueStore()).load() is Theme.LIGHT

    def test_unknown_value_falls_back_to_light(self):
        store = InMemoryKeyValueStore({"theme": "sepia"})
        assert ThemePreferences(store).load() is Theme.LIGHT

    def test_toggle_persists(self):
        store = InMemoryKeyValueStore()
        audit = AuditLogger()
        theme = ThemePreferences(store, audit_logger=audit)

        assert theme.toggle() is Theme.DARK
        assert store.get("theme") == "dark"
        assert theme.toggle() is Theme.LIGHT
        assert audit.recent_events(1)[0].event_type == AuditEventType.THEME_CHANGED

    def test_custom_key(self):
        store = InMemoryKeyValueStore()
        ThemePreferences(store, key="ui.theme").save(Theme.DARK)
        assert store.get("ui.theme") == "dark"

    def test_store_failures_are_not_raised(self):
        theme = ThemePreferences(BrokenStore())
        assert theme.load() is Theme.LIGHT
        assert theme.save(Theme.DARK) is False

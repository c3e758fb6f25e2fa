"""
Audit Models for the Installment Tracker

Every mutation of the account collection is logged for audit purposes.
This provides:
1. Traceability of every create, edit, delete and toggle
2. Debugging information when persistence fails
3. A short history the UI can show back to the user

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Account lifecycle
    ACCOUNT_CREATED = "account_created"
    ACCOUNT_UPDATED = "account_updated"
    ACCOUNT_DELETED = "account_deleted"
    SCHEDULE_TRUNCATED = "schedule_truncated"

    # Installments
    INSTALLMENT_TOGGLED = "installment_toggled"

    # Persistence
    ACCOUNTS_LOADED = "accounts_loaded"
    RECORDS_MIGRATED = "records_migrated"
    PERSISTENCE_FAILED = "persistence_failed"

    # Preferences
    THEME_CHANGED = "theme_changed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'installment', 'store')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.account_created(account_id, name, total, count)
        event = AuditEventBuilder.installment_toggled(account_id, 2, "paid")
    """

    @staticmethod
    def account_created(
        account_id: str,
        name: str,
        total_value: str,
        installment_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_CREATED,
            entity_type="account",
            entity_id=account_id,
            description=f"Account created: {name}",
            details={
                "total_value": total_value,
                "installment_count": installment_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def account_updated(
        account_id: str,
        name: str,
        installment_count: int,
        preserved_paid: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_UPDATED,
            entity_type="account",
            entity_id=account_id,
            description=f"Account updated: {name}",
            details={
                "installment_count": installment_count,
                "preserved_paid": preserved_paid,
            },
            is_user_action=True,
        )

    @staticmethod
    def schedule_truncated(
        account_id: str,
        dropped_paid: list[int],
        policy: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCHEDULE_TRUNCATED,
            severity=AuditSeverity.WARNING,
            entity_type="account",
            entity_id=account_id,
            description=f"Paid installments discarded by edit: {dropped_paid}",
            details={
                "dropped_paid": dropped_paid,
                "policy": policy,
            },
            is_user_action=True,
        )

    @staticmethod
    def account_deleted(account_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_DELETED,
            entity_type="account",
            entity_id=account_id,
            description=f"Account deleted: {name}",
            is_user_action=True,
        )

    @staticmethod
    def installment_toggled(
        account_id: str,
        number: int,
        status: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSTALLMENT_TOGGLED,
            entity_type="installment",
            entity_id=account_id,
            description=f"Installment {number} marked {status}",
            details={
                "installment_number": number,
                "status": status,
            },
            is_user_action=True,
        )

    @staticmethod
    def accounts_loaded(count: int, key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_LOADED,
            severity=AuditSeverity.DEBUG,
            entity_type="store",
            entity_id=key,
            description=f"Loaded {count} accounts",
            details={"count": count},
        )

    @staticmethod
    def records_migrated(count: int, key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_MIGRATED,
            entity_type="store",
            entity_id=key,
            description=f"Assigned a creation date to {count} legacy accounts",
            details={"count": count, "field": "createdAt"},
        )

    @staticmethod
    def persistence_failed(
        operation: str,
        key: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="store",
            entity_id=key,
            description=f"Could not save after {operation}; changes kept in memory only",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def theme_changed(theme: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.THEME_CHANGED,
            entity_type="preference",
            entity_id="theme",
            description=f"Theme set to {theme}",
            details={"theme": theme},
            is_user_action=True,
        )

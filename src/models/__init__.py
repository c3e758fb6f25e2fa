"""
Data Models Package

This package contains all Pydantic models used in the Installment Tracker.
All data flowing through the system must conform to these schemas.
"""

from src.models.account import (
    Account,
    AccountDraft,
    AccountStatus,
    Installment,
    InstallmentStatus,
    ScheduleShrinkPolicy,
    to_money,
)
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from src.models.reports import (
    AccountSections,
    AccountSummary,
    MonthlyPoint,
    PeriodStats,
    StatsReport,
)
from src.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Account models
    "Account",
    "AccountDraft",
    "AccountStatus",
    "Installment",
    "InstallmentStatus",
    "ScheduleShrinkPolicy",
    "to_money",
    # Projections
    "AccountSections",
    "AccountSummary",
    "MonthlyPoint",
    "PeriodStats",
    "StatsReport",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

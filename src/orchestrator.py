"""
Main Orchestrator for the Installment Tracker

This module ties together all the components and defines the
end-to-end flows the UI drives:
1. Account form (raw input → validate → create/update → save)
2. Delete and installment toggles
3. Query service and theme preference for rendering

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the ledger without passing validation
- A failed save is reported as a warning, never hidden
- Every mutation is audited (by the ledger)
"""

from datetime import date
from typing import Any, Callable, Optional

import structlog
from pydantic import BaseModel

from src.audit import AuditLogger, configure_logging
from src.config import Settings, get_settings
from src.ledger import Ledger
from src.models.account import Account, AccountDraft, Installment
from src.models.audit import AuditEvent
from src.models.validation import ValidationResult
from src.queries import LedgerQueryService
from src.services.preferences import ThemePreferences
from src.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)
from src.validation import AccountFormValidator


logger = structlog.get_logger(__name__)

PERSISTENCE_WARNING = (
    "Your change is visible now but could not be saved. "
    "It will be lost on reload unless a later save succeeds."
)

DEGRADED_WARNING = (
    "Stored data could not be loaded, so changes are kept in memory only "
    "and will be lost on restart."
)


class MutationOutcome(BaseModel):
    """What the UI needs to know after a change."""

    account: Optional[Account] = None
    installment: Optional[Installment] = None
    persisted: bool = True
    warning: Optional[str] = None


class AccountFlow:
    """
    Orchestrates account changes coming from the form and the cards.

    Flow:
    1. Validate → two-stage form validation
    2. Apply → ledger mutation (create, update, delete or toggle)
    3. Report → MutationOutcome with a warning if the save failed
    """

    def __init__(
        self,
        ledger: Ledger,
        validator: Optional[AccountFormValidator] = None,
    ):
        self._ledger = ledger
        self._validator = validator or AccountFormValidator(clock=ledger.today)

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    def validate_form(
        self,
        name: Any,
        total_value: Any,
        due_date: Any,
        tag: Any,
        installment_count: Any,
    ) -> tuple[ValidationResult, Optional[AccountDraft], str]:
        """
        Returns:
            (validation_result, draft_or_none, user_message)
        """
        result, draft = self._validator.validate(
            name, total_value, due_date, tag, installment_count
        )
        return result, draft, self._validator.get_user_friendly_summary(result)

    def _outcome(self, **kwargs) -> MutationOutcome:
        """Outcome of the mutation this thread just ran."""
        degraded = self._ledger.degraded_reason
        if degraded:
            return MutationOutcome(
                persisted=False,
                warning=f"{DEGRADED_WARNING} ({degraded})",
                **kwargs,
            )
        error = self._ledger.last_write_error()
        if error is None:
            return MutationOutcome(**kwargs)
        return MutationOutcome(
            persisted=False,
            warning=f"{PERSISTENCE_WARNING} ({error})",
            **kwargs,
        )

    def create(self, draft: AccountDraft) -> MutationOutcome:
        account = self._ledger.create_account(**draft.model_dump())
        return self._outcome(account=account)

    def update(self, account_id: str, draft: AccountDraft) -> MutationOutcome:
        """
        Raises:
            AccountNotFoundError: the account was deleted meanwhile
            ScheduleShrinkError: the edit would drop paid installments
        """
        account = self._ledger.update_account(account_id, **draft.model_dump())
        return self._outcome(account=account)

    def delete(self, account_id: str) -> MutationOutcome:
        self._ledger.delete_account(account_id)
        return self._outcome()

    def recent_activity(self, limit: int = 20) -> list[AuditEvent]:
        audit_logger = self._ledger.audit_logger
        return audit_logger.recent_events(limit) if audit_logger else []

    def toggle(self, account_id: str, installment_number: int) -> MutationOutcome:
        installment = self._ledger.toggle_installment_status(
            account_id, installment_number
        )
        if installment is None:
            # Stale reference: nothing changed
            return self._outcome()
        return self._outcome(
            account=self._ledger.get_account(account_id),
            installment=installment,
        )


def create_store(settings: Settings) -> KeyValueStore:
    """Build the key-value store selected by STORAGE_BACKEND."""
    backend = settings.storage.backend
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "google_sheets":
        return GoogleSheetsKeyValueStore(GoogleSheetsClient(settings.google_sheets))
    return JsonFileKeyValueStore(settings.storage.json_path)


def create_app_components(
    settings: Optional[Settings] = None,
    clock: Callable[[], date] = date.today,
) -> tuple[AccountFlow, LedgerQueryService, ThemePreferences]:
    """
    Factory function to create all application components.

    If the configured store cannot be built or read, the app falls back
    to an in-memory store so the unreadable data is never overwritten.
    The ledger is then marked degraded and every outcome carries a warning.

    Returns:
        (account_flow, query_service, theme_preferences)
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage
    configure_logging(app_settings.log_level)

    audit_logger = AuditLogger()

    try:
        store = create_store(settings)
        ledger = Ledger(
            store,
            audit_logger=audit_logger,
            clock=clock,
            storage_key=storage_settings.accounts_key,
            shrink_policy=app_settings.schedule_shrink_policy,
        )
        ledger.load()
    except Exception as e:
        # Storage not usable - continue without it
        logger.error(
            "storage_unavailable",
            backend=storage_settings.backend,
            error=str(e),
            fallback="memory",
        )
        store = InMemoryKeyValueStore()
        ledger = Ledger(
            store,
            audit_logger=audit_logger,
            clock=clock,
            storage_key=storage_settings.accounts_key,
            shrink_policy=app_settings.schedule_shrink_policy,
            degraded_reason=f"{storage_settings.backend} store unavailable: {e}",
        )

    flow = AccountFlow(
        ledger,
        AccountFormValidator(settings=app_settings, clock=clock),
    )
    queries = LedgerQueryService(ledger, window_size=app_settings.stats_window_months)
    theme = ThemePreferences(
        store,
        key=storage_settings.theme_key,
        audit_logger=audit_logger,
    )
    return flow, queries, theme

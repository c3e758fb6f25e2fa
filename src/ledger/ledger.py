"""
The Ledger

Owns the account collection. Every mutation goes through here:
1. Validate input (nothing partially applied)
2. Mutate the in-memory collection
3. Flush the whole collection to the store
4. Audit what happened

DESIGN DECISION: A failed flush does NOT roll back the mutation.
Losing the user's edit is worse than warning them the data may not
survive a reload. The failure is kept in `last_persistence_error`, and
`last_write_error()` reports it for the calling thread's own mutation.

Mutations are serialized with a re-entrant lock: the Streamlit app
shares one ledger between browser sessions running on separate threads.
"""

import threading
from datetime import date
from decimal import Decimal
from typing import Callable, Optional
from uuid import uuid4

import structlog
from pydantic import ValidationError

from src.audit import AuditLogger
from src.ledger.codec import dump_accounts, load_accounts
from src.ledger.errors import (
    AccountNotFoundError,
    InvalidInputError,
    ScheduleShrinkError,
)
from src.ledger.schedule import build_schedule, carry_over_paid, paid_numbers
from src.models.account import (
    Account,
    AccountDraft,
    Installment,
    ScheduleShrinkPolicy,
)
from src.models.audit import AuditEvent, AuditEventBuilder
from src.services.storage.interface import KeyValueStore, StorageError


logger = structlog.get_logger(__name__)


class Ledger:
    """
    In-memory account collection bound to a key-value store.

    Usage:
        ledger = Ledger(JsonFileKeyValueStore("data/store.json"))
        ledger.load()
        account = ledger.create_account("Sofa", 300, date(2024, 1, 15), "home", 3)
        ledger.toggle_installment_status(account.id, 1)
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], date] = date.today,
        storage_key: str = "accounts",
        shrink_policy: ScheduleShrinkPolicy = ScheduleShrinkPolicy.TRUNCATE,
        degraded_reason: Optional[str] = None,
    ):
        """
        Args:
            store: Where the collection is persisted.
            audit_logger: Receives one event per mutation. Optional.
            clock: Returns today's date. Injected so tests can pin time.
            storage_key: Key holding the serialized collection.
            shrink_policy: Applied when an edit would drop paid installments.
            degraded_reason: Set when `store` stands in for an unusable one.
                Every write is then treated as not durable.
        """
        self._store = store
        self._audit_logger = audit_logger
        self._clock = clock
        self._storage_key = storage_key
        self._shrink_policy = shrink_policy
        self._accounts: list[Account] = []
        self._lock = threading.RLock()
        self._local = threading.local()
        self.degraded_reason = degraded_reason
        self.last_persistence_error: Optional[StorageError] = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    def today(self) -> date:
        return self._clock()

    @property
    def accounts(self) -> list[Account]:
        """Snapshot of the collection in insertion order."""
        with self._lock:
            return list(self._accounts)

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    @property
    def shrink_policy(self) -> ScheduleShrinkPolicy:
        return self._shrink_policy

    def __len__(self) -> int:
        return len(self._accounts)

    def get_account(self, account_id: str) -> Optional[Account]:
        with self._lock:
            return self._find(account_id)

    def _find(self, account_id: str) -> Optional[Account]:
        for account in self._accounts:
            if account.id == account_id:
                return account
        return None

    def last_write_error(self) -> Optional[StorageError]:
        """
        Write failure of the calling thread's most recent mutation.

        None when that mutation saved, or wrote nothing at all.
        """
        return getattr(self._local, "write_error", None)

    def load(self) -> list[Account]:
        """
        Replace the in-memory collection with the stored one.

        Raises:
            StorageError: store unreadable or payload corrupt
        """
        with self._lock:
            payload = self._store.get(self._storage_key)
            accounts, migrated = load_accounts(payload, self.today())
            self._accounts = accounts
            self._audit(AuditEventBuilder.accounts_loaded(len(accounts), self._storage_key))
            if migrated:
                self._audit(AuditEventBuilder.records_migrated(migrated, self._storage_key))
            return list(accounts)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create_account(
        self,
        name: str,
        total_value: Decimal | int | float,
        due_date: date | str,
        tag: str,
        installment_count: int,
    ) -> Account:
        """
        Create an account with its full pending schedule.

        Raises:
            InvalidInputError: before anything is mutated
        """
        self._begin_call()
        draft = self._draft(name, total_value, due_date, tag, installment_count)

        with self._lock:
            account = Account(
                id=self._new_id(),
                name=draft.name,
                total_value=draft.total_value,
                due_date=draft.due_date,
                tag=draft.tag,
                installments=build_schedule(
                    draft.total_value, draft.due_date, draft.installment_count
                ),
                created_at=self.today(),
            )
            self._accounts.append(account)
            self._audit(AuditEventBuilder.account_created(
                account_id=account.id,
                name=account.name,
                total_value=str(account.total_value),
                installment_count=account.installment_count,
            ))
            self._persist("create")
            return account

    def update_account(
        self,
        account_id: str,
        name: str,
        total_value: Decimal | int | float,
        due_date: date | str,
        tag: str,
        installment_count: int,
    ) -> Account:
        """
        Replace an account's fields and regenerate its schedule.

        Paid flags carry over by installment number. When the new schedule
        is shorter and paid installments would be dropped, the shrink
        policy decides: REJECT raises, TRUNCATE drops only those with a
        warning, RESET clears every paid flag of the account.

        Raises:
            InvalidInputError: bad input, nothing changed
            AccountNotFoundError: unknown id, nothing changed or written
            ScheduleShrinkError: REJECT policy, nothing changed or written
        """
        self._begin_call()
        draft = self._draft(name, total_value, due_date, tag, installment_count)

        with self._lock:
            index = next(
                (i for i, acc in enumerate(self._accounts) if acc.id == account_id),
                None,
            )
            if index is None:
                raise AccountNotFoundError(account_id)
            current = self._accounts[index]

            schedule = build_schedule(
                draft.total_value, draft.due_date, draft.installment_count
            )
            schedule, dropped = carry_over_paid(current.installments, schedule)
            if dropped and self._shrink_policy is ScheduleShrinkPolicy.REJECT:
                raise ScheduleShrinkError(account_id, dropped)
            if dropped and self._shrink_policy is ScheduleShrinkPolicy.RESET:
                schedule = build_schedule(
                    draft.total_value, draft.due_date, draft.installment_count
                )
                dropped = paid_numbers(current.installments)

            updated = Account(
                id=current.id,
                name=draft.name,
                total_value=draft.total_value,
                due_date=draft.due_date,
                tag=draft.tag,
                installments=schedule,
                created_at=current.created_at,
            )
            self._accounts[index] = updated

            if dropped:
                logger.warning(
                    "paid_installments_discarded",
                    account_id=account_id,
                    dropped_paid=dropped,
                    policy=self._shrink_policy.value,
                )
                self._audit(AuditEventBuilder.schedule_truncated(
                    account_id=account_id,
                    dropped_paid=dropped,
                    policy=self._shrink_policy.value,
                ))
            self._audit(AuditEventBuilder.account_updated(
                account_id=account_id,
                name=updated.name,
                installment_count=updated.installment_count,
                preserved_paid=len(paid_numbers(updated.installments)),
            ))
            self._persist("update")
            return updated

    def delete_account(self, account_id: str) -> None:
        """Remove an account and its installments. Unknown ids are ignored."""
        self._begin_call()
        with self._lock:
            account = self._find(account_id)
            if account is None:
                return
            self._accounts = [acc for acc in self._accounts if acc.id != account_id]
            self._audit(AuditEventBuilder.account_deleted(account.id, account.name))
            self._persist("delete")

    def toggle_installment_status(
        self,
        account_id: str,
        installment_number: int,
    ) -> Optional[Installment]:
        """
        Flip one installment between paid and pending.

        A stale account id or installment number is a silent no-op
        (returns None and writes nothing).
        """
        self._begin_call()
        with self._lock:
            account = self._find(account_id)
            if account is None:
                return None
            installment = account.find_installment(installment_number)
            if installment is None:
                return None

            installment.status = installment.status.toggled()
            self._audit(AuditEventBuilder.installment_toggled(
                account_id=account_id,
                number=installment_number,
                status=installment.status.value,
            ))
            self._persist("toggle")
            return installment

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _draft(name, total_value, due_date, tag, installment_count) -> AccountDraft:
        try:
            return AccountDraft(
                name=name,
                total_value=total_value,
                due_date=due_date,
                tag=tag,
                installment_count=installment_count,
            )
        except ValidationError as e:
            raise InvalidInputError.from_validation_error(e)

    def _begin_call(self) -> None:
        self._local.write_error = None

    def _new_id(self) -> str:
        existing = {acc.id for acc in self._accounts}
        while True:
            candidate = uuid4().hex
            if candidate not in existing:
                return candidate

    def _persist(self, operation: str) -> bool:
        """Flush the collection. Failures are recorded, never raised."""
        try:
            self._store.set(self._storage_key, dump_accounts(self._accounts))
        except StorageError as e:
            self.last_persistence_error = e
            self._local.write_error = e
            logger.warning(
                "persistence_failed",
                operation=operation,
                key=self._storage_key,
                error=str(e),
            )
            self._audit(AuditEventBuilder.persistence_failed(
                operation=operation,
                key=self._storage_key,
                error_message=str(e),
            ))
            return False
        self.last_persistence_error = None
        return True

    def _audit(self, event: AuditEvent) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)

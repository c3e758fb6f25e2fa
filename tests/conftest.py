"""Shared fixtures: a pinned clock and an in-memory store."""

from datetime import date
from decimal import Decimal

import pytest

from src.audit import AuditLogger
from src.ledger import Ledger, build_schedule
from src.models.account import Account, InstallmentStatus
from src.services.storage import InMemoryKeyValueStore, StorageError


TODAY = date(2024, 3, 10)


class FailingStore(InMemoryKeyValueStore):
    """Reads work, every write fails."""

    def set(self, key: str, value: str) -> None:
        raise StorageError("disk full")


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger()


@pytest.fixture
def ledger(store, audit_logger) -> Ledger:
    return Ledger(store, audit_logger=audit_logger, clock=lambda: TODAY)


@pytest.fixture
def failing_ledger(audit_logger) -> Ledger:
    return Ledger(FailingStore(), audit_logger=audit_logger, clock=lambda: TODAY)


@pytest.fixture
def make_account():
    """Build an Account directly, bypassing the ledger."""

    def _make(
        account_id: str = "acc-1",
        total_value: str = "300.00",
        due_date: date = date(2024, 1, 15),
        count: int = 3,
        tag: str = "home",
        created_at: date = TODAY,
        paid: tuple[int, ...] = (),
    ) -> Account:
        installments = build_schedule(Decimal(total_value), due_date, count)
        for number in paid:
            installments[number - 1].status = InstallmentStatus.PAID
        return Account(
            id=account_id,
            name=f"Account {account_id}",
            total_value=Decimal(total_value),
            due_date=due_date,
            tag=tag,
            installments=installments,
            created_at=created_at,
        )

    return _make

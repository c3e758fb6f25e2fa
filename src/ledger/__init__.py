"""Ledger package: the account collection and its schedule rules."""

from src.ledger.codec import dump_accounts, load_accounts
from src.ledger.errors import (
    AccountNotFoundError,
    InvalidInputError,
    LedgerError,
    ScheduleShrinkError,
)
from src.ledger.ledger import Ledger
from src.ledger.schedule import add_months, build_schedule, round2

__all__ = [
    "Ledger",
    # Schedule helpers
    "add_months",
    "build_schedule",
    "round2",
    # Codec
    "dump_accounts",
    "load_accounts",
    # Exceptions
    "AccountNotFoundError",
    "InvalidInputError",
    "LedgerError",
    "ScheduleShrinkError",
]

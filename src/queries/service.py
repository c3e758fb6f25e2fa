"""
Presentation Query Service

DESIGN DECISION: The UI never touches the account list directly.
It asks this service for read-only projections, and sends every
change through the ledger's mutation methods.

GUARANTEES:
- Only returns data derived from the ledger's current collection
- Uses the ledger's clock, so "today" is the same everywhere
- Never mutates anything
"""

from typing import Optional

from src.ledger import Ledger
from src.models.account import Account, AccountStatus
from src.models.reports import AccountSections, AccountSummary, StatsReport
from src.queries.aggregates import (
    accounts_created_in,
    available_years,
    category_totals,
    compute_period_stats,
    derive_status,
    filter_by_tag_substring,
    group_by_tag,
    monthly_series,
    sorted_tags,
    summarize_account,
)


class LedgerQueryService:
    """Read-only projections over a Ledger for the presentation layer."""

    def __init__(self, ledger: Ledger, window_size: int = 6):
        self._ledger = ledger
        self._window_size = window_size

    def search(self, term: Optional[str]) -> list[Account]:
        """Accounts whose tag contains `term` (case-insensitive)."""
        return filter_by_tag_substring(self._ledger.accounts, term)

    def list_by_section(self, term: Optional[str] = None) -> AccountSections:
        """Accounts split into paid / pending / overdue, optionally filtered by tag."""
        today = self._ledger.today()
        sections = AccountSections()
        for account in self.search(term):
            status = derive_status(account, today)
            if status is AccountStatus.PAID:
                sections.paid.append(account)
            elif status is AccountStatus.OVERDUE:
                sections.overdue.append(account)
            else:
                sections.pending.append(account)
        return sections

    @staticmethod
    def grouped(accounts: list[Account]) -> list[tuple[str, list[Account]]]:
        """(tag, accounts) pairs sorted by tag, for rendering a section."""
        groups = group_by_tag(accounts)
        return [(tag, groups[tag]) for tag in sorted_tags(groups)]

    def status_of(self, account: Account) -> AccountStatus:
        return derive_status(account, self._ledger.today())

    def summary(self, account: Account) -> AccountSummary:
        return summarize_account(account, self._ledger.today())

    def stats_for(self, month: int, year: int) -> StatsReport:
        """
        Summary cards and chart series for accounts created in (month, year).

        The monthly series covers the window ending at that month.
        """
        accounts = self._ledger.accounts
        in_period = accounts_created_in(accounts, month, year)
        return StatsReport(
            month=month,
            year=year,
            stats=compute_period_stats(in_period, self._ledger.today()),
            monthly=monthly_series(accounts, month, year, self._window_size),
            categories=category_totals(in_period),
        )

    def available_years(self) -> list[int]:
        return available_years(self._ledger.accounts, self._ledger.today().year)

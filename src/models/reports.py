"""
Read-only projections handed to the presentation layer.

None of these are persisted. They are rebuilt from the account
collection and the current date on every query.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from src.models.account import Account, AccountStatus


class PeriodStats(BaseModel):
    """
    Summary cards for a set of accounts.

    total_overdue is a subset of total_pending (counted in both).
    total_saved is the amount still left to pay, despite its name.
    """

    total_paid: Decimal = Decimal("0.00")
    total_pending: Decimal = Decimal("0.00")
    total_overdue: Decimal = Decimal("0.00")
    total_saved: Decimal = Decimal("0.00")


class MonthlyPoint(BaseModel):
    """One bar of the monthly spending chart."""

    label: str = Field(..., description="Short month and 2-digit year, e.g. 'Jan 24'")
    month: int = Field(..., ge=1, le=12)
    year: int
    amount: Decimal = Decimal("0.00")


class StatsReport(BaseModel):
    """Everything the statistics screen needs for one month."""

    month: int = Field(..., ge=1, le=12)
    year: int
    stats: PeriodStats
    monthly: list[MonthlyPoint] = Field(default_factory=list)
    categories: dict[str, Decimal] = Field(default_factory=dict)


class AccountSections(BaseModel):
    """Accounts split by derived status, in collection order."""

    paid: list[Account] = Field(default_factory=list)
    pending: list[Account] = Field(default_factory=list)
    overdue: list[Account] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.paid) + len(self.pending) + len(self.overdue)


class AccountSummary(BaseModel):
    """Figures shown on a single account card."""

    account_id: str
    status: AccountStatus
    paid_count: int = Field(..., ge=0)
    installment_count: int = Field(..., ge=1)
    paid_amount: Decimal
    remaining_amount: Decimal

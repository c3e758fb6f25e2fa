"""
Aggregate Queries

DESIGN DECISION: Every query here is a pure function of a list of
accounts and, where time matters, an explicit `today`.
Nothing is cached and derived status is never stored, so a reload
on a later day shows newly overdue accounts without any migration.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from src.ledger.errors import InvalidInputError
from src.models.account import Account, AccountStatus
from src.models.reports import AccountSummary, MonthlyPoint, PeriodStats


ZERO = Decimal("0.00")


def _check_month(month: int) -> None:
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidInputError(f"Month must be an integer from 1 to 12, got {month!r}")


def derive_status(account: Account, today: date) -> AccountStatus:
    """
    PAID when nothing is pending; otherwise OVERDUE when any pending
    installment is due strictly before `today`; otherwise PENDING.
    """
    pending = [inst for inst in account.installments if not inst.is_paid]
    if not pending:
        return AccountStatus.PAID
    if any(inst.due_date < today for inst in pending):
        return AccountStatus.OVERDUE
    return AccountStatus.PENDING


def group_by_tag(accounts: Iterable[Account]) -> dict[str, list[Account]]:
    """Group accounts by tag, keeping input order inside each group."""
    groups: dict[str, list[Account]] = {}
    for account in accounts:
        groups.setdefault(account.tag, []).append(account)
    return groups


def sorted_tags(groups: dict[str, list[Account]]) -> list[str]:
    """Tag keys in display order."""
    return sorted(groups)


def filter_by_tag_substring(
    accounts: Iterable[Account],
    term: Optional[str],
) -> list[Account]:
    """Case-insensitive substring match on tag. Empty term keeps everything."""
    if not term:
        return list(accounts)
    needle = term.lower()
    return [acc for acc in accounts if needle in acc.tag.lower()]


def accounts_created_in(
    accounts: Iterable[Account],
    month: int,
    year: int,
) -> list[Account]:
    """Accounts whose creation date falls in `month` (1-based) of `year`."""
    _check_month(month)
    return [
        acc for acc in accounts
        if acc.created_at.month == month and acc.created_at.year == year
    ]


def compute_period_stats(accounts: Iterable[Account], today: date) -> PeriodStats:
    """
    Sum paid, pending and overdue installment values.

    Overdue amounts are also part of pending. total_saved is
    Σ(total_value - paid), i.e. what is still left to pay.
    """
    stats = PeriodStats()
    for account in accounts:
        paid = account.paid_amount
        stats.total_paid += paid
        stats.total_pending += account.pending_amount
        stats.total_overdue += account.overdue_amount(today)
        stats.total_saved += account.total_value - paid
    return stats


def _shift_month(month: int, year: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    shifted_year, shifted_month = divmod(index, 12)
    return shifted_month + 1, shifted_year


def monthly_series(
    accounts: Iterable[Account],
    month: int,
    year: int,
    window_size: int = 6,
) -> list[MonthlyPoint]:
    """
    Paid amount per creation month for the `window_size` months ending
    at (month, year), oldest first.
    """
    _check_month(month)
    if window_size < 1:
        raise InvalidInputError(f"Window size must be at least 1, got {window_size}")
    accounts = list(accounts)

    points = []
    for offset in range(-(window_size - 1), 1):
        target_month, target_year = _shift_month(month, year, offset)
        amount = sum(
            (acc.paid_amount for acc in accounts_created_in(accounts, target_month, target_year)),
            ZERO,
        )
        points.append(MonthlyPoint(
            label=date(target_year, target_month, 1).strftime("%b %y"),
            month=target_month,
            year=target_year,
            amount=amount,
        ))
    return points


def category_totals(accounts: Iterable[Account]) -> dict[str, Decimal]:
    """Paid amount per tag. Tags with nothing paid are left out."""
    totals: dict[str, Decimal] = {}
    for account in accounts:
        paid = account.paid_amount
        if paid > 0:
            totals[account.tag] = totals.get(account.tag, ZERO) + paid
    return totals


def summarize_account(account: Account, today: date) -> AccountSummary:
    """Figures for one account card."""
    paid = account.paid_amount
    return AccountSummary(
        account_id=account.id,
        status=derive_status(account, today),
        paid_count=sum(1 for inst in account.installments if inst.is_paid),
        installment_count=account.installment_count,
        paid_amount=paid,
        remaining_amount=account.total_value - paid,
    )


def available_years(
    accounts: Iterable[Account],
    current_year: int,
    span: int = 5,
) -> list[int]:
    """Creation years plus the last `span` years, newest first."""
    years = {acc.created_at.year for acc in accounts}
    years.update(current_year - i for i in range(span))
    return sorted(years, reverse=True)

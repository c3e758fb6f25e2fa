"""
Installment schedule generation.

The total is divided evenly and each share rounded half-up to cents.
The remainder is NOT redistributed: 100.00 over 3 installments gives
33.33 three times (99.99 in total). This matches what users already
have stored, so it is kept as-is.
"""

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from src.models.account import CENT, Installment, InstallmentStatus


def round2(value: Decimal) -> Decimal:
    """Round to cents, halves away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def installment_value(total_value: Decimal, installment_count: int) -> Decimal:
    return round2(total_value / installment_count)


def build_schedule(
    total_value: Decimal,
    due_date: date,
    installment_count: int,
) -> list[Installment]:
    """
    Generate `installment_count` pending installments, one month apart.

    Example:
        300.00, 2024-01-15, 3 → 100.00 due 01-15, 02-15, 03-15
    """
    value = installment_value(total_value, installment_count)
    return [
        Installment(
            number=i + 1,
            value=value,
            due_date=add_months(due_date, i),
            status=InstallmentStatus.PENDING,
        )
        for i in range(installment_count)
    ]


def paid_numbers(installments: list[Installment]) -> list[int]:
    return [inst.number for inst in installments if inst.is_paid]


def carry_over_paid(
    previous: list[Installment],
    schedule: list[Installment],
) -> tuple[list[Installment], list[int]]:
    """
    Mark installments of `schedule` paid where `previous` had them paid.

    Returns (schedule, dropped) where `dropped` lists paid numbers
    that no longer exist in the new schedule.
    """
    count = len(schedule)
    dropped = []
    for number in paid_numbers(previous):
        if number <= count:
            schedule[number - 1].status = InstallmentStatus.PAID
        else:
            dropped.append(number)
    return schedule, dropped

"""Tests for installment schedule generation."""

from datetime import date
from decimal import Decimal

import pytest

from src.ledger.schedule import (
    add_months,
    build_schedule,
    carry_over_paid,
    installment_value,
    paid_numbers,
    round2,
)
from src.models.account import InstallmentStatus


class TestAddMonths:
    """Tests for calendar month arithmetic."""

    def test_same_day_next_month(self):
        assert add_months(date(2024, 1, 15), 1) == date(2024, 2, 15)

    def test_crosses_year_boundary(self):
        assert add_months(date(2024, 11, 5), 3) == date(2025, 2, 5)

    def test_clamps_to_end_of_month(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
        assert add_months(date(2024, 3, 31), 1) == date(2024, 4, 30)

    def test_zero_months_is_identity(self):
        assert add_months(date(2024, 5, 20), 0) == date(2024, 5, 20)


class TestBuildSchedule:
    """Tests for schedule generation."""

    def test_even_split(self):
        """300.00 over 3 from Jan 15: 100.00 each, one month apart."""
        schedule = build_schedule(Decimal("300.00"), date(2024, 1, 15), 3)
        assert [inst.number for inst in schedule] == [1, 2, 3]
        assert [inst.value for inst in schedule] == [Decimal("100.00")] * 3
        assert [inst.due_date for inst in schedule] == [
            date(2024, 1, 15),
            date(2024, 2, 15),
            date(2024, 3, 15),
        ]
        assert all(inst.status is InstallmentStatus.PENDING for inst in schedule)

    def test_rounding_remainder_is_not_redistributed(self):
        schedule = build_schedule(Decimal("100.00"), date(2024, 1, 15), 3)
        assert [inst.value for inst in schedule] == [Decimal("33.33")] * 3
        assert sum(inst.value for inst in schedule) == Decimal("99.99")

    def test_rounds_half_up(self):
        assert installment_value(Decimal("0.05"), 2) == Decimal("0.03")
        assert round2(Decimal("1.005")) == Decimal("1.01")

    def test_single_installment(self):
        schedule = build_schedule(Decimal("49.90"), date(2024, 6, 1), 1)
        assert len(schedule) == 1
        assert schedule[0].value == Decimal("49.90")

    def test_due_month_advances_by_number(self):
        schedule = build_schedule(Decimal("1200.00"), date(2024, 1, 31), 14)
        for inst in schedule:
            assert inst.due_date.month == (inst.number - 1) % 12 + 1
        assert schedule[1].due_date == date(2024, 2, 29)
        assert schedule[13].due_date == date(2025, 2, 28)

    @pytest.mark.parametrize(
        "total_value,count",
        [
            ("0.05", 2),
            ("1.00", 100),
            ("100.00", 3),
            ("999.99", 12),
            ("1000.00", 7),
            ("12345.67", 48),
        ],
    )
    def test_drift_stays_within_a_cent_per_installment(self, total_value, count):
        schedule = build_schedule(Decimal(total_value), date(2024, 1, 15), count)
        drift = abs(Decimal(total_value) - sum(inst.value for inst in schedule))
        assert len(schedule) == count
        assert drift <= Decimal("0.01") * count


class TestCarryOverPaid:
    """Tests for keeping paid flags across a regenerated schedule."""

    @pytest.fixture
    def previous(self):
        schedule = build_schedule(Decimal("400.00"), date(2024, 1, 10), 4)
        schedule[0].status = InstallmentStatus.PAID
        schedule[2].status = InstallmentStatus.PAID
        return schedule

    def test_keeps_paid_numbers_when_growing(self, previous):
        schedule = build_schedule(Decimal("600.00"), date(2024, 1, 10), 6)
        schedule, dropped = carry_over_paid(previous, schedule)
        assert paid_numbers(schedule) == [1, 3]
        assert dropped == []

    def test_reports_dropped_numbers_when_shrinking(self, previous):
        schedule = build_schedule(Decimal("200.00"), date(2024, 1, 10), 2)
        schedule, dropped = carry_over_paid(previous, schedule)
        assert paid_numbers(schedule) == [1]
        assert dropped == [3]

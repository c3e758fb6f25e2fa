"""Tests for the two-stage account form validation."""

from datetime import date
from decimal import Decimal

import pytest

from src.config import AppSettings
from src.validation import AccountFormValidator


@pytest.fixture
def validator(today):
    settings = AppSettings(
        max_installments=48,
        max_total_value=50000.0,
        past_due_tolerance_days=365,
    )
    return AccountFormValidator(settings=settings, clock=lambda: today)


def fields_with(result, severity="error"):
    return {issue.field for issue in result.issues if issue.severity == severity}


class TestSchemaValidation:
    """Stage 1: parsing and required fields."""

    def test_typed_text_is_parsed(self, validator):
        result, draft = validator.validate("Sofa", " 300.00 ", "2024-01-15", "home", "3")

        assert result.is_valid
        assert draft.total_value == Decimal("300.00")
        assert draft.due_date == date(2024, 1, 15)
        assert draft.installment_count == 3

    def test_widget_values_are_accepted(self, validator):
        result, draft = validator.validate("Sofa", 299.9, date(2024, 1, 15), "home", 3)
        assert result.is_valid
        assert draft.total_value == Decimal("299.90")

    def test_every_missing_field_is_reported(self, validator):
        result, draft = validator.validate("", None, "", "  ", None)

        assert draft is None
        assert not result.schema_valid
        assert not result.semantic_valid
        assert fields_with(result) == {
            "name", "tag", "total_value", "installment_count", "due_date",
        }

    def test_non_numeric_total(self, validator):
        result, _ = validator.validate("Sofa", "12,50", "2024-01-15", "home", 3)
        issue = next(i for i in result.issues if i.field == "total_value")
        assert issue.issue_type == "invalid_format"
        assert "12,50" in issue.message

    @pytest.mark.parametrize("total_value", ["0", "-10", 0.0])
    def test_total_must_be_positive(self, validator, total_value):
        result, _ = validator.validate("Sofa", total_value, "2024-01-15", "home", 3)
        assert "total_value" in fields_with(result)

    @pytest.mark.parametrize("count", ["2.5", "three", 1.5, True])
    def test_count_must_be_whole_number(self, validator, count):
        result, _ = validator.validate("Sofa", 300, "2024-01-15", "home", count)
        assert "installment_count" in fields_with(result)

    def test_count_must_be_at_least_one(self, validator):
        result, _ = validator.validate("Sofa", 300, "2024-01-15", "home", "0")
        issue = next(i for i in result.issues if i.field == "installment_count")
        assert issue.issue_type == "invalid_value"

    def test_malformed_date(self, validator):
        result, _ = validator.validate("Sofa", 300, "2024-13-01", "home", 3)
        assert fields_with(result) == {"due_date"}

    def test_sub_cent_installments_are_rejected(self, validator):
        result, draft = validator.validate("Pen", "0.01", "2024-01-15", "office", "3")
        assert draft is None
        assert not result.schema_valid
        assert any("too small" in issue.message for issue in result.issues)


class TestSemanticValidation:
    """Stage 2: sanity checks against settings."""

    def test_too_many_installments_is_error(self, validator):
        result, draft = validator.validate("House", 300, "2024-01-15", "home", 49)

        assert draft is None
        assert result.schema_valid
        assert not result.semantic_valid
        assert fields_with(result) == {"installment_count"}

    def test_high_total_is_only_a_warning(self, validator):
        result, draft = validator.validate("Car", 80000, "2024-01-15", "car", 48)

        assert result.is_valid
        assert draft is not None
        assert fields_with(result, "warning") == {"total_value"}

    def test_old_due_date_is_only_a_warning(self, validator):
        result, draft = validator.validate("Old", 100, "2022-01-01", "misc", 1)
        assert result.is_valid
        assert fields_with(result, "warning") == {"due_date"}


class TestSummary:
    """Tests for the user-facing summary."""

    def test_all_passed(self, validator):
        result, _ = validator.validate("Sofa", 300, "2024-01-15", "home", 3)
        assert validator.get_user_friendly_summary(result) == "✅ All checks passed!"

    def test_errors_are_listed_with_fixes(self, validator):
        result, _ = validator.validate("Sofa", "abc", "2024-01-15", "home", 3)
        summary = validator.get_user_friendly_summary(result)
        assert summary.startswith("❌ Please fix the following:")
        assert "💡" in summary

    def test_warnings_are_listed(self, validator):
        result, _ = validator.validate("Car", 80000, "2024-01-15", "car", 3)
        summary = validator.get_user_friendly_summary(result)
        assert summary.startswith("⚠️ Please verify the following:")
        assert "unusually high" in summary

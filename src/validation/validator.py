"""
Two-Stage Form Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Required field presence
- Parsing text into numbers and dates
- This catches typos and malformed input

STAGE 2 - SEMANTIC VALIDATION:
- Installment count limit
- Absurd amount detection
- First due date far in the past
- This catches logically suspicious data

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the user can correct the form.
The ledger re-checks the resulting draft on its own.
"""

import math
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from pydantic import ValidationError

from src.config import AppSettings, get_settings
from src.ledger.errors import InvalidInputError
from src.models.account import AccountDraft
from src.models.validation import ValidationIssue, ValidationResult


class AccountFormValidator:
    """
    Validates raw account form input through a two-stage pipeline.

    Raw values may be strings (as typed) or already-typed widgets output.
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        clock: Callable[[], date] = date.today,
    ):
        self._settings = settings or get_settings().app
        self._clock = clock

    @staticmethod
    def _parse_total_value(raw: Any, issues: list[ValidationIssue]) -> Optional[Decimal]:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            issues.append(ValidationIssue(
                field="total_value",
                issue_type="missing",
                message="Total value is required",
                severity="error",
            ))
            return None
        text = raw
        if isinstance(raw, bool):
            text = None
        elif isinstance(raw, float):
            text = repr(raw) if math.isfinite(raw) else None
        try:
            value = Decimal(str(text).strip()) if text is not None else None
        except InvalidOperation:
            value = None
        if value is None or not value.is_finite():
            issues.append(ValidationIssue(
                field="total_value",
                issue_type="invalid_format",
                message=f"Total value is not a number: {raw!r}",
                severity="error",
                suggested_fix="Use digits with a dot for cents, e.g. 1250.90",
            ))
            return None
        if value <= 0:
            issues.append(ValidationIssue(
                field="total_value",
                issue_type="invalid_value",
                message="Total value must be greater than zero",
                severity="error",
            ))
            return None
        return value

    @staticmethod
    def _parse_installment_count(raw: Any, issues: list[ValidationIssue]) -> Optional[int]:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            issues.append(ValidationIssue(
                field="installment_count",
                issue_type="missing",
                message="Number of installments is required",
                severity="error",
            ))
            return None
        count = None
        if isinstance(raw, int) and not isinstance(raw, bool):
            count = raw
        elif isinstance(raw, str) and raw.strip().isdigit():
            count = int(raw.strip())
        if count is None:
            issues.append(ValidationIssue(
                field="installment_count",
                issue_type="invalid_format",
                message=f"Number of installments must be a whole number: {raw!r}",
                severity="error",
            ))
            return None
        if count < 1:
            issues.append(ValidationIssue(
                field="installment_count",
                issue_type="invalid_value",
                message="Number of installments must be at least 1",
                severity="error",
            ))
            return None
        return count

    @staticmethod
    def _parse_due_date(raw: Any, issues: list[ValidationIssue]) -> Optional[date]:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            issues.append(ValidationIssue(
                field="due_date",
                issue_type="missing",
                message="First due date is required",
                severity="error",
            ))
            return None
        if isinstance(raw, date):
            return raw
        try:
            return date.fromisoformat(str(raw).strip())
        except ValueError:
            issues.append(ValidationIssue(
                field="due_date",
                issue_type="invalid_format",
                message=f"First due date is not a valid date: {raw!r}",
                severity="error",
                suggested_fix="Use the YYYY-MM-DD format",
            ))
            return None

    def _validate_schema(
        self,
        name: Any,
        total_value: Any,
        due_date: Any,
        tag: Any,
        installment_count: Any,
    ) -> tuple[Optional[AccountDraft], list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (draft or None, list_of_issues)
        """
        issues = []

        for field, value, label in (("name", name, "Name"), ("tag", tag, "Tag")):
            if not isinstance(value, str) or not value.strip():
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="missing",
                    message=f"{label} is required",
                    severity="error",
                ))

        parsed_total = self._parse_total_value(total_value, issues)
        parsed_count = self._parse_installment_count(installment_count, issues)
        parsed_date = self._parse_due_date(due_date, issues)

        if issues:
            return None, issues

        try:
            draft = AccountDraft(
                name=name,
                total_value=parsed_total,
                due_date=parsed_date,
                tag=tag,
                installment_count=parsed_count,
            )
        except ValidationError as e:
            return None, InvalidInputError.from_validation_error(e).issues

        return draft, issues

    def _validate_semantic(self, draft: AccountDraft) -> list[ValidationIssue]:
        """
        Stage 2: Semantic validation.

        Returns: list_of_issues
        """
        issues = []
        today = self._clock()

        if draft.installment_count > self._settings.max_installments:
            issues.append(ValidationIssue(
                field="installment_count",
                issue_type="out_of_range",
                message=(
                    f"At most {self._settings.max_installments} installments "
                    f"are supported (got {draft.installment_count})"
                ),
                severity="error",
            ))

        max_total = Decimal(str(self._settings.max_total_value))
        if draft.total_value > max_total:
            issues.append(ValidationIssue(
                field="total_value",
                issue_type="suspicious_value",
                message=f"Total value ({draft.total_value:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        oldest = today - timedelta(days=self._settings.past_due_tolerance_days)
        if draft.due_date < oldest:
            issues.append(ValidationIssue(
                field="due_date",
                issue_type="suspicious_date",
                message=f"First due date ({draft.due_date}) is unusually far in the past",
                severity="warning",
                suggested_fix="Please verify the year",
            ))

        return issues

    def validate(
        self,
        name: Any,
        total_value: Any,
        due_date: Any,
        tag: Any,
        installment_count: Any,
    ) -> tuple[ValidationResult, Optional[AccountDraft]]:
        """
        Run full two-stage validation pipeline.

        Returns:
            (result, draft) where draft is None unless result.is_valid
        """
        draft, all_issues = self._validate_schema(
            name, total_value, due_date, tag, installment_count
        )
        schema_valid = draft is not None

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if schema_valid:
            semantic_issues = self._validate_semantic(draft)
            all_issues.extend(semantic_issues)
            semantic_valid = not any(i.severity == "error" for i in semantic_issues)

        is_valid = schema_valid and semantic_valid
        result = ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=is_valid,
            issues=all_issues,
        )
        return result, draft if is_valid else None

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """Generate a summary of validation results for the form."""
        if result.is_valid and not result.warnings:
            return "✅ All checks passed!"

        lines = []

        if result.has_errors:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)

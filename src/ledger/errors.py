"""Exceptions raised by the ledger."""

from pydantic import ValidationError

from src.models.validation import ValidationIssue


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class InvalidInputError(LedgerError, ValueError):
    """
    Input rejected before any mutation.

    `issues` lists every field problem so the UI can show them all at once.
    """

    def __init__(self, message: str, issues: list[ValidationIssue] | None = None):
        super().__init__(message)
        self.issues = issues or []

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "InvalidInputError":
        issues = [
            ValidationIssue(
                field=".".join(str(part) for part in err["loc"]) or "input",
                issue_type=err["type"],
                message=err["msg"],
                severity="error",
            )
            for err in exc.errors()
        ]
        summary = "; ".join(f"{i.field}: {i.message}" for i in issues)
        return cls(f"Invalid account input: {summary}", issues)


class AccountNotFoundError(LedgerError, LookupError):
    """No account with the given id."""

    def __init__(self, account_id: str):
        super().__init__(f"Account not found: {account_id}")
        self.account_id = account_id


class ScheduleShrinkError(LedgerError):
    """An edit would discard paid installments and the policy forbids it."""

    def __init__(self, account_id: str, dropped_paid: list[int]):
        super().__init__(
            f"Editing account {account_id} would discard paid installments "
            f"{dropped_paid}"
        )
        self.account_id = account_id
        self.dropped_paid = dropped_paid

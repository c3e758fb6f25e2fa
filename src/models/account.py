"""
Core Data Models for the Installment Tracker

These models define the strict schemas for the account collection.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Serialize to the stored camelCase JSON layout

DESIGN DECISION: Amounts are Decimal quantized to two places.
Floats only appear at the JSON boundary, rounded at write time.
"""

import math
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


CENT = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """
    Convert a stored amount to a two-place Decimal.

    Floats go through their shortest repr so 33.33 stays 33.33.
    """
    if isinstance(value, bool):
        raise ValueError("Amount must be a number, not a boolean")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("Amount must be finite")
        value = repr(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValueError("Amount must be finite")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class InstallmentStatus(str, Enum):
    """
    Stored status of a single installment.

    CRITICAL: The only transition is a user-triggered toggle.
    Overdue is never stored, it is derived from the due date.
    """
    PENDING = "pending"
    PAID = "paid"

    def toggled(self) -> "InstallmentStatus":
        if self is InstallmentStatus.PAID:
            return InstallmentStatus.PENDING
        return InstallmentStatus.PAID


class AccountStatus(str, Enum):
    """Derived status of an account, recomputed on every query."""
    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"


class ScheduleShrinkPolicy(str, Enum):
    """
    What to do with paid installments when an edit lowers the count.

    REJECT refuses the edit, TRUNCATE drops the excess installments,
    RESET discards every paid flag of the account.
    """
    REJECT = "reject"
    TRUNCATE = "truncate"
    RESET = "reset"


# =============================================================================
# STORED MODELS
# =============================================================================

class _StoredModel(BaseModel):
    """Base for models persisted with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class Installment(_StoredModel):
    """
    One scheduled payment of an account.

    Immutable except for `status`.
    """

    number: int = Field(
        ...,
        ge=1,
        description="1-based position in the schedule"
    )
    value: Decimal = Field(
        ...,
        description="Installment amount"
    )
    due_date: date = Field(
        ...,
        description="When this installment is due"
    )
    status: InstallmentStatus = Field(
        default=InstallmentStatus.PENDING,
        description="Paid or pending"
    )

    @field_validator("value", mode="before")
    @classmethod
    def parse_value(cls, v: Any) -> Decimal:
        return to_money(v)

    @field_serializer("value", when_used="json")
    def serialize_value(self, v: Decimal) -> float:
        return float(v)

    @property
    def is_paid(self) -> bool:
        return self.status is InstallmentStatus.PAID

    def is_overdue(self, today: date) -> bool:
        """Pending and due strictly before `today`."""
        return not self.is_paid and self.due_date < today


class Account(_StoredModel):
    """
    A bill split into monthly installments.

    The installment schedule always numbers 1..n without gaps.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque identifier, stable for the account's lifetime"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name"
    )
    total_value: Decimal = Field(
        ...,
        gt=0,
        description="Total amount owed"
    )
    due_date: date = Field(
        ...,
        description="Due date of the first installment"
    )
    tag: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Free-text category label"
    )
    installments: list[Installment] = Field(
        ...,
        min_length=1,
        description="Ordered installment schedule"
    )
    created_at: date = Field(
        ...,
        description="Creation day (never changes)"
    )

    @field_validator("id", mode="before")
    @classmethod
    def parse_id(cls, v: Any) -> Any:
        # Older records used numeric timestamps as ids
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("total_value", mode="before")
    @classmethod
    def parse_total_value(cls, v: Any) -> Decimal:
        return to_money(v)

    @field_serializer("total_value", when_used="json")
    def serialize_total_value(self, v: Decimal) -> float:
        return float(v)

    @model_validator(mode="after")
    def validate_numbering(self) -> "Account":
        """Installment numbers must be exactly 1..n in order."""
        numbers = [inst.number for inst in self.installments]
        if numbers != list(range(1, len(numbers) + 1)):
            raise ValueError(
                f"Installment numbers must run 1..{len(numbers)} without gaps"
            )
        return self

    @property
    def installment_count(self) -> int:
        return len(self.installments)

    @property
    def paid_amount(self) -> Decimal:
        return sum(
            (inst.value for inst in self.installments if inst.is_paid),
            Decimal("0.00"),
        )

    @property
    def pending_amount(self) -> Decimal:
        return sum(
            (inst.value for inst in self.installments if not inst.is_paid),
            Decimal("0.00"),
        )

    def overdue_amount(self, today: date) -> Decimal:
        return sum(
            (inst.value for inst in self.installments if inst.is_overdue(today)),
            Decimal("0.00"),
        )

    def find_installment(self, number: int) -> Optional[Installment]:
        for inst in self.installments:
            if inst.number == number:
                return inst
        return None


# =============================================================================
# INPUT MODEL
# =============================================================================

class AccountDraft(BaseModel):
    """
    Already-parsed input for creating or editing an account.

    CRITICAL: Nothing is coerced. Strings are not numbers,
    booleans are not counts, datetimes are not dates.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    total_value: Decimal
    due_date: date
    tag: str = Field(..., min_length=1, max_length=100)
    installment_count: StrictInt = Field(..., ge=1)

    @field_validator("total_value", mode="before")
    @classmethod
    def validate_total_value(cls, v: Any) -> Decimal:
        if isinstance(v, bool) or not isinstance(v, (int, float, Decimal)):
            raise ValueError("Total value must be a number")
        amount = to_money(v)
        if amount <= 0:
            raise ValueError("Total value must be greater than zero")
        return amount

    @field_validator("due_date", mode="before")
    @classmethod
    def validate_due_date(cls, v: Any) -> date:
        if isinstance(v, datetime):
            raise ValueError("Due date must be a calendar date, not a timestamp")
        if isinstance(v, date):
            return v
        if isinstance(v, str):
            try:
                return date.fromisoformat(v.strip())
            except ValueError:
                raise ValueError(f"Due date must be YYYY-MM-DD, got {v!r}")
        raise ValueError("Due date must be a date")

    @model_validator(mode="after")
    def validate_installment_value(self) -> "AccountDraft":
        """Each installment must be worth at least one cent."""
        per_installment = (self.total_value / self.installment_count).quantize(
            CENT, rounding=ROUND_HALF_UP
        )
        if per_installment < CENT:
            raise ValueError(
                "Total value is too small for that many installments"
            )
        return self

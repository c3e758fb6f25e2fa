"""
JSON codec for the account collection.

Layout (camelCase keys, ISO dates, amounts as 2-decimal floats):

    [{"id": "...", "name": "...", "totalValue": 300.0,
      "dueDate": "2024-01-15", "tag": "home", "createdAt": "2024-01-02",
      "installments": [{"number": 1, "value": 100.0,
                        "dueDate": "2024-01-15", "status": "pending"}]}]

Records written before `createdAt` existed are given `today` when read.
That migration is not written back until the next mutation.
"""

import json
from datetime import date
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from src.models.account import Account
from src.services.storage.interface import CorruptDataError


ACCOUNT_LIST = TypeAdapter(list[Account])

LEGACY_CREATED_AT_KEYS = ("createdAt", "created_at")


def dump_accounts(accounts: list[Account]) -> str:
    return ACCOUNT_LIST.dump_json(accounts, by_alias=True).decode("utf-8")


def load_accounts(payload: Optional[str], today: date) -> tuple[list[Account], int]:
    """
    Parse a stored payload.

    Returns (accounts, migrated) where `migrated` counts records that
    were missing a creation date.

    Raises:
        CorruptDataError: payload is not a JSON array of valid accounts
    """
    if payload is None or not payload.strip():
        return [], 0

    try:
        records = json.loads(payload)
    except json.JSONDecodeError as e:
        raise CorruptDataError(f"Stored accounts are not valid JSON: {e}")
    if not isinstance(records, list):
        raise CorruptDataError("Stored accounts must be a JSON array")

    migrated = 0
    for record in records:
        if isinstance(record, dict) and not any(
            record.get(key) for key in LEGACY_CREATED_AT_KEYS
        ):
            record["createdAt"] = today.isoformat()
            migrated += 1

    try:
        accounts = ACCOUNT_LIST.validate_python(records)
    except ValidationError as e:
        raise CorruptDataError(f"Stored accounts failed validation: {e}")

    seen = set()
    for account in accounts:
        if account.id in seen:
            raise CorruptDataError(f"Duplicate account id in store: {account.id}")
        seen.add(account.id)

    return accounts, migrated

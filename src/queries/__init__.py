"""Query package."""

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
from src.queries.service import LedgerQueryService

__all__ = [
    "LedgerQueryService",
    "accounts_created_in",
    "available_years",
    "category_totals",
    "compute_period_stats",
    "derive_status",
    "filter_by_tag_substring",
    "group_by_tag",
    "monthly_series",
    "sorted_tags",
    "summarize_account",
]

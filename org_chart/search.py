"""
Org Chart — Employee Search

Type-ahead lookup over records. Case-insensitive substring match; the
first matching field wins, checked in the order name, email, job title,
org unit.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .constants import SEARCH_MAX_RESULTS, SEARCH_MIN_QUERY_LENGTH
from .domain_types import EmployeeRecord, SearchResult

_SEARCH_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("full_name", "name"),
    ("email", "email"),
    ("job_title", "title"),
    ("organization_unit", "org"),
)


def search_users(
    records: Sequence[EmployeeRecord],
    query: str,
    limit: int = SEARCH_MAX_RESULTS,
) -> List[SearchResult]:
    """Up to *limit* matches in record order. Short or blank queries match nothing."""
    if not query.strip() or len(query) < SEARCH_MIN_QUERY_LENGTH:
        return []

    needle = query.lower()
    results: List[SearchResult] = []
    for record in records:
        for attr, match_type in _SEARCH_FIELDS:
            value = getattr(record, attr)
            if value and needle in value.lower():
                results.append(
                    SearchResult(user=record, match_type=match_type, match_text=value)
                )
                break
        if len(results) >= limit:
            break
    return results

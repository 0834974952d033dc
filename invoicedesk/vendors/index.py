"""Vendor names derived from the record list.

Nothing here is stored: every function projects over the records it is
given, so callers recompute after each cache refresh. Names are compared as
exact strings; "Enel Energia" and "enel energia " are two vendors.
"""

from collections.abc import Iterable

from invoicedesk.records.models import UNKNOWN_VENDOR, DocumentRecord

DEFAULT_SUGGESTION_LIMIT = 10
DEFAULT_HINT_LIMIT = 5


def distinct_vendors(
    records: Iterable[DocumentRecord],
    verified_only: bool = True,
) -> list[str]:
    """Sorted distinct vendor names, never including the unknown-vendor sentinel."""
    names = {
        record.vendor
        for record in records
        if record.vendor != UNKNOWN_VENDOR and (record.is_verified or not verified_only)
    }
    return sorted(names)


def suggest_vendors(
    records: Iterable[DocumentRecord],
    query: str,
    limit: int | None = DEFAULT_SUGGESTION_LIMIT,
) -> list[str]:
    """Verified vendor names containing ``query``, case-insensitively."""
    needle = query.lower()
    matches = [name for name in distinct_vendors(records) if needle in name.lower()]
    if limit is not None:
        return matches[:limit]
    return matches


def hint_records(
    records: Iterable[DocumentRecord],
    limit: int = DEFAULT_HINT_LIMIT,
) -> list[DocumentRecord]:
    """Most recent verified records, used as extraction examples."""
    verified = [
        record
        for record in records
        if record.is_verified and record.vendor != UNKNOWN_VENDOR
    ]
    verified.sort(key=lambda r: r.created_at, reverse=True)
    return verified[: max(limit, 0)]

from collections.abc import Iterable
from datetime import date

from invoicedesk.records.models import DocumentRecord


def recent_records(records: Iterable[DocumentRecord], limit: int = 5) -> list[DocumentRecord]:
    """Most recently uploaded records first."""
    return sorted(records, key=lambda r: r.created_at, reverse=True)[:limit]


def total_this_month(records: Iterable[DocumentRecord], today: date | None = None) -> float:
    """Sum of amounts for invoices dated in the current calendar month."""
    day = today if today is not None else date.today()
    prefix = f"{day.year:04d}-{day.month:02d}"
    return sum(r.amount for r in records if r.date.startswith(prefix))


def draft_count(records: Iterable[DocumentRecord]) -> int:
    return sum(1 for r in records if r.is_draft)

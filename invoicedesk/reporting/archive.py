"""Search and ordering for the invoice archive table."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from invoicedesk.records.models import DocumentRecord

SortOrder = Literal["asc", "desc"]

SORTABLE_FIELDS = frozenset(
    {"date", "vendor", "invoice_number", "amount", "currency", "created_at", "status"}
)


@dataclass(frozen=True)
class SortState:
    field: str = "date"
    order: SortOrder = "desc"

    def toggle(self, field: str) -> "SortState":
        """Clicking the active column flips the order; a new column starts descending."""
        if field not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort by '{field}'")
        if field == self.field:
            return SortState(field, "asc" if self.order == "desc" else "desc")
        return SortState(field, "desc")


def search_records(records: Iterable[DocumentRecord], term: str) -> list[DocumentRecord]:
    """Records whose vendor or invoice number contains ``term``, ignoring case."""
    needle = term.lower()
    return [
        r
        for r in records
        if needle in r.vendor.lower() or needle in r.invoice_number.lower()
    ]


def sort_records(
    records: Iterable[DocumentRecord],
    sort: SortState = SortState(),
) -> list[DocumentRecord]:
    if sort.field not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by '{sort.field}'")

    def key(record: DocumentRecord) -> object:
        value = getattr(record, sort.field)
        return value.lower() if isinstance(value, str) else value

    return sorted(records, key=key, reverse=sort.order == "desc")


def archive_view(
    records: Iterable[DocumentRecord],
    term: str = "",
    sort: SortState = SortState(),
) -> list[DocumentRecord]:
    return sort_records(search_records(records, term), sort)

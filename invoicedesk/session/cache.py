from collections.abc import Iterable

from invoicedesk.records.models import DocumentRecord


class RecordCache:
    """In-memory copy of the invoices table as last fetched from the store.

    The only mutation is ``replace_all``; the store stays the source of truth.
    """

    def __init__(self) -> None:
        self._records: tuple[DocumentRecord, ...] = ()
        self._loaded = False

    @property
    def records(self) -> tuple[DocumentRecord, ...]:
        return self._records

    @property
    def loaded(self) -> bool:
        return self._loaded

    def replace_all(self, records: Iterable[DocumentRecord]) -> bool:
        """Swap in a full re-fetch. Returns True when the contents changed."""
        fresh = tuple(records)
        changed = fresh != self._records
        self._records = fresh
        self._loaded = True
        return changed

    def find(self, record_id: str) -> DocumentRecord | None:
        return next((r for r in self._records if r.id == record_id), None)

    def __len__(self) -> int:
        return len(self._records)

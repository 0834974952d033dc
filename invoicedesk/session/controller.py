from collections.abc import Callable, Iterable, Sequence
from dataclasses import asdict
from typing import Any

from invoicedesk.auth.client import SupabaseAuthClient
from invoicedesk.auth.exceptions import AuthError
from invoicedesk.config.settings import Settings
from invoicedesk.database.exceptions import PersistenceError, RecordNotFoundError
from invoicedesk.database.realtime import ChangeEvent
from invoicedesk.database.repositories.invoice_repository import InvoiceRepository
from invoicedesk.extraction.base import BaseExtractor
from invoicedesk.ingestion.models import RawFile
from invoicedesk.ingestion.queue import IngestionQueue, ProgressCallback
from invoicedesk.logging.logger import Log
from invoicedesk.records.models import DocumentRecord, EditableFields, RecordStatus
from invoicedesk.session.cache import RecordCache
from invoicedesk.vendors.index import hint_records

RecordsListener = Callable[[Sequence[DocumentRecord]], None]


class SessionController:
    """Owns the record cache of one user session and every write to the store.

    Writes never touch the cache directly: after each successful write the
    full list is fetched again, as it is after every change notification.
    """

    def __init__(
        self,
        repository: InvoiceRepository,
        extractor: BaseExtractor,
        settings: Settings,
        auth: SupabaseAuthClient | None = None,
    ) -> None:
        self._repository = repository
        self._extractor = extractor
        self._settings = settings
        self._auth = auth
        self._cache = RecordCache()
        self._listeners: list[RecordsListener] = []

    @property
    def records(self) -> tuple[DocumentRecord, ...]:
        return self._cache.records

    def add_listener(self, listener: RecordsListener) -> None:
        self._listeners.append(listener)

    def refresh(self) -> tuple[DocumentRecord, ...]:
        """Replace the cache with the store's current contents."""
        fetched = self._repository.select_all()
        if self._cache.replace_all(fetched):
            Log.info(f"Loaded {len(fetched)} invoice(s)")
            for listener in list(self._listeners):
                listener(self._cache.records)
        return self._cache.records

    def handle_change(self, event: ChangeEvent) -> None:
        Log.info(f"Store changed ({event.type} {event.record_id or ''}), refreshing")
        self.refresh()

    def hint_records(self) -> list[DocumentRecord]:
        return hint_records(self.records, self._settings.extraction_max_hint_records)

    def new_upload(self, on_progress: ProgressCallback | None = None) -> IngestionQueue:
        return IngestionQueue(self._extractor, self._settings, on_progress=on_progress)

    def ingest(
        self,
        files: Iterable[RawFile],
        on_progress: ProgressCallback | None = None,
    ) -> IngestionQueue:
        """Run one upload session end to end and store its drafts."""
        queue = self.new_upload(on_progress)
        queue.enqueue(files)
        records = queue.process_all(self.hint_records())
        self.save_batch(records)
        return queue

    def save_batch(self, records: Sequence[DocumentRecord]) -> None:
        if not records:
            return
        self._write(
            f"save {len(records)} invoice(s)",
            self._repository.insert,
            records,
            self._owner_id(),
        )
        Log.info(f"Saved {len(records)} draft invoice(s)")
        self.refresh()

    def update_record(
        self,
        record_id: str,
        fields: EditableFields | None = None,
        status: RecordStatus | None = None,
    ) -> DocumentRecord:
        """Write field and/or status changes and return the stored record."""
        changes: dict[str, Any] = asdict(fields) if fields is not None else {}
        if status is not None:
            changes["status"] = status
        self._write(f"update invoice {record_id}", self._repository.update, record_id, changes)
        self.refresh()
        stored = self._cache.find(record_id)
        if stored is None:
            raise RecordNotFoundError(f"Invoice {record_id} not found after update")
        return stored

    def delete_record(self, record_id: str) -> None:
        self._write(f"delete invoice {record_id}", self._repository.delete, record_id)
        Log.info(f"Deleted invoice {record_id}")
        self.refresh()

    def _owner_id(self) -> str | None:
        if not self._settings.multi_tenant:
            return None
        session = self._auth.get_current_session() if self._auth is not None else None
        if session is None:
            raise AuthError("Sign in to save invoices")
        return session.user_id

    @staticmethod
    def _write(action: str, operation: Callable[..., None], *args: Any) -> None:
        try:
            operation(*args)
        except PersistenceError as exc:
            Log.error(f"Could not {action}: {exc}")
            raise

"""Batch upload queue.

Files are processed one at a time, in submission order. Every accepted file
yields a draft record unless the extraction call itself fails:

    pending -> processing -> completed   extracted fields
                          -> partial     placeholder draft
                          -> error       no record, message kept
"""

from collections import Counter
from collections.abc import Callable, Iterable, Sequence

from invoicedesk.config.settings import Settings
from invoicedesk.extraction.base import BaseExtractor
from invoicedesk.ingestion.exceptions import FileTooLargeError, UnsupportedFileTypeError
from invoicedesk.ingestion.models import (
    COMPLETED,
    ERROR,
    PARTIAL,
    PROCESSING,
    BatchSummary,
    QueueItem,
    QueueStatus,
    RawFile,
    RejectedFile,
)
from invoicedesk.logging.logger import Log
from invoicedesk.records.models import DocumentRecord, draft_from_extraction, placeholder_draft

ProgressCallback = Callable[[QueueItem], None]


class IngestionQueue:
    """Owns the queue items of one upload session."""

    def __init__(
        self,
        extractor: BaseExtractor,
        settings: Settings,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._extractor = extractor
        self._max_upload_bytes = settings.max_upload_bytes
        self._default_currency = settings.default_currency
        self._on_progress = on_progress
        self._items: list[QueueItem] = []
        self._rejected: list[RejectedFile] = []

    @property
    def items(self) -> tuple[QueueItem, ...]:
        return tuple(self._items)

    @property
    def rejected(self) -> tuple[RejectedFile, ...]:
        return tuple(self._rejected)

    def enqueue(self, files: Iterable[RawFile]) -> None:
        """Append PDF files to the queue. Other file types are dropped."""
        for raw in files:
            try:
                self._check_upload(raw)
            except UnsupportedFileTypeError as exc:
                Log.debug(f"Skipping {raw.file_name}: {exc}")
                continue
            except FileTooLargeError as exc:
                Log.warning(f"Rejected {raw.file_name}: {exc}")
                self._rejected.append(RejectedFile(file_name=raw.file_name, reason=str(exc)))
                continue
            self._items.append(QueueItem(file=raw))
        Log.info(f"Upload queue holds {len(self._items)} file(s)")

    def _check_upload(self, raw: RawFile) -> None:
        if not raw.is_pdf:
            raise UnsupportedFileTypeError(f"content type {raw.content_type!r} is not a PDF")
        if raw.size > self._max_upload_bytes:
            raise FileTooLargeError(
                f"File exceeds the {self._max_upload_bytes // (1024 * 1024)} MB limit"
            )

    def process_all(
        self,
        hint_records: Sequence[DocumentRecord] = (),
    ) -> list[DocumentRecord]:
        """Drain the queue and return the draft records produced by this call.

        Items finished by an earlier call are skipped and their records are
        not returned again.
        """
        produced: list[DocumentRecord] = []
        for item in self._items:
            if item.is_done:
                continue
            self._process_item(item, hint_records)
            if item.record is not None:
                produced.append(item.record)

        summary = self.summary()
        Log.info(
            f"Batch finished: {summary.completed} completed, "
            f"{summary.partial} partial, {summary.error} error"
        )
        return produced

    def summary(self) -> BatchSummary:
        counts = Counter(item.status for item in self._items)
        return BatchSummary(**{status: counts[status] for status in counts})

    def reset(self) -> None:
        """Discard the session; results not yet handed off are dropped."""
        self._items.clear()
        self._rejected.clear()

    def _process_item(self, item: QueueItem, hint_records: Sequence[DocumentRecord]) -> None:
        name = item.file.file_name
        self._set_status(item, PROCESSING)
        Log.info(f"Extracting {name}")
        try:
            result = self._extractor.extract(item.file.content, hint_records)
        except Exception as exc:
            item.error_message = str(exc) or exc.__class__.__name__
            Log.error(f"Extraction failed for {name}: {item.error_message}")
            self._set_status(item, ERROR)
            return

        if result is None:
            item.record = placeholder_draft(
                document_bytes=item.file.content,
                file_name=name,
                currency=self._default_currency,
            )
            Log.warning(f"No data extracted from {name}, created placeholder draft")
            self._set_status(item, PARTIAL)
            return

        item.result = result
        item.record = draft_from_extraction(
            result,
            document_bytes=item.file.content,
            file_name=name,
        )
        self._set_status(item, COMPLETED)

    def _set_status(self, item: QueueItem, status: QueueStatus) -> None:
        item.status = status
        if self._on_progress is not None:
            self._on_progress(item)

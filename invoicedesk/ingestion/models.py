from dataclasses import dataclass, field
from typing import Literal

from invoicedesk.records.models import DocumentRecord, ExtractionResult

PDF_CONTENT_TYPE = "application/pdf"

QueueStatus = Literal["pending", "processing", "completed", "partial", "error"]

PENDING: QueueStatus = "pending"
PROCESSING: QueueStatus = "processing"
COMPLETED: QueueStatus = "completed"
PARTIAL: QueueStatus = "partial"
ERROR: QueueStatus = "error"

TERMINAL_STATUSES: frozenset[str] = frozenset({COMPLETED, PARTIAL, ERROR})


@dataclass(frozen=True)
class RawFile:
    """An uploaded file as received from the user."""

    file_name: str
    content_type: str
    content: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def is_pdf(self) -> bool:
        return self.content_type.strip().lower() == PDF_CONTENT_TYPE


@dataclass
class QueueItem:
    """One file of a batch upload and its processing outcome."""

    file: RawFile
    status: QueueStatus = PENDING
    error_message: str | None = None
    result: ExtractionResult | None = None
    record: DocumentRecord | None = None

    @property
    def is_done(self) -> bool:
        return self.status in TERMINAL_STATUSES


@dataclass(frozen=True)
class RejectedFile:
    """A file refused at enqueue time, with the reason shown to the user."""

    file_name: str
    reason: str


@dataclass(frozen=True)
class BatchSummary:
    pending: int = 0
    processing: int = 0
    completed: int = 0
    partial: int = 0
    error: int = 0

    @property
    def total(self) -> int:
        return self.pending + self.processing + self.completed + self.partial + self.error

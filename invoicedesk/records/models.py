import base64
import time
import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Literal

RecordStatus = Literal["draft", "verified"]

DRAFT: RecordStatus = "draft"
VERIFIED: RecordStatus = "verified"

UNKNOWN_VENDOR = "FORNITORE SCONOSCIUTO"
MISSING_INVOICE_NUMBER = "DA COMPILARE"

PLACEHOLDERS = frozenset({UNKNOWN_VENDOR, MISSING_INVOICE_NUMBER})


def new_record_id() -> str:
    return str(uuid.uuid4())


def now_millis() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ExtractionResult:
    """Fields read from a document by the extraction gateway."""

    invoice_number: str
    vendor: str
    date: str
    amount: float
    currency: str


@dataclass(frozen=True)
class EditableFields:
    """The five user-editable fields of a record."""

    invoice_number: str = ""
    vendor: str = ""
    date: str = ""
    amount: float = 0.0
    currency: str = ""


@dataclass(frozen=True)
class DocumentRecord:
    """An invoice as stored in the invoices table."""

    id: str
    invoice_number: str
    vendor: str
    date: str
    amount: float
    currency: str
    document_bytes: bytes = field(repr=False)
    original_file_name: str
    created_at: int
    status: RecordStatus = DRAFT
    user_id: str | None = None

    @property
    def is_draft(self) -> bool:
        return self.status == DRAFT

    @property
    def is_verified(self) -> bool:
        return self.status == VERIFIED

    @property
    def has_unknown_vendor(self) -> bool:
        return self.vendor == UNKNOWN_VENDOR

    def editable_fields(self) -> EditableFields:
        return EditableFields(
            invoice_number=self.invoice_number,
            vendor=self.vendor,
            date=self.date,
            amount=self.amount,
            currency=self.currency,
        )

    def with_fields(self, fields: EditableFields, status: RecordStatus) -> "DocumentRecord":
        return replace(
            self,
            invoice_number=fields.invoice_number,
            vendor=fields.vendor,
            date=fields.date,
            amount=fields.amount,
            currency=fields.currency,
            status=status,
        )

    def data_url(self) -> str:
        """Inline payload for embedding the original PDF in a viewer."""
        encoded = base64.b64encode(self.document_bytes).decode("ascii")
        return f"data:application/pdf;base64,{encoded}"


def draft_from_extraction(
    result: ExtractionResult,
    *,
    document_bytes: bytes,
    file_name: str,
) -> DocumentRecord:
    """Build a draft record from a successful extraction."""
    return DocumentRecord(
        id=new_record_id(),
        invoice_number=result.invoice_number,
        vendor=result.vendor,
        date=result.date,
        amount=result.amount,
        currency=result.currency,
        document_bytes=document_bytes,
        original_file_name=file_name,
        created_at=now_millis(),
        status=DRAFT,
    )


def placeholder_draft(
    *,
    document_bytes: bytes,
    file_name: str,
    currency: str,
    today: date | None = None,
) -> DocumentRecord:
    """Build a draft for a document the extractor could not read.

    Vendor and invoice number carry the placeholder sentinels so the record
    shows up as "to be completed" during review.
    """
    day = today if today is not None else date.today()
    return DocumentRecord(
        id=new_record_id(),
        invoice_number=MISSING_INVOICE_NUMBER,
        vendor=UNKNOWN_VENDOR,
        date=day.isoformat(),
        amount=0.0,
        currency=currency,
        document_bytes=document_bytes,
        original_file_name=file_name,
        created_at=now_millis(),
        status=DRAFT,
    )

from dataclasses import dataclass

from invoicedesk.records.models import DocumentRecord, EditableFields


@dataclass(frozen=True)
class NoSelection:
    """No record is open."""


@dataclass(frozen=True)
class Viewing:
    record: DocumentRecord


@dataclass(frozen=True)
class Editing:
    record: DocumentRecord
    form: EditableFields


ReviewState = NoSelection | Viewing | Editing

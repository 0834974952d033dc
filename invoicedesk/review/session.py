"""Review workflow for a single record at a time.

    NoSelection --select--> Viewing --start_review--> Editing
    Editing --confirm--> Viewing (status verified)
    Editing --cancel_edit--> Viewing (unchanged)
    Viewing --quick_approve--> Viewing (status verified)

Saving always writes ``verified``; there is no way back to ``draft``.
"""

import math
from collections.abc import Sequence
from dataclasses import replace

from invoicedesk.logging.logger import Log
from invoicedesk.records.models import (
    PLACEHOLDERS,
    VERIFIED,
    DocumentRecord,
    EditableFields,
)
from invoicedesk.review.exceptions import (
    InvalidTransitionError,
    QuickApproveUnavailableError,
    ReviewValidationError,
)
from invoicedesk.review.models import Editing, NoSelection, ReviewState, Viewing
from invoicedesk.review.validation import validate_fields
from invoicedesk.session.controller import SessionController
from invoicedesk.vendors.index import suggest_vendors


def next_draft(
    current: DocumentRecord | None,
    records: Sequence[DocumentRecord],
) -> DocumentRecord | None:
    """First draft in list order that is not ``current``."""
    current_id = current.id if current is not None else None
    for record in records:
        if record.is_draft and record.id != current_id:
            return record
    return None


def review_form(record: DocumentRecord) -> EditableFields:
    """Edit form for ``record``, with placeholder sentinels shown as blanks."""
    fields = record.editable_fields()
    return replace(
        fields,
        invoice_number="" if fields.invoice_number in PLACEHOLDERS else fields.invoice_number,
        vendor="" if fields.vendor in PLACEHOLDERS else fields.vendor,
    )


def _parse_amount(text: str) -> float | str:
    """Parse typed amount text (comma or dot decimals); unparseable text is kept as is."""
    try:
        value = float(text.strip().replace(",", "."))
    except ValueError:
        return text
    return value if math.isfinite(value) else text


class ReviewSession:
    """Tracks the record under review and applies review transitions."""

    def __init__(self, controller: SessionController) -> None:
        self._controller = controller
        self._state: ReviewState = NoSelection()
        controller.add_listener(self.on_records_changed)

    @property
    def state(self) -> ReviewState:
        return self._state

    @property
    def selected(self) -> DocumentRecord | None:
        if isinstance(self._state, (Viewing, Editing)):
            return self._state.record
        return None

    @property
    def can_quick_approve(self) -> bool:
        record = self.selected
        return (
            isinstance(self._state, Viewing)
            and record is not None
            and record.is_draft
            and not record.has_unknown_vendor
        )

    def select(self, record: DocumentRecord | None) -> ReviewState:
        self._state = Viewing(record) if record is not None else NoSelection()
        return self._state

    def start_review(self) -> EditableFields:
        record = self._require_selection()
        form = review_form(record)
        self._state = Editing(record, form)
        Log.debug(f"Editing record {record.id}")
        return form

    def edit(self, **changes: object) -> EditableFields:
        """Update in-progress form values, e.g. on every keystroke."""
        state = self._require_editing()
        if isinstance(changes.get("amount"), str):
            changes["amount"] = _parse_amount(changes["amount"])
        form = replace(state.form, **changes)
        self._state = Editing(state.record, form)
        return form

    def confirm(self, edited: EditableFields | None = None) -> DocumentRecord:
        """Save the edit form and mark the record verified.

        Raises:
            ReviewValidationError: if the fields are incomplete; nothing is written.
            PersistenceError: if the store rejects the update.
        """
        state = self._require_editing()
        fields = edited if edited is not None else state.form
        errors = validate_fields(fields)
        if errors:
            Log.warning(f"Record {state.record.id} not saved: {'; '.join(errors)}")
            raise ReviewValidationError(errors)

        saved = self._controller.update_record(state.record.id, fields=fields, status=VERIFIED)
        Log.info(f"Record {saved.id} confirmed as verified")
        self._state = Viewing(saved)
        return saved

    def quick_approve(self) -> DocumentRecord:
        """Mark the selected draft verified without touching its fields."""
        record = self._require_selection()
        if not isinstance(self._state, Viewing):
            raise InvalidTransitionError("Finish or cancel the edit before approving")
        if not record.is_draft:
            raise QuickApproveUnavailableError(f"Record {record.id} is already verified")
        if record.has_unknown_vendor:
            raise QuickApproveUnavailableError(
                f"Record {record.id} has no vendor yet, open the full review"
            )

        saved = self._controller.update_record(record.id, status=VERIFIED)
        Log.info(f"Record {saved.id} approved")
        self._state = Viewing(saved)
        return saved

    def cancel_edit(self) -> ReviewState:
        state = self._require_editing()
        self._state = Viewing(state.record)
        return self._state

    def advance(self) -> DocumentRecord | None:
        """Open the next draft waiting for review, if any."""
        upcoming = next_draft(self.selected, self._controller.records)
        self.select(upcoming)
        return upcoming

    def delete(self) -> DocumentRecord | None:
        """Delete the selected record and move on to the next draft."""
        record = self._require_selection()
        self._controller.delete_record(record.id)
        self.on_record_deleted(record.id)
        return self.selected

    def on_record_deleted(self, record_id: str) -> None:
        current = self.selected
        if current is None or current.id != record_id:
            return
        remaining = [r for r in self._controller.records if r.id != record_id]
        self.select(next_draft(current, remaining))

    def on_records_changed(self, records: Sequence[DocumentRecord]) -> None:
        """Keep the selection in step with a refreshed record list."""
        current = self.selected
        if current is None:
            return
        fresh = next((r for r in records if r.id == current.id), None)
        if fresh is None:
            Log.info(f"Record {current.id} was removed, moving to the next draft")
            self.select(next_draft(current, records))
        elif isinstance(self._state, Editing):
            self._state = Editing(fresh, self._state.form)
        else:
            self._state = Viewing(fresh)

    def vendor_suggestions(self, query: str | None = None) -> list[str]:
        if query is None:
            query = self._state.form.vendor if isinstance(self._state, Editing) else ""
        return suggest_vendors(self._controller.records, query)

    def _require_selection(self) -> DocumentRecord:
        record = self.selected
        if record is None:
            raise InvalidTransitionError("No record selected")
        return record

    def _require_editing(self) -> Editing:
        if not isinstance(self._state, Editing):
            raise InvalidTransitionError("Record is not being edited")
        return self._state

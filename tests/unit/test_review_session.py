"""Tests for the record review workflow."""

from dataclasses import replace
from typing import Any
from unittest.mock import MagicMock

import pytest

from invoicedesk.database.exceptions import PersistenceError, RecordNotFoundError
from invoicedesk.records.models import (
    DRAFT,
    MISSING_INVOICE_NUMBER,
    UNKNOWN_VENDOR,
    VERIFIED,
    DocumentRecord,
    EditableFields,
)
from invoicedesk.review.exceptions import (
    InvalidTransitionError,
    QuickApproveUnavailableError,
    ReviewValidationError,
)
from invoicedesk.review.models import Editing, NoSelection, Viewing
from invoicedesk.review.session import ReviewSession, next_draft, review_form
from invoicedesk.session.controller import SessionController


def _make_record(
    record_id: str,
    vendor: str = "Acme Srl",
    status: str = DRAFT,
    **overrides: Any,
) -> DocumentRecord:
    values: dict[str, Any] = {
        "id": record_id,
        "invoice_number": f"FT-{record_id}",
        "vendor": vendor,
        "date": "2024-03-15",
        "amount": 100.0,
        "currency": "EUR",
        "document_bytes": b"%PDF",
        "original_file_name": f"{record_id}.pdf",
        "created_at": 1,
        "status": status,
    }
    values.update(overrides)
    return DocumentRecord(**values)


class _InMemoryRepository:
    """Stands in for InvoiceRepository, keeping rows in a list."""

    def __init__(self, records: list[DocumentRecord]) -> None:
        self.rows = list(records)
        self.updates: list[tuple[str, dict[str, Any]]] = []
        self.fail_writes = False

    def select_all(self) -> list[DocumentRecord]:
        return list(self.rows)

    def insert(self, records: list[DocumentRecord], owner_id: str | None = None) -> None:
        self.rows.extend(records)

    def update(self, record_id: str, changes: dict[str, Any]) -> None:
        if self.fail_writes:
            raise PersistenceError("Could not update invoice")
        self.updates.append((record_id, dict(changes)))
        for index, row in enumerate(self.rows):
            if row.id == record_id:
                self.rows[index] = replace(row, **changes)
                return
        raise RecordNotFoundError(f"Invoice {record_id} not found")

    def delete(self, record_id: str) -> None:
        self.rows = [row for row in self.rows if row.id != record_id]


def _make_session(
    records: list[DocumentRecord],
) -> tuple[ReviewSession, SessionController, _InMemoryRepository]:
    repository = _InMemoryRepository(records)
    settings = MagicMock(multi_tenant=False, extraction_max_hint_records=5)
    controller = SessionController(repository, MagicMock(), settings)  # type: ignore[arg-type]
    session = ReviewSession(controller)
    controller.refresh()
    return session, controller, repository


class TestNextDraft:
    def test_returns_first_draft(self) -> None:
        records = [_make_record("1", status=VERIFIED), _make_record("2"), _make_record("3")]
        assert next_draft(None, records) == records[1]

    def test_skips_current(self) -> None:
        records = [_make_record("1"), _make_record("2")]
        assert next_draft(records[0], records) == records[1]

    def test_none_when_no_other_draft(self) -> None:
        records = [_make_record("1"), _make_record("2", status=VERIFIED)]
        assert next_draft(records[0], records) is None


class TestReviewForm:
    def test_blanks_placeholders(self) -> None:
        record = _make_record("1", vendor=UNKNOWN_VENDOR, invoice_number=MISSING_INVOICE_NUMBER)
        form = review_form(record)
        assert form.vendor == ""
        assert form.invoice_number == ""
        assert form.date == record.date

    def test_keeps_real_values(self) -> None:
        form = review_form(_make_record("1"))
        assert form.vendor == "Acme Srl"
        assert form.invoice_number == "FT-1"


class TestSelection:
    def test_starts_with_no_selection(self) -> None:
        session, _controller, _repo = _make_session([_make_record("1")])
        assert session.state == NoSelection()
        assert session.selected is None

    def test_select_opens_record(self) -> None:
        record = _make_record("1")
        session, _controller, _repo = _make_session([record])
        assert session.select(record) == Viewing(record)

    def test_select_none_clears(self) -> None:
        record = _make_record("1")
        session, _controller, _repo = _make_session([record])
        session.select(record)
        assert session.select(None) == NoSelection()

    def test_start_review_requires_selection(self) -> None:
        session, _controller, _repo = _make_session([])
        with pytest.raises(InvalidTransitionError, match="No record selected"):
            session.start_review()


class TestEditing:
    def test_start_review_enters_editing(self) -> None:
        record = _make_record("1")
        session, _controller, _repo = _make_session([record])
        session.select(record)
        form = session.start_review()
        assert isinstance(session.state, Editing)
        assert form == record.editable_fields()

    def test_edit_updates_form(self) -> None:
        record = _make_record("1")
        session, _controller, _repo = _make_session([record])
        session.select(record)
        session.start_review()
        form = session.edit(vendor="Beta Spa", amount=42.0)
        assert form.vendor == "Beta Spa"
        assert form.amount == 42.0

    def test_edit_parses_typed_amount(self) -> None:
        record = _make_record("1")
        session, _controller, _repo = _make_session([record])
        session.select(record)
        session.start_review()
        assert session.edit(amount="150,50").amount == 150.5
        assert session.edit(amount=" 99.9 ").amount == 99.9

    def test_unparseable_amount_blocks_confirm(self) -> None:
        record = _make_record("1")
        session, _controller, repo = _make_session([record])
        session.select(record)
        session.start_review()
        session.edit(amount="abc")
        with pytest.raises(ReviewValidationError) as exc_info:
            session.confirm()
        assert "Amount must be a number" in exc_info.value.errors
        assert repo.updates == []

    def test_edit_requires_editing(self) -> None:
        record = _make_record("1")
        session, _controller, _repo = _make_session([record])
        session.select(record)
        with pytest.raises(InvalidTransitionError, match="not being edited"):
            session.edit(vendor="x")

    def test_cancel_edit_discards_changes(self) -> None:
        record = _make_record("1")
        session, _controller, repo = _make_session([record])
        session.select(record)
        session.start_review()
        session.edit(vendor="Changed")
        assert session.cancel_edit() == Viewing(record)
        assert repo.updates == []


class TestConfirm:
    def test_confirm_saves_and_verifies(self) -> None:
        record = _make_record("1")
        session, controller, repo = _make_session([record])
        session.select(record)
        session.start_review()
        session.edit(vendor="Beta Spa")
        saved = session.confirm()
        assert saved.vendor == "Beta Spa"
        assert saved.status == VERIFIED
        assert session.state == Viewing(saved)
        assert controller.records[0].status == VERIFIED

    def test_confirm_accepts_explicit_fields(self) -> None:
        record = _make_record("1")
        session, _controller, _repo = _make_session([record])
        session.select(record)
        session.start_review()
        fields = EditableFields("FT-9", "Gamma", "2024-05-01", 10.0, "USD")
        saved = session.confirm(fields)
        assert saved.editable_fields() == fields

    def test_editing_verified_record_keeps_it_verified(self) -> None:
        record = _make_record("1", status=VERIFIED, amount=100.0)
        session, _controller, repo = _make_session([record])
        session.select(record)
        session.start_review()
        session.edit(amount=150.0)
        saved = session.confirm()
        assert saved.amount == 150.0
        assert saved.status == VERIFIED
        assert repo.rows[0].amount == 150.0

    @pytest.mark.parametrize(
        ("changes", "message"),
        [
            ({"vendor": ""}, "Vendor is required"),
            ({"date": ""}, "Date is required"),
            ({"amount": 0.0}, "Amount must be greater than zero"),
            ({"amount": -5.0}, "Amount must be greater than zero"),
        ],
    )
    def test_invalid_fields_never_reach_the_store(
        self, changes: dict[str, Any], message: str
    ) -> None:
        record = _make_record("1")
        session, _controller, repo = _make_session([record])
        session.select(record)
        session.start_review()
        session.edit(**changes)
        with pytest.raises(ReviewValidationError, match=message):
            session.confirm()
        assert repo.updates == []
        assert repo.rows[0].status == DRAFT
        assert isinstance(session.state, Editing)

    def test_confirm_requires_editing(self) -> None:
        record = _make_record("1")
        session, _controller, _repo = _make_session([record])
        session.select(record)
        with pytest.raises(InvalidTransitionError):
            session.confirm()

    def test_store_failure_propagates_and_keeps_editing(self) -> None:
        record = _make_record("1")
        session, controller, repo = _make_session([record])
        session.select(record)
        session.start_review()
        repo.fail_writes = True
        with pytest.raises(PersistenceError):
            session.confirm()
        assert isinstance(session.state, Editing)
        assert controller.records[0].status == DRAFT


class TestQuickApprove:
    def test_approves_draft_without_changing_fields(self) -> None:
        record = _make_record("1")
        session, _controller, repo = _make_session([record])
        session.select(record)
        assert session.can_quick_approve
        saved = session.quick_approve()
        assert saved.status == VERIFIED
        assert saved.editable_fields() == record.editable_fields()
        assert repo.updates == [("1", {"status": VERIFIED})]

    def test_unavailable_for_unknown_vendor(self) -> None:
        record = _make_record("1", vendor=UNKNOWN_VENDOR, invoice_number=MISSING_INVOICE_NUMBER)
        session, _controller, repo = _make_session([record])
        session.select(record)
        assert not session.can_quick_approve
        with pytest.raises(QuickApproveUnavailableError):
            session.quick_approve()
        assert repo.updates == []
        form = session.start_review()
        assert form.vendor == ""

    def test_unavailable_for_verified_record(self) -> None:
        record = _make_record("1", status=VERIFIED)
        session, _controller, _repo = _make_session([record])
        session.select(record)
        assert not session.can_quick_approve
        with pytest.raises(QuickApproveUnavailableError, match="already verified"):
            session.quick_approve()

    def test_unavailable_while_editing(self) -> None:
        record = _make_record("1")
        session, _controller, _repo = _make_session([record])
        session.select(record)
        session.start_review()
        assert not session.can_quick_approve
        with pytest.raises(InvalidTransitionError):
            session.quick_approve()


class TestAdvanceAndDelete:
    def test_advance_opens_next_draft(self) -> None:
        first, second = _make_record("1"), _make_record("2")
        session, _controller, _repo = _make_session([first, second])
        session.select(first)
        session.quick_approve()
        assert session.advance() == second
        assert session.state == Viewing(second)

    def test_advance_without_drafts_clears_selection(self) -> None:
        record = _make_record("1")
        session, _controller, _repo = _make_session([record])
        session.select(record)
        session.quick_approve()
        assert session.advance() is None
        assert session.state == NoSelection()

    def test_deleting_current_draft_moves_to_the_other_draft(self) -> None:
        first, second = _make_record("1"), _make_record("2")
        session, controller, _repo = _make_session([first, second])
        session.select(first)
        assert session.delete() == second
        assert session.state == Viewing(second)
        assert [r.id for r in controller.records] == ["2"]

    def test_deleting_last_draft_clears_selection(self) -> None:
        record = _make_record("1")
        session, _controller, _repo = _make_session([record])
        session.select(record)
        assert session.delete() is None
        assert session.state == NoSelection()

    def test_on_record_deleted_ignores_other_records(self) -> None:
        first, second = _make_record("1"), _make_record("2")
        session, _controller, _repo = _make_session([first, second])
        session.select(first)
        session.on_record_deleted("2")
        assert session.selected == first


class TestRecordsChanged:
    def test_selection_follows_remote_update(self) -> None:
        record = _make_record("1")
        session, controller, repo = _make_session([record])
        session.select(record)
        repo.rows[0] = replace(record, vendor="Updated elsewhere")
        controller.refresh()
        assert session.selected is not None
        assert session.selected.vendor == "Updated elsewhere"

    def test_editing_form_survives_remote_update(self) -> None:
        record = _make_record("1")
        session, controller, repo = _make_session([record])
        session.select(record)
        session.start_review()
        session.edit(vendor="Typing")
        repo.rows[0] = replace(record, amount=5.0)
        controller.refresh()
        state = session.state
        assert isinstance(state, Editing)
        assert state.form.vendor == "Typing"
        assert state.record.amount == 5.0

    def test_remote_delete_moves_to_next_draft(self) -> None:
        first, second = _make_record("1"), _make_record("2")
        session, controller, repo = _make_session([first, second])
        session.select(first)
        repo.rows = [second]
        controller.refresh()
        assert session.selected == second


class TestVendorSuggestions:
    def test_suggests_verified_vendors_matching_form(self) -> None:
        known = _make_record("1", vendor="Enel Energia", status=VERIFIED)
        draft = _make_record("2", vendor=UNKNOWN_VENDOR)
        session, _controller, _repo = _make_session([known, draft])
        session.select(draft)
        session.start_review()
        session.edit(vendor="ene")
        assert session.vendor_suggestions() == ["Enel Energia"]

    def test_explicit_query(self) -> None:
        known = _make_record("1", vendor="Acme Srl", status=VERIFIED)
        session, _controller, _repo = _make_session([known])
        assert session.vendor_suggestions("acme") == ["Acme Srl"]

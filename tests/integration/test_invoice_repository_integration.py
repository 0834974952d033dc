from typing import Any

import pytest

from invoicedesk.database.exceptions import RecordNotFoundError
from invoicedesk.database.repositories.invoice_repository import InvoiceRepository
from invoicedesk.records.models import DRAFT, VERIFIED, new_record_id


def _find(records: list, record_id: str) -> Any:
    return next((r for r in records if r.id == record_id), None)


@pytest.mark.integration
class TestInvoiceRepositoryRoundTrip:
    def test_insert_then_select(self, make_invoice: Any) -> None:
        repo = InvoiceRepository()
        record = make_invoice()
        repo.insert([record])

        stored = _find(repo.select_all(), record.id)

        assert stored is not None
        assert stored.vendor == "Acme Srl"
        assert stored.date == "2024-03-15"
        assert stored.amount == 120.5
        assert stored.document_bytes == b"%PDF-1.4 integration"
        assert stored.status == DRAFT

    def test_select_orders_by_date_descending(self, make_invoice: Any) -> None:
        repo = InvoiceRepository()
        older = make_invoice(date="2001-01-01")
        newer = make_invoice(date="2001-06-01")
        repo.insert([older, newer])

        ids = [r.id for r in repo.select_all() if r.id in {older.id, newer.id}]

        assert ids == [newer.id, older.id]

    def test_update_fields_and_status(self, make_invoice: Any) -> None:
        repo = InvoiceRepository()
        record = make_invoice()
        repo.insert([record])

        repo.update(record.id, {"amount": 150.0, "status": VERIFIED})

        stored = _find(repo.select_all(), record.id)
        assert stored.amount == 150.0
        assert stored.status == VERIFIED

    def test_update_missing_record(self, integration_pool: None) -> None:
        with pytest.raises(RecordNotFoundError):
            InvoiceRepository().update(new_record_id(), {"status": VERIFIED})

    def test_delete(self, make_invoice: Any) -> None:
        repo = InvoiceRepository()
        record = make_invoice()
        repo.insert([record])

        repo.delete(record.id)

        assert _find(repo.select_all(), record.id) is None

from collections.abc import Mapping, Sequence
from datetime import date
from decimal import Decimal
from typing import Any

import psycopg
from psycopg.rows import dict_row

from invoicedesk.database.connection import get_connection
from invoicedesk.database.exceptions import PersistenceError, RecordNotFoundError
from invoicedesk.records.models import DocumentRecord

UPDATABLE_COLUMNS = frozenset(
    {"invoice_number", "vendor", "date", "amount", "currency", "status"}
)


class InvoiceRepository:
    """Database operations for the invoices table."""

    def select_all(self) -> list[DocumentRecord]:
        """All invoices, most recent invoice date first."""
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        """
                        SELECT id, invoice_number, vendor, date, amount, currency,
                               pdf_data, file_name, created_at, status, user_id
                        FROM invoices
                        ORDER BY date DESC, created_at DESC
                        """
                    )
                    rows = cur.fetchall()
        except psycopg.Error as exc:
            raise PersistenceError(f"Could not load invoices: {exc}") from exc
        return [_row_to_record(row) for row in rows]

    def insert(self, records: Sequence[DocumentRecord], owner_id: str | None = None) -> None:
        """Insert a batch of records in one transaction."""
        if not records:
            return
        params = [
            (
                r.id,
                r.invoice_number,
                r.vendor,
                r.date,
                r.amount,
                r.currency,
                r.document_bytes,
                r.original_file_name,
                r.created_at,
                r.status,
                owner_id if owner_id is not None else r.user_id,
            )
            for r in records
        ]
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.executemany(
                        """
                        INSERT INTO invoices
                        (id, invoice_number, vendor, date, amount, currency,
                         pdf_data, file_name, created_at, status, user_id)
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                        """,
                        params,
                    )
                conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(f"Could not save invoices: {exc}") from exc

    def update(self, record_id: str, changes: Mapping[str, Any]) -> None:
        """Apply a partial update.

        Raises:
            ValueError: if ``changes`` is empty or names a non-editable column.
            RecordNotFoundError: if no invoice with this ID exists.
        """
        if not changes:
            raise ValueError("No changes to apply")
        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Columns not updatable: {sorted(unknown)}")

        columns = sorted(changes)
        assignments = ", ".join(f"{column} = %s" for column in columns)
        params = [*(changes[column] for column in columns), record_id]
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"UPDATE invoices SET {assignments} WHERE id = %s",
                        params,
                    )
                    if cur.rowcount == 0:
                        raise RecordNotFoundError(f"Invoice {record_id} not found")
                conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(f"Could not update invoice {record_id}: {exc}") from exc

    def delete(self, record_id: str) -> None:
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("DELETE FROM invoices WHERE id = %s", (record_id,))
                    if cur.rowcount == 0:
                        raise RecordNotFoundError(f"Invoice {record_id} not found")
                conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(f"Could not delete invoice {record_id}: {exc}") from exc


def _row_to_record(row: Mapping[str, Any]) -> DocumentRecord:
    raw_date = row["date"]
    amount = row["amount"]
    user_id = row.get("user_id")
    return DocumentRecord(
        id=str(row["id"]),
        invoice_number=row["invoice_number"],
        vendor=row["vendor"],
        date=raw_date.isoformat() if isinstance(raw_date, date) else str(raw_date),
        amount=float(amount) if isinstance(amount, Decimal) else amount,
        currency=row["currency"],
        document_bytes=bytes(row["pdf_data"]),
        original_file_name=row["file_name"],
        created_at=int(row["created_at"]),
        status=row["status"],
        user_id=str(user_id) if user_id is not None else None,
    )

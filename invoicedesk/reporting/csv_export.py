"""CSV export of the invoices shown in a report.

Layout: UTF-8 with BOM, header ``ID,Data,Fornitore,Numero,Importo,Valuta``,
one line per record. The vendor column is always double-quoted.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from invoicedesk.records.models import DocumentRecord

CSV_HEADER = ("ID", "Data", "Fornitore", "Numero", "Importo", "Valuta")
UTF8_BOM = "\ufeff"


def export_csv(records: Iterable[DocumentRecord]) -> bytes:
    lines = [",".join(CSV_HEADER)]
    for record in records:
        lines.append(
            ",".join(
                (
                    _field(record.id),
                    _field(record.date),
                    _quoted(record.vendor),
                    _field(record.invoice_number),
                    format_amount(record.amount),
                    _field(record.currency),
                )
            )
        )
    return (UTF8_BOM + "\n".join(lines)).encode("utf-8")


def export_filename(today: date | None = None) -> str:
    day = today if today is not None else date.today()
    return f"report_fatture_{day.isoformat()}.csv"


def format_amount(amount: float) -> str:
    """Shortest plain decimal form: 100.0 -> "100", 120.50 -> "120.5"."""
    return format(Decimal(repr(amount)).normalize(), "f")


def _quoted(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _field(value: str) -> str:
    if any(ch in value for ch in ',"\n\r'):
        return _quoted(value)
    return value

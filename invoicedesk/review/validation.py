from datetime import date

from invoicedesk.records.models import MISSING_INVOICE_NUMBER, UNKNOWN_VENDOR, EditableFields


def validate_fields(fields: EditableFields) -> list[str]:
    """Return the problems that block saving ``fields``; empty when valid."""
    errors: list[str] = []
    if not fields.vendor.strip() or fields.vendor == UNKNOWN_VENDOR:
        errors.append("Vendor is required")
    if fields.invoice_number == MISSING_INVOICE_NUMBER:
        errors.append("Invoice number must be filled in")
    if not fields.date.strip():
        errors.append("Date is required")
    else:
        try:
            date.fromisoformat(fields.date.strip())
        except ValueError:
            errors.append("Date must be in YYYY-MM-DD format")
    amount = fields.amount
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        errors.append("Amount must be a number")
    elif not amount > 0:
        errors.append("Amount must be greater than zero")
    return errors

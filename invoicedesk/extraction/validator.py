"""Turns a parsed AI answer into an ExtractionResult."""

import math
from datetime import date
from typing import Any

from invoicedesk.extraction.exceptions import ExtractionValidationError
from invoicedesk.records.models import ExtractionResult

_TEXT_FIELDS = ("invoiceNumber", "vendor", "date", "currency")


def validate_and_build(data: dict[str, Any]) -> ExtractionResult:
    """Validate raw parsed JSON and build an ExtractionResult.

    Raises:
        ExtractionValidationError: if any field is missing or unusable.
    """
    for name in (*_TEXT_FIELDS, "amount"):
        if name not in data or data[name] is None:
            raise ExtractionValidationError(f"Missing required field: {name}")
    texts = {name: _require_text(data[name], name) for name in _TEXT_FIELDS}
    return ExtractionResult(
        invoice_number=texts["invoiceNumber"],
        vendor=texts["vendor"],
        date=_require_iso_date(texts["date"]),
        amount=_require_amount(data["amount"]),
        currency=texts["currency"],
    )


def _require_text(raw: Any, name: str) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise ExtractionValidationError(f"'{name}' must be a non-empty string")
    return raw


def _require_iso_date(raw: str) -> str:
    value = raw.strip()
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise ExtractionValidationError(f"'date' is not YYYY-MM-DD: {raw!r}") from exc
    return value


def _require_amount(raw: Any) -> float:
    if isinstance(raw, bool):
        raise ExtractionValidationError("'amount' must be a number")
    if isinstance(raw, str):
        try:
            raw = float(raw.strip().replace(",", "."))
        except ValueError as exc:
            raise ExtractionValidationError(f"'amount' is not numeric: {raw!r}") from exc
    if not isinstance(raw, (int, float)) or math.isnan(raw) or math.isinf(raw):
        raise ExtractionValidationError("'amount' must be a number")
    if raw < 0:
        raise ExtractionValidationError("'amount' must not be negative")
    return float(raw)

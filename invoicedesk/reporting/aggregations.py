"""Spend aggregations behind the reports view."""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from invoicedesk.records.models import DocumentRecord


@dataclass(frozen=True)
class ReportFilter:
    """Empty fields match everything."""

    vendor: str | None = None
    year: int | None = None
    month: int | None = None
    verified_only: bool = False

    def matches(self, record: DocumentRecord) -> bool:
        if self.verified_only and not record.is_verified:
            return False
        if self.vendor is not None and record.vendor != self.vendor:
            return False
        year, month = _year_month(record)
        if self.year is not None and year != self.year:
            return False
        if self.month is not None and month != self.month:
            return False
        return True


@dataclass(frozen=True)
class ReportSummary:
    count: int
    total: float
    average: float
    vendor_count: int


def filter_records(
    records: Iterable[DocumentRecord],
    report_filter: ReportFilter = ReportFilter(),
) -> list[DocumentRecord]:
    return [r for r in records if report_filter.matches(r)]


def monthly_totals(records: Iterable[DocumentRecord]) -> list[tuple[str, float]]:
    """``(YYYY-MM, total)`` pairs in chronological order."""
    totals: dict[str, float] = defaultdict(float)
    for record in records:
        year, month = _year_month(record)
        if year is None:
            continue
        totals[f"{year:04d}-{month:02d}"] += record.amount
    return sorted(totals.items())


def vendor_totals(
    records: Iterable[DocumentRecord],
    top: int | None = 5,
) -> list[tuple[str, float]]:
    """Vendors by total spend, largest first."""
    totals: dict[str, float] = defaultdict(float)
    for record in records:
        totals[record.vendor] += record.amount
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return ranked[:top] if top is not None else ranked


def summarize(records: Iterable[DocumentRecord]) -> ReportSummary:
    items = list(records)
    total = sum(r.amount for r in items)
    return ReportSummary(
        count=len(items),
        total=total,
        average=total / len(items) if items else 0.0,
        vendor_count=len({r.vendor for r in items}),
    )


def available_years(records: Iterable[DocumentRecord]) -> list[int]:
    """Years present in the data, most recent first."""
    years = {year for year, _ in map(_year_month, records) if year is not None}
    return sorted(years, reverse=True)


def available_vendors(records: Iterable[DocumentRecord]) -> list[str]:
    return sorted({r.vendor for r in records})


def _year_month(record: DocumentRecord) -> tuple[int | None, int | None]:
    parts = record.date.split("-")
    if len(parts) < 2 or not (parts[0].isdigit() and parts[1].isdigit()):
        return None, None
    return int(parts[0]), int(parts[1])

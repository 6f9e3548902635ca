"""Report and statistics export: formats, filters, names and CSV output."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable

from .errors import ValidationError
from .statistics import parse_optional_date

FORMAT_REQUIRED_MESSAGE = "Format parameter is required. Use csv, excel, or pdf"
FORMAT_INVALID_MESSAGE = "Invalid format. Use csv, excel, or pdf"

REPORT_HEADERS = (
    "Report Number", "Reporter Name", "Reporter Phone", "Reporter Email",
    "Infrastructure Category", "Damage Type", "Province", "Regency",
    "District", "Village", "Location Detail", "Description",
    "Urgency Level", "Status", "Latitude", "Longitude",
    "Created At", "Updated At",
)

MONTHLY_HEADERS = (
    "Year", "Month", "Month Name", "Total Reports",
    "Completed Reports", "Completion Rate (%)",
)
CATEGORY_HEADERS = ("Category Name", "Total Reports", "Completed Reports", "Completion Rate (%)")
STATUS_HEADERS = ("Status", "Count", "Percentage (%)")
URGENCY_HEADERS = ("Urgency Level", "Count", "Percentage (%)", "Avg Resolution Days")
REGIONAL_HEADERS = ("Regency Name", "Total Reports", "Completed Reports", "Completion Rate (%)")


class ExportFormat(Enum):
    """File formats an export can be produced in."""

    CSV = "csv"
    EXCEL = "excel"
    PDF = "pdf"


@dataclass(frozen=True)
class ExportReport:
    """One report row as it appears in an export."""

    report_number: str
    reporter_name: str
    reporter_phone: str
    reporter_email: str
    infrastructure_category_name: str
    damage_type_name: str
    province_name: str
    regency_name: str
    district_name: str
    village_name: str
    location_detail: str
    description: str
    urgency_level: str
    status: str
    latitude: float
    longitude: float
    created_at: str
    updated_at: str

    def as_row(self) -> list[str]:
        """Return the CSV row for this report."""
        return [
            self.report_number,
            self.reporter_name,
            self.reporter_phone,
            self.reporter_email,
            self.infrastructure_category_name,
            self.damage_type_name,
            self.province_name,
            self.regency_name,
            self.district_name,
            self.village_name,
            self.location_detail,
            self.description,
            self.urgency_level,
            self.status,
            f"{self.latitude:.6f}",
            f"{self.longitude:.6f}",
            self.created_at,
            self.updated_at,
        ]


@dataclass(frozen=True)
class MonthlySummary:
    year: int
    month: int
    month_name: str
    total_reports: int
    completed_reports: int
    completion_rate: float


@dataclass(frozen=True)
class CategorySummary:
    category_name: str
    total_reports: int
    completed_reports: int
    completion_rate: float


@dataclass(frozen=True)
class StatusSummary:
    status: str
    count: int
    percentage: float


@dataclass(frozen=True)
class UrgencySummary:
    urgency_level: str
    count: int
    percentage: float
    avg_resolution_days: float


@dataclass(frozen=True)
class RegionalSummary:
    regency_name: str
    total_reports: int
    completed_reports: int
    completion_rate: float


@dataclass
class ExportStatistics:
    """All statistical tables included in a statistics export."""

    monthly_summary: list[MonthlySummary] = field(default_factory=list)
    category_breakdown: list[CategorySummary] = field(default_factory=list)
    status_summary: list[StatusSummary] = field(default_factory=list)
    urgency_level_summary: list[UrgencySummary] = field(default_factory=list)
    regional_summary: list[RegionalSummary] = field(default_factory=list)


def parse_export_format(value: str | None) -> ExportFormat:
    """Return the requested format, raising ValidationError if missing or unknown."""
    if not value:
        raise ValidationError("format", FORMAT_REQUIRED_MESSAGE)
    try:
        return ExportFormat(value)
    except ValueError:
        raise ValidationError("format", FORMAT_INVALID_MESSAGE) from None


def validate_date_filters(
    start_date: str | None, end_date: str | None
) -> tuple[date | None, date | None]:
    """Check optional YYYY-MM-DD filters, returning them as dates (or None)."""
    return (
        parse_optional_date(start_date, "start_date"),
        parse_optional_date(end_date, "end_date"),
    )


def export_filename(kind: str, today: date | None = None) -> str:
    """Return the download name (without extension) for an export of ``kind``."""
    today = today or date.today()
    return f"tampayang-{kind}-{today:%Y-%m-%d}"


def truncate(text: str, max_len: int) -> str:
    """Shorten ``text`` to ``max_len`` characters, ending with an ellipsis if cut."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _csv_bytes(rows: Iterable[Iterable[str]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def reports_to_csv(reports: Iterable[ExportReport]) -> bytes:
    """Render reports as a CSV document with a header row."""
    rows: list[list[str]] = [list(REPORT_HEADERS)]
    rows.extend(report.as_row() for report in reports)
    return _csv_bytes(rows)


def _statistics_rows(statistics: ExportStatistics):
    yield ["=== MONTHLY SUMMARY ==="]
    yield list(MONTHLY_HEADERS)
    for m in statistics.monthly_summary:
        yield [
            str(m.year), str(m.month), m.month_name,
            str(m.total_reports), str(m.completed_reports), f"{m.completion_rate:.2f}",
        ]
    yield []

    yield ["=== CATEGORY BREAKDOWN ==="]
    yield list(CATEGORY_HEADERS)
    for c in statistics.category_breakdown:
        yield [
            c.category_name, str(c.total_reports),
            str(c.completed_reports), f"{c.completion_rate:.2f}",
        ]
    yield []

    yield ["=== STATUS SUMMARY ==="]
    yield list(STATUS_HEADERS)
    for s in statistics.status_summary:
        yield [s.status, str(s.count), f"{s.percentage:.2f}"]
    yield []

    yield ["=== URGENCY LEVEL SUMMARY ==="]
    yield list(URGENCY_HEADERS)
    for u in statistics.urgency_level_summary:
        yield [
            u.urgency_level, str(u.count),
            f"{u.percentage:.2f}", f"{u.avg_resolution_days:.2f}",
        ]
    yield []

    yield ["=== REGIONAL SUMMARY ==="]
    yield list(REGIONAL_HEADERS)
    for r in statistics.regional_summary:
        yield [
            r.regency_name, str(r.total_reports),
            str(r.completed_reports), f"{r.completion_rate:.2f}",
        ]


def statistics_to_csv(statistics: ExportStatistics) -> bytes:
    """Render all statistics tables as one CSV document, sections separated by blank rows."""
    return _csv_bytes(_statistics_rows(statistics))
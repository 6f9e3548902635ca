"""Spreadsheet and PDF renderings of report exports, and the download files."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from .exports import (
    CATEGORY_HEADERS,
    MONTHLY_HEADERS,
    REGIONAL_HEADERS,
    REPORT_HEADERS,
    STATUS_HEADERS,
    URGENCY_HEADERS,
    ExportFormat,
    ExportReport,
    ExportStatistics,
    export_filename,
    parse_export_format,
    reports_to_csv,
    statistics_to_csv,
    truncate,
)
from .pdf import PdfDocument
from .xlsx import Workbook, column_letter

_CONTENT_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.EXCEL: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.PDF: "application/pdf",
}
_EXTENSIONS = {ExportFormat.CSV: "csv", ExportFormat.EXCEL: "xlsx", ExportFormat.PDF: "pdf"}

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_ROWS_PER_PAGE = 35
_REPORT_PDF_COLUMNS = (
    (25, "No. Laporan"),
    (30, "Pelapor"),
    (25, "Kategori"),
    (25, "Lokasi"),
    (20, "Status"),
    (25, "Tingkat Urgensi"),
    (30, "Tanggal"),
)


@dataclass(frozen=True)
class ExportFile:
    """A rendered export ready to be sent as a download."""

    filename: str
    content_type: str
    content: bytes

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


def _fill_sheet(workbook: Workbook, sheet: str, headers, rows) -> None:
    workbook.add_sheet(sheet)
    for col, header in enumerate(headers):
        workbook.set_cell(sheet, f"{column_letter(col)}1", header)
    for row_number, row in enumerate(rows, start=2):
        for col, value in enumerate(row):
            workbook.set_cell(sheet, f"{column_letter(col)}{row_number}", value)


def reports_to_xlsx(reports: Sequence[ExportReport]) -> bytes:
    """Render reports on a single "Reports" sheet."""
    workbook = Workbook()
    rows = (
        (
            r.report_number, r.reporter_name, r.reporter_phone, r.reporter_email,
            r.infrastructure_category_name, r.damage_type_name, r.province_name,
            r.regency_name, r.district_name, r.village_name, r.location_detail,
            r.description, r.urgency_level, r.status, r.latitude, r.longitude,
            r.created_at, r.updated_at,
        )
        for r in reports
    )
    _fill_sheet(workbook, "Reports", REPORT_HEADERS, rows)
    return workbook.to_bytes()


def statistics_to_xlsx(statistics: ExportStatistics) -> bytes:
    """Render each statistics table on its own sheet."""
    workbook = Workbook()
    _fill_sheet(
        workbook, "Monthly Summary", MONTHLY_HEADERS,
        (
            (m.year, m.month, m.month_name, m.total_reports,
             m.completed_reports, m.completion_rate)
            for m in statistics.monthly_summary
        ),
    )
    _fill_sheet(
        workbook, "Category Breakdown", CATEGORY_HEADERS,
        (
            (c.category_name, c.total_reports, c.completed_reports, c.completion_rate)
            for c in statistics.category_breakdown
        ),
    )
    _fill_sheet(
        workbook, "Status Summary", STATUS_HEADERS,
        ((s.status, s.count, s.percentage) for s in statistics.status_summary),
    )
    _fill_sheet(
        workbook, "Urgency Level Summary", URGENCY_HEADERS,
        (
            (u.urgency_level, u.count, u.percentage, u.avg_resolution_days)
            for u in statistics.urgency_level_summary
        ),
    )
    _fill_sheet(
        workbook, "Regional Summary", REGIONAL_HEADERS,
        (
            (r.regency_name, r.total_reports, r.completed_reports, r.completion_rate)
            for r in statistics.regional_summary
        ),
    )
    return workbook.to_bytes()


def _export_date(today: date) -> str:
    return f"{today.day:02d} {_MONTHS[today.month - 1]} {today.year}"


def _report_table_header(pdf: PdfDocument) -> None:
    pdf.set_font("Arial", "B", 8)
    for width, title in _REPORT_PDF_COLUMNS:
        pdf.cell(width, 8, title)
    pdf.ln(8)
    pdf.set_font("Arial", "", 7)


def reports_to_pdf(reports: Sequence[ExportReport], today: date | None = None) -> bytes:
    """Render a report table, starting a new page (with headers) every 35 rows."""
    today = today or date.today()
    pdf = PdfDocument()
    pdf.add_page()
    pdf.set_font("Arial", "B", 16)
    pdf.cell(190, 10, "TAMPAYANG - Laporan Kerusakan Infrastruktur")
    pdf.ln(15)

    pdf.set_font("Arial", "", 10)
    pdf.cell(190, 5, f"Tanggal Export: {_export_date(today)}")
    pdf.ln(5)
    pdf.cell(190, 5, f"Total Laporan: {len(reports)}")
    pdf.ln(15)

    _report_table_header(pdf)
    for index, report in enumerate(reports):
        if index and index % _ROWS_PER_PAGE == 0:
            pdf.add_page()
            _report_table_header(pdf)
        values = (
            truncate(report.report_number, 12),
            truncate(report.reporter_name, 15),
            truncate(report.infrastructure_category_name, 12),
            truncate(report.regency_name, 12),
            truncate(report.status, 10),
            truncate(report.urgency_level, 12),
            truncate(report.created_at[:10], 12),
        )
        for (width, _), value in zip(_REPORT_PDF_COLUMNS, values):
            pdf.cell(width, 6, value)
        pdf.ln(6)
    return pdf.to_bytes()


def _section(pdf: PdfDocument, title: str, columns) -> None:
    pdf.set_font("Arial", "B", 12)
    pdf.cell(190, 8, title)
    pdf.ln(10)
    pdf.set_font("Arial", "B", 8)
    for width, header in columns:
        pdf.cell(width, 6, header)
    pdf.ln(6)
    pdf.set_font("Arial", "", 8)


def _rows(pdf: PdfDocument, widths, rows) -> None:
    for row in rows:
        for width, value in zip(widths, row):
            pdf.cell(width, 5, value)
        pdf.ln(5)


def statistics_to_pdf(statistics: ExportStatistics, today: date | None = None) -> bytes:
    """Render monthly, category and status summaries as a PDF."""
    today = today or date.today()
    pdf = PdfDocument()
    pdf.add_page()
    pdf.set_font("Arial", "B", 16)
    pdf.cell(190, 10, "TAMPAYANG - Statistik Laporan")
    pdf.ln(15)

    pdf.set_font("Arial", "", 10)
    pdf.cell(190, 5, f"Tanggal Export: {_export_date(today)}")
    pdf.ln(15)

    monthly_columns = ((20, "Tahun"), (20, "Bulan"), (30, "Total"), (30, "Selesai"), (25, "Rate (%)"))
    _section(pdf, "Ringkasan Bulanan", monthly_columns)
    _rows(
        pdf,
        [w for w, _ in monthly_columns],
        (
            (str(m.year), m.month_name[:3], str(m.total_reports),
             str(m.completed_reports), f"{m.completion_rate:.1f}")
            for m in statistics.monthly_summary
        ),
    )
    pdf.ln(10)

    category_columns = ((60, "Kategori"), (25, "Total"), (25, "Selesai"), (25, "Rate (%)"))
    _section(pdf, "Breakdown Kategori", category_columns)
    _rows(
        pdf,
        [w for w, _ in category_columns],
        (
            (truncate(c.category_name, 25), str(c.total_reports),
             str(c.completed_reports), f"{c.completion_rate:.1f}")
            for c in statistics.category_breakdown
        ),
    )
    pdf.ln(10)

    status_columns = ((40, "Status"), (25, "Jumlah"), (25, "Persentase"))
    _section(pdf, "Ringkasan Status", status_columns)
    _rows(
        pdf,
        [w for w, _ in status_columns],
        (
            (s.status, str(s.count), f"{s.percentage:.1f}%")
            for s in statistics.status_summary
        ),
    )
    return pdf.to_bytes()


def _as_format(export_format: ExportFormat | str) -> ExportFormat:
    if isinstance(export_format, ExportFormat):
        return export_format
    return parse_export_format(export_format)


def _export_file(kind: str, fmt: ExportFormat, content: bytes, today: date | None) -> ExportFile:
    return ExportFile(
        filename=f"{export_filename(kind, today)}.{_EXTENSIONS[fmt]}",
        content_type=_CONTENT_TYPES[fmt],
        content=content,
    )


def render_reports(
    reports: Sequence[ExportReport],
    export_format: ExportFormat | str,
    today: date | None = None,
) -> ExportFile:
    """Render reports in the requested format as a downloadable file."""
    fmt = _as_format(export_format)
    if fmt is ExportFormat.CSV:
        content = reports_to_csv(reports)
    elif fmt is ExportFormat.EXCEL:
        content = reports_to_xlsx(reports)
    else:
        content = reports_to_pdf(reports, today)
    return _export_file("reports", fmt, content, today)


def render_statistics(
    statistics: ExportStatistics,
    export_format: ExportFormat | str,
    today: date | None = None,
) -> ExportFile:
    """Render statistics in the requested format as a downloadable file."""
    fmt = _as_format(export_format)
    if fmt is ExportFormat.CSV:
        content = statistics_to_csv(statistics)
    elif fmt is ExportFormat.EXCEL:
        content = statistics_to_xlsx(statistics)
    else:
        content = statistics_to_pdf(statistics, today)
    return _export_file("statistics", fmt, content, today)
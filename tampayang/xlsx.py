"""A small writer for Office Open XML spreadsheets (.xlsx)."""

from __future__ import annotations

import io
import math
import re
import zipfile
from itertools import groupby
from typing import Union
from xml.sax.saxutils import escape, quoteattr

CellValue = Union[str, int, float, bool]

_MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
_PKG_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
_CT_NS = "http://schemas.openxmlformats.org/package/2006/content-types"
_WORKBOOK_CT = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet.main+xml"
_SHEET_CT = "application/vnd.openxmlformats-officedocument.spreadsheetml.worksheet+xml"
_RELS_CT = "application/vnd.openxmlformats-package.relationships+xml"

_XML_DECL = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'

_REF = re.compile(r"([A-Z]{1,3})([1-9][0-9]*)")
_MAX_ROWS = 1_048_576
_MAX_COLUMNS = 16_384
_MAX_SHEET_NAME = 31
_FORBIDDEN_NAME_CHARS = frozenset("[]:*?/\\")


def column_letter(index: int) -> str:
    """Return the column letters for a zero-based column index (0 -> A, 26 -> AA)."""
    if not 0 <= index < _MAX_COLUMNS:
        raise ValueError(f"column index out of range: {index}")
    letters = ""
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def _parse_ref(cell: str) -> tuple[int, int]:
    match = _REF.fullmatch(cell.upper())
    if match is None:
        raise ValueError(f"invalid cell reference: {cell!r}")
    letters, digits = match.groups()
    column = 0
    for ch in letters:
        column = column * 26 + (ord(ch) - ord("A") + 1)
    row = int(digits)
    if column > _MAX_COLUMNS or row > _MAX_ROWS:
        raise ValueError(f"cell reference out of range: {cell!r}")
    return row, column - 1


def _cell_xml(ref: str, value: CellValue) -> str:
    if isinstance(value, bool):
        return f'<c r="{ref}" t="b"><v>{int(value)}</v></c>'
    if isinstance(value, int):
        return f'<c r="{ref}"><v>{value}</v></c>'
    if isinstance(value, float):
        return f'<c r="{ref}"><v>{value!r}</v></c>'
    return (
        f'<c r="{ref}" t="inlineStr"><is>'
        f'<t xml:space="preserve">{escape(value)}</t></is></c>'
    )


class Workbook:
    """An in-memory workbook of named sheets holding text, number and boolean cells."""

    def __init__(self) -> None:
        self._sheets: dict[str, dict[tuple[int, int], CellValue]] = {}

    def add_sheet(self, name: str) -> None:
        """Append a sheet; names must be unique (ignoring case) and valid for Excel."""
        if not name or len(name) > _MAX_SHEET_NAME:
            raise ValueError(f"sheet name must be 1 to {_MAX_SHEET_NAME} characters: {name!r}")
        if _FORBIDDEN_NAME_CHARS & set(name):
            raise ValueError(f"sheet name contains a forbidden character: {name!r}")
        if any(existing.casefold() == name.casefold() for existing in self._sheets):
            raise ValueError(f"sheet already exists: {name!r}")
        self._sheets[name] = {}

    def set_cell(self, sheet: str, cell: str, value: CellValue | None) -> None:
        """Set a cell such as ``B3``; None clears it. Unknown sheets raise KeyError."""
        try:
            cells = self._sheets[sheet]
        except KeyError:
            raise KeyError(f"no such sheet: {sheet!r}") from None
        position = _parse_ref(cell)
        if value is None:
            cells.pop(position, None)
            return
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"cannot store non-finite number in {cell}")
        if not isinstance(value, (str, int, float)):
            raise TypeError(f"unsupported cell value type: {type(value).__name__}")
        cells[position] = value

    def _sheet_xml(self, cells: dict[tuple[int, int], CellValue]) -> str:
        parts = [_XML_DECL, f'<worksheet xmlns="{_MAIN_NS}"><sheetData>']
        for row, entries in groupby(sorted(cells.items()), key=lambda item: item[0][0]):
            parts.append(f'<row r="{row}">')
            parts.extend(
                _cell_xml(f"{column_letter(col)}{row}", value)
                for (_, col), value in entries
            )
            parts.append("</row>")
        parts.append("</sheetData></worksheet>")
        return "".join(parts)

    def to_bytes(self) -> bytes:
        """Serialize the workbook as .xlsx file content."""
        if not self._sheets:
            raise ValueError("a workbook needs at least one sheet")
        numbered = list(enumerate(self._sheets.items(), start=1))

        content_types = "".join(
            [
                _XML_DECL,
                f'<Types xmlns="{_CT_NS}">',
                f'<Default Extension="rels" ContentType="{_RELS_CT}"/>',
                '<Default Extension="xml" ContentType="application/xml"/>',
                f'<Override PartName="/xl/workbook.xml" ContentType="{_WORKBOOK_CT}"/>',
                *(
                    f'<Override PartName="/xl/worksheets/sheet{i}.xml" '
                    f'ContentType="{_SHEET_CT}"/>'
                    for i, _ in numbered
                ),
                "</Types>",
            ]
        )
        root_rels = (
            f'{_XML_DECL}<Relationships xmlns="{_PKG_REL_NS}">'
            f'<Relationship Id="rId1" Type="{_REL_NS}/officeDocument" '
            'Target="xl/workbook.xml"/></Relationships>'
        )
        workbook = "".join(
            [
                _XML_DECL,
                f'<workbook xmlns="{_MAIN_NS}" xmlns:r="{_REL_NS}"><sheets>',
                *(
                    f'<sheet name={quoteattr(name)} sheetId="{i}" r:id="rId{i}"/>'
                    for i, (name, _) in numbered
                ),
                "</sheets></workbook>",
            ]
        )
        workbook_rels = "".join(
            [
                _XML_DECL,
                f'<Relationships xmlns="{_PKG_REL_NS}">',
                *(
                    f'<Relationship Id="rId{i}" Type="{_REL_NS}/worksheet" '
                    f'Target="worksheets/sheet{i}.xml"/>'
                    for i, _ in numbered
                ),
                "</Relationships>",
            ]
        )

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            archive.writestr("[Content_Types].xml", content_types)
            archive.writestr("_rels/.rels", root_rels)
            archive.writestr("xl/workbook.xml", workbook)
            archive.writestr("xl/_rels/workbook.xml.rels", workbook_rels)
            for i, (_, cells) in numbered:
                archive.writestr(f"xl/worksheets/sheet{i}.xml", self._sheet_xml(cells))
        return buffer.getvalue()
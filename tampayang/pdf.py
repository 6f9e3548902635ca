"""A minimal PDF writer for text cells laid out on A4 portrait pages."""

from __future__ import annotations

_K = 72 / 25.4  # points per millimetre
_PAGE_WIDTH = 210.0
_PAGE_HEIGHT = 297.0
_MARGIN = 10.0
_CELL_MARGIN = _MARGIN / 10
_BREAK_MARGIN = 20.0

_FAMILIES = {
    "arial": "Helvetica",
    "helvetica": "Helvetica",
    "times": "Times",
    "courier": "Courier",
}
_BASE_FONTS = {
    ("Helvetica", ""): "Helvetica",
    ("Helvetica", "B"): "Helvetica-Bold",
    ("Helvetica", "I"): "Helvetica-Oblique",
    ("Helvetica", "BI"): "Helvetica-BoldOblique",
    ("Times", ""): "Times-Roman",
    ("Times", "B"): "Times-Bold",
    ("Times", "I"): "Times-Italic",
    ("Times", "BI"): "Times-BoldItalic",
    ("Courier", ""): "Courier",
    ("Courier", "B"): "Courier-Bold",
    ("Courier", "I"): "Courier-Oblique",
    ("Courier", "BI"): "Courier-BoldOblique",
}


def _pdf_string(text: str) -> bytes:
    raw = text.encode("cp1252", errors="replace")
    return (
        raw.replace(b"\\", b"\\\\")
        .replace(b"(", b"\\(")
        .replace(b")", b"\\)")
        .replace(b"\r", b"\\r")
    )


class PdfDocument:
    """A document built from text cells, with automatic page breaks near the bottom margin."""

    def __init__(self) -> None:
        self._pages: list[list[bytes]] = []
        self._fonts: dict[str, str] = {}
        self._font: str | None = None
        self._font_size = 12.0
        self._last_height = 0.0
        self.x = _MARGIN
        self.y = _MARGIN

    def add_page(self) -> None:
        """Start a new page with the cursor at the top-left margin."""
        self._pages.append([])
        self.x = _MARGIN
        self.y = _MARGIN

    def set_font(self, family: str, style: str = "", size: float = 0) -> None:
        """Select a core font; ``size`` in points, 0 keeps the current size."""
        try:
            base_family = _FAMILIES[family.lower()]
        except KeyError:
            raise ValueError(f"unsupported font family: {family!r}") from None
        normalized = style.upper()
        if set(normalized) - {"B", "I"}:
            raise ValueError(f"unsupported font style: {style!r}")
        key = ("B" if "B" in normalized else "") + ("I" if "I" in normalized else "")
        base = _BASE_FONTS[(base_family, key)]
        self._fonts.setdefault(base, f"F{len(self._fonts) + 1}")
        self._font = base
        if size > 0:
            self._font_size = float(size)

    def cell(self, width: float, height: float, text: str = "") -> None:
        """Write ``text`` in a cell of the given size (mm) and move right by ``width``."""
        if not self._pages:
            raise ValueError("no page has been added")
        if self.y + height > _PAGE_HEIGHT - _BREAK_MARGIN:
            x = self.x
            self.add_page()
            self.x = x
        if width == 0:
            width = _PAGE_WIDTH - _MARGIN - self.x
        if text:
            if self._font is None:
                raise ValueError("no font has been set")
            size_mm = self._font_size / _K
            tx = (self.x + _CELL_MARGIN) * _K
            ty = (_PAGE_HEIGHT - (self.y + 0.5 * height + 0.3 * size_mm)) * _K
            resource = self._fonts[self._font]
            self._pages[-1].append(
                f"BT /{resource} {self._font_size:.2f} Tf {tx:.2f} {ty:.2f} Td (".encode()
                + _pdf_string(text)
                + b") Tj ET"
            )
        self._last_height = height
        self.x += width

    def ln(self, height: float | None = None) -> None:
        """Move to the left margin of the next line; by default the last cell's height."""
        self.x = _MARGIN
        self.y += self._last_height if height is None else height

    def to_bytes(self) -> bytes:
        """Serialize the document; an empty document gets one blank page."""
        pages = self._pages or [[]]
        fonts = list(self._fonts.items())
        first_font = 4
        first_page = first_font + len(fonts)
        page_ids = [first_page + 2 * i for i in range(len(pages))]

        objects: list[bytes] = [
            b"<< /Type /Catalog /Pages 2 0 R >>",
            (
                "<< /Type /Pages /Kids ["
                + " ".join(f"{pid} 0 R" for pid in page_ids)
                + f"] /Count {len(pages)} "
                f"/MediaBox [0 0 {_PAGE_WIDTH * _K:.2f} {_PAGE_HEIGHT * _K:.2f}] >>"
            ).encode(),
            (
                "<< /Font << "
                + " ".join(f"/{res} {first_font + i} 0 R" for i, (_, res) in enumerate(fonts))
                + " >> >>"
            ).encode(),
        ]
        objects.extend(
            f"<< /Type /Font /Subtype /Type1 /BaseFont /{base} "
            f"/Encoding /WinAnsiEncoding >>".encode()
            for base, _ in fonts
        )
        for pid, content in zip(page_ids, pages):
            objects.append(
                f"<< /Type /Page /Parent 2 0 R /Resources 3 0 R "
                f"/Contents {pid + 1} 0 R >>".encode()
            )
            stream = b"\n".join(content)
            objects.append(
                f"<< /Length {len(stream)} >>\nstream\n".encode() + stream + b"\nendstream"
            )

        out = bytearray(b"%PDF-1.4\n")
        offsets = []
        for number, body in enumerate(objects, start=1):
            offsets.append(len(out))
            out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"
        xref = len(out)
        out += f"xref\n0 {len(objects) + 1}\n0000000000 65535 f \n".encode()
        for offset in offsets:
            out += f"{offset:010d} 00000 n \n".encode()
        out += (
            f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
            f"startxref\n{xref}\n%%EOF\n"
        ).encode()
        return bytes(out)
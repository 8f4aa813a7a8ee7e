"""
Spreadsheet Converter

Reads Excel workbooks into plain row tables and writes tables back out,
applying highlight styling where a duplicate pass asked for it. Also hosts
the text-cleaning and Excel-to-PDF pipelines.
"""

import html
import os
import re
import unicodedata
from typing import Optional, Sequence

from ..dedupe import DuplicatePolicy, HighlightStyle, Table, detect

_COMBINING_RE = re.compile(r"[\u0300-\u036f]")
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7e]")


class SpreadsheetConverter:
    """Excel (.xlsx) table I/O and the pipelines built on it."""

    SUPPORTED_EXTENSIONS = {".xlsx", ".xlsm"}
    DEFAULT_SHEET_TITLE = "Processed Data"

    @staticmethod
    def can_handle(file_path: str) -> bool:
        _, ext = os.path.splitext(file_path.lower())
        return ext in SpreadsheetConverter.SUPPORTED_EXTENSIONS

    @staticmethod
    def read_table(file_path: str, sheet: Optional[str] = None) -> list[list]:
        """
        Read one sheet into a list of rows.

        Uses the first sheet unless ``sheet`` names another one. Trailing
        empty cells are dropped from each row; fully empty rows are kept as
        ``[]`` so row positions match the sheet.
        """
        if not os.path.isfile(file_path):
            raise FileNotFoundError(f"Spreadsheet not found: {file_path}")

        load_workbook = _openpyxl().load_workbook
        wb = load_workbook(file_path, read_only=True, data_only=True)
        try:
            if sheet is None:
                ws = wb[wb.sheetnames[0]]
            elif sheet in wb.sheetnames:
                ws = wb[sheet]
            else:
                raise ValueError(
                    f"Sheet '{sheet}' not found in {os.path.basename(file_path)}; "
                    f"available: {', '.join(wb.sheetnames)}"
                )
            rows = []
            for values in ws.iter_rows(values_only=True):
                row = list(values)
                while row and row[-1] is None:
                    row.pop()
                rows.append(row)
        finally:
            wb.close()

        # Drop trailing blank rows left over from formatting
        while rows and not rows[-1]:
            rows.pop()
        return rows

    @staticmethod
    def write_table(
        table: Table,
        output_path: str,
        sheet_title: str = DEFAULT_SHEET_TITLE,
    ) -> str:
        """Write a table to a new workbook, styling highlighted rows."""
        openpyxl = _openpyxl()
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = sheet_title

        for row_number, row in enumerate(table.rows, start=1):
            ws.append(list(row))
            # openpyxl turns "=..." strings into formulas; keep them as text
            for col, value in enumerate(row, start=1):
                if isinstance(value, str) and value.startswith("="):
                    ws.cell(row=row_number, column=col).data_type = "s"

        for index, style in table.highlights.items():
            # openpyxl rows and columns are 1-based
            for col in range(1, len(table.rows[index]) + 1):
                _apply_style(ws.cell(row=index + 1, column=col), style)

        wb.save(output_path)
        return output_path

    @staticmethod
    def export(rows: Sequence[Sequence], output_path: str, sheet_title: str = "Data") -> str:
        """Write plain rows to a new single-sheet workbook."""
        return SpreadsheetConverter.write_table(
            Table(rows=[list(r) for r in rows]), output_path, sheet_title=sheet_title
        )

    @staticmethod
    def process_duplicates(
        file_path: str,
        policy: DuplicatePolicy,
        output_path: str,
    ) -> Table:
        """Run a duplicate pass over the first sheet and save the result."""
        rows = SpreadsheetConverter.read_table(file_path)
        table = detect(rows, policy)
        SpreadsheetConverter.write_table(table, output_path)
        return table

    @staticmethod
    def clean(file_path: str, output_path: str) -> int:
        """
        Strip accents and non-printable characters from every text cell.

        All sheets are processed in place in a copy of the workbook, so
        formatting, formulas and non-text cells survive. Returns the number
        of cells whose value changed.
        """
        if not os.path.isfile(file_path):
            raise FileNotFoundError(f"Spreadsheet not found: {file_path}")

        wb = _openpyxl().load_workbook(file_path)
        changed = 0
        for ws in wb.worksheets:
            for row in ws.iter_rows():
                for cell in row:
                    if cell.data_type != "s" or not isinstance(cell.value, str):
                        continue
                    cleaned = clean_value(cell.value)
                    if cleaned != cell.value:
                        cell.value = cleaned
                        cell.data_type = "s"
                        changed += 1
        wb.save(output_path)
        wb.close()
        return changed

    @staticmethod
    def to_html(rows: Sequence[Sequence]) -> str:
        """Render rows as an HTML table, first row as the header."""
        if not rows:
            return "<table></table>"

        col_count = max(len(r) for r in rows) or 1
        lines = ["<table>"]
        for i, row in enumerate(rows):
            tag = "th" if i == 0 else "td"
            padded = list(row) + [None] * (col_count - len(row))
            cells = "".join(
                f"<{tag}>{html.escape(_display(value))}</{tag}>" for value in padded
            )
            lines.append(f"<tr>{cells}</tr>")
        lines.append("</table>")
        return "\n".join(lines)

    @staticmethod
    def to_pdf(file_path: str, output_path: str) -> str:
        """Render the first sheet as a PDF table."""
        from .pdf_converter import PDFConverter

        rows = SpreadsheetConverter.read_table(file_path)
        title = os.path.splitext(os.path.basename(file_path))[0]
        document = (
            f"<h2>{html.escape(title)}</h2>\n"
            + SpreadsheetConverter.to_html(rows)
        )
        return PDFConverter.html_to_pdf(document, output_path, css=_TABLE_CSS)


def clean_value(value):
    """Clean one cell value; non-strings pass through unchanged."""
    if not isinstance(value, str):
        return value
    text = unicodedata.normalize("NFD", value)
    text = _COMBINING_RE.sub("", text)
    text = _NON_PRINTABLE_RE.sub("", text)
    return text.strip()


def clean_table(rows: Sequence[Sequence]) -> list[list]:
    """Apply clean_value to every cell of a table."""
    return [[clean_value(cell) for cell in row] for row in rows]


_TABLE_CSS = """
table { border-collapse: collapse; font-size: 9pt; }
th, td { border: 1px solid #444; padding: 2px 4px; }
th { background-color: #ddd; font-weight: bold; }
"""


def _openpyxl():
    try:
        import openpyxl
    except ImportError:
        raise RuntimeError("openpyxl is not installed. Run: pip install openpyxl")
    return openpyxl


def _apply_style(cell, style: HighlightStyle) -> None:
    from openpyxl.styles import Border, Font, PatternFill, Side

    side = Side(style=style.border_style, color=style.border_color)
    cell.fill = PatternFill(
        fill_type="solid", start_color=style.fill_color, end_color=style.fill_color
    )
    cell.border = Border(left=side, right=side, top=side, bottom=side)
    cell.font = Font(color=style.font_color, bold=style.bold)


def _display(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

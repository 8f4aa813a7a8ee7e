"""
DocForge Core Engine

Routes a tool id and its input files to the converter that does the work,
writes the result into the output directory and reports what was produced.
"""

import os
from dataclasses import dataclass
from typing import Optional, Sequence

from .converters.image_converter import ImageConverter
from .converters.pdf_converter import PDFConverter
from .converters.spreadsheet_converter import SpreadsheetConverter
from .dedupe import Action, DuplicatePolicy
from .usage import DailyUsageCounter


@dataclass(frozen=True)
class Tool:
    """A conversion tool the engine can run."""
    id: str
    title: str
    accept: tuple[str, ...]
    multiple: bool = False


TOOLS = {
    tool.id: tool
    for tool in (
        Tool("jpg-to-pdf", "Images to PDF", tuple(sorted(ImageConverter.SUPPORTED_EXTENSIONS)), multiple=True),
        Tool("compress-pdf", "Compress PDF", (".pdf",)),
        Tool("pdf-to-jpg", "PDF to JPG", (".pdf",)),
        Tool("excel-to-pdf", "Excel to PDF", tuple(sorted(SpreadsheetConverter.SUPPORTED_EXTENSIONS))),
        Tool("clean-excel", "Clean Excel", tuple(sorted(SpreadsheetConverter.SUPPORTED_EXTENSIONS))),
        Tool("duplicate-remover", "Duplicate Remover", tuple(sorted(SpreadsheetConverter.SUPPORTED_EXTENSIONS))),
        Tool(
            "pdf-img-to-excel",
            "PDF/Image to Excel (OCR)",
            tuple(sorted(PDFConverter.SUPPORTED_EXTENSIONS | ImageConverter.SUPPORTED_EXTENSIONS)),
        ),
    )
}


@dataclass
class ToolResult:
    """Outcome of a tool run."""
    tool: str
    output_path: str
    message: str
    details: str = ""


class DocForge:
    """
    Main conversion engine.

    Accepts a tool id plus input files and produces one output artifact in
    the output directory.
    """

    def __init__(self, output_dir: str = None, usage: Optional[DailyUsageCounter] = None):
        self.output_dir = output_dir or os.path.join(os.getcwd(), "docforge_output")
        os.makedirs(self.output_dir, exist_ok=True)
        self.usage = usage

    def run(self, tool_id: str, files: Sequence[str], **options) -> ToolResult:
        """
        Run a tool over the given files.

        Args:
            tool_id: One of the ids in ``TOOLS``.
            files: Input file paths. Empty files are skipped.
            **options: Tool options: ``criterion`` and ``mode`` for
                duplicate-remover, ``level`` for compress-pdf, ``language``
                for pdf-img-to-excel.

        Returns:
            A ToolResult naming the output file.
        """
        tool = TOOLS.get(tool_id)
        if tool is None:
            raise ValueError(f"Unknown tool '{tool_id}': this tool is currently in development.")

        inputs = self._validate_inputs(tool, files)

        if self.usage is not None:
            self.usage.check()

        handler = getattr(self, "_run_" + tool.id.replace("-", "_"))
        result = handler(inputs, **options)

        if self.usage is not None:
            self.usage.record()

        print(f"[SAVED] {result.output_path}")
        return result

    def _validate_inputs(self, tool: Tool, files: Sequence[str]) -> list[str]:
        inputs = []
        for path in files:
            if not os.path.isfile(path):
                raise FileNotFoundError(f"Input file not found: {path}")
            if os.path.getsize(path) == 0:
                print(f"[SKIP] Empty file: {path}")
                continue
            _, ext = os.path.splitext(path.lower())
            if ext not in tool.accept:
                raise ValueError(
                    f"{tool.title} does not accept {ext or 'extensionless'} files: {path}"
                )
            inputs.append(path)

        if not inputs:
            raise ValueError(f"No usable input files for {tool.title}")
        if len(inputs) > 1 and not tool.multiple:
            raise ValueError(f"{tool.title} takes a single file, got {len(inputs)}")
        return inputs

    def _out(self, name: str) -> str:
        return os.path.join(self.output_dir, name)

    def _run_jpg_to_pdf(self, files, **options) -> ToolResult:
        print(f"[IMG] Combining {len(files)} image(s) into PDF")
        out = ImageConverter.to_pdf(files, self._out("combined_images.pdf"))
        return ToolResult("jpg-to-pdf", out, "Images combined", f"{len(files)} page(s)")

    def _run_compress_pdf(self, files, level: str = "Standard", **options) -> ToolResult:
        level = PDFConverter.level_name(level)
        source = files[0]
        print(f"[PDF] Compressing ({level}): {source}")
        name = f"compressed_{level.lower()}_{_safe_name(source)}"
        out = PDFConverter.compress(source, self._out(name), level=level)
        before, after = os.path.getsize(source), os.path.getsize(out)
        return ToolResult(
            "compress-pdf", out, "PDF compressed", f"{before} -> {after} bytes"
        )

    def _run_pdf_to_jpg(self, files, **options) -> ToolResult:
        source = files[0]
        print(f"[PDF] Extracting pages: {source}")
        out = self._out("extracted_pages.zip")
        count = PDFConverter.to_images(source, out)
        return ToolResult("pdf-to-jpg", out, "Pages extracted", f"{count} page(s)")

    def _run_excel_to_pdf(self, files, **options) -> ToolResult:
        source = files[0]
        print(f"[XLSX] Rendering to PDF: {source}")
        out = SpreadsheetConverter.to_pdf(source, self._out("spreadsheet.pdf"))
        return ToolResult("excel-to-pdf", out, "Spreadsheet converted")

    def _run_clean_excel(self, files, **options) -> ToolResult:
        source = files[0]
        print(f"[XLSX] Cleaning: {source}")
        out = self._out("cleaned_data.xlsx")
        changed = SpreadsheetConverter.clean(source, out)
        return ToolResult("clean-excel", out, "Spreadsheet cleaned", f"{changed} cell(s) changed")

    def _run_duplicate_remover(
        self, files, criterion: str = "row", mode: str = "remove", **options
    ) -> ToolResult:
        policy = DuplicatePolicy.from_options(criterion, mode)
        source = files[0]
        print(f"[XLSX] Duplicates ({policy.criterion.value}/{policy.action.value}): {source}")
        # The rewritten workbook carries no macros, so it is always plain .xlsx
        out = self._out(f"processed_{_safe_name(source, ext='.xlsx')}")
        table = SpreadsheetConverter.process_duplicates(source, policy, out)
        if policy.action is Action.REMOVE:
            details = f"{len(table.duplicates)} duplicate row(s) removed"
        else:
            details = f"{len(table.highlights)} duplicate row(s) highlighted"
        return ToolResult("duplicate-remover", out, "Duplicates processed", details)

    def _run_pdf_img_to_excel(self, files, language: str = "English", **options) -> ToolResult:
        source = files[0]
        print(f"[OCR] Extracting table ({language}): {source}")
        if PDFConverter.can_handle(source):
            rows = []
            for page in PDFConverter.render_page_images(source):
                rows.extend(ImageConverter.to_table(page, language=language))
        else:
            rows = ImageConverter.to_table(source, language=language)

        out = SpreadsheetConverter.export(rows, self._out("extracted_data.xlsx"))
        return ToolResult("pdf-img-to-excel", out, "Data extraction complete", f"{len(rows)} row(s)")

    @staticmethod
    def supported_tools() -> dict:
        """Return a dictionary of tool id -> (title, accepted extensions)."""
        return {tool.id: (tool.title, list(tool.accept)) for tool in TOOLS.values()}


def _safe_name(file_path: str, ext: Optional[str] = None) -> str:
    """Sanitize a file's basename for use in an output filename."""
    basename = os.path.basename(file_path)
    name, source_ext = os.path.splitext(basename)
    safe_name = "".join(c if c.isalnum() or c in "-_ " else "_" for c in name)
    return f"{safe_name}{ext or source_ext.lower()}"

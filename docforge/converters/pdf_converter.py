"""
PDF Converter

PDF compression, page rendering, text extraction and HTML-to-PDF layout,
all delegated to PyMuPDF.
"""

import os
import zipfile
from typing import Iterator


class PDFConverter:
    """Operations on PDF files backed by PyMuPDF."""

    SUPPORTED_EXTENSIONS = {".pdf"}

    # PyMuPDF save options per compression level, mildest first
    COMPRESSION_LEVELS = {
        "Standard": {"garbage": 1, "deflate": True},
        "High": {"garbage": 3, "deflate": True, "clean": True},
        "Maximum": {
            "garbage": 4,
            "deflate": True,
            "clean": True,
            "deflate_images": True,
            "deflate_fonts": True,
        },
    }
    DEFAULT_DPI = 150

    @staticmethod
    def can_handle(file_path: str) -> bool:
        _, ext = os.path.splitext(file_path.lower())
        return ext in PDFConverter.SUPPORTED_EXTENSIONS

    @staticmethod
    def level_name(level: str) -> str:
        """Resolve a compression level case-insensitively to its canonical name."""
        for name in PDFConverter.COMPRESSION_LEVELS:
            if name.lower() == str(level).strip().lower():
                return name
        raise ValueError(
            f"Unknown compression level: {level}. "
            f"Choose from {', '.join(PDFConverter.COMPRESSION_LEVELS)}"
        )

    @staticmethod
    def compress(file_path: str, output_path: str, level: str = "Standard") -> str:
        """Rewrite a PDF with the save options of the given level."""
        options = PDFConverter.COMPRESSION_LEVELS[PDFConverter.level_name(level)]
        doc = _open(file_path)
        try:
            doc.save(output_path, **options)
        finally:
            doc.close()
        return output_path

    @staticmethod
    def to_images(file_path: str, output_path: str, dpi: int = DEFAULT_DPI) -> int:
        """
        Render every page to JPEG and pack the images into a ZIP archive.

        Returns the number of pages written.
        """
        doc = _open(file_path)
        count = 0
        try:
            with zipfile.ZipFile(output_path, "w", zipfile.ZIP_DEFLATED) as archive:
                for i, page in enumerate(doc):
                    pix = page.get_pixmap(dpi=dpi)
                    archive.writestr(f"page_{i + 1:03d}.jpg", pix.tobytes("jpeg"))
                    count += 1
        finally:
            doc.close()
        return count

    @staticmethod
    def render_page_images(file_path: str, dpi: int = DEFAULT_DPI) -> Iterator:
        """Yield each page as a Pillow RGB image."""
        from PIL import Image

        doc = _open(file_path)
        try:
            for page in doc:
                pix = page.get_pixmap(dpi=dpi)
                yield Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
        finally:
            doc.close()

    @staticmethod
    def extract_text(file_path: str) -> str:
        """Return the plain text of all pages, separated by blank lines."""
        doc = _open(file_path)
        try:
            pages = [page.get_text("text").strip() for page in doc]
        finally:
            doc.close()
        return "\n\n".join(p for p in pages if p)

    @staticmethod
    def html_to_pdf(html: str, output_path: str, css: str = "") -> str:
        """Lay out an HTML fragment onto as many A4 pages as it needs."""
        fitz = _fitz()
        story = fitz.Story(html=html, user_css=css or None)
        writer = fitz.DocumentWriter(output_path)
        mediabox = fitz.paper_rect("a4")
        where = mediabox + (36, 36, -36, -36)

        more = 1
        while more:
            device = writer.begin_page(mediabox)
            more, _ = story.place(where)
            story.draw(device)
            writer.end_page()
        writer.close()
        return output_path


def _fitz():
    try:
        import fitz  # pymupdf
    except ImportError:
        raise RuntimeError("pymupdf is not installed. Run: pip install pymupdf")
    return fitz


def _open(file_path: str):
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"PDF file not found: {file_path}")
    return _fitz().open(file_path)

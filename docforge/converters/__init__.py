from .pdf_converter import PDFConverter
from .image_converter import ImageConverter
from .spreadsheet_converter import SpreadsheetConverter

__all__ = ["PDFConverter", "ImageConverter", "SpreadsheetConverter"]

"""
DocForge - Spreadsheet, PDF and Image Conversion Toolkit

Cleans, deduplicates and converts spreadsheets, PDFs and images. The
conversions themselves are delegated to openpyxl, PyMuPDF, Pillow and
Tesseract; DocForge shapes the inputs and outputs around them.
"""

__version__ = "1.0.0"

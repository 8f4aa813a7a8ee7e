"""
Image Converter

Combines images into a PDF with Pillow and reads tabular text out of
images with Tesseract OCR.
"""

import os
import re
from typing import Sequence


class ImageConverter:
    """Image-to-PDF and image-to-table conversion."""

    SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".tiff", ".tif", ".bmp", ".gif", ".webp"}

    # Display name -> Tesseract language code
    OCR_LANGUAGES = {
        "English": "eng",
        "Hindi": "hin",
        "Spanish": "spa",
        "French": "fra",
        "German": "deu",
        "Chinese (Simplified)": "chi_sim",
        "Japanese": "jpn",
        "Arabic": "ara",
        "Russian": "rus",
        "Portuguese": "por",
    }
    PDF_RESOLUTION = 100.0

    @staticmethod
    def can_handle(file_path: str) -> bool:
        _, ext = os.path.splitext(file_path.lower())
        return ext in ImageConverter.SUPPORTED_EXTENSIONS

    @staticmethod
    def to_pdf(file_paths: Sequence[str], output_path: str) -> str:
        """Combine images, in order, into one PDF with a page per image."""
        if not file_paths:
            raise ValueError("No images provided")

        Image = _pil_image()
        pages = []
        for path in file_paths:
            if not os.path.isfile(path):
                raise FileNotFoundError(f"Image file not found: {path}")
            with Image.open(path) as img:
                pages.append(img.convert("RGB"))

        first, rest = pages[0], pages[1:]
        first.save(
            output_path,
            "PDF",
            save_all=True,
            append_images=rest,
            resolution=ImageConverter.PDF_RESOLUTION,
        )
        return output_path

    @staticmethod
    def language_code(language: str) -> str:
        """Map a display language (or a raw Tesseract code) to a Tesseract code."""
        if language in ImageConverter.OCR_LANGUAGES:
            return ImageConverter.OCR_LANGUAGES[language]
        if language in ImageConverter.OCR_LANGUAGES.values():
            return language
        raise ValueError(
            f"Unsupported OCR language: {language}. "
            f"Choose from {', '.join(ImageConverter.OCR_LANGUAGES)}"
        )

    @staticmethod
    def to_table(image, language: str = "English") -> list[list[str]]:
        """
        OCR an image and split its text into rows and cells.

        ``image`` may be a path or a Pillow image. Each non-blank text line
        becomes a row; cells are separated by tabs or runs of two or more
        spaces.
        """
        lang = ImageConverter.language_code(language)
        try:
            import pytesseract
        except ImportError:
            raise RuntimeError("pytesseract is not installed. Run: pip install pytesseract")

        if isinstance(image, str):
            if not os.path.isfile(image):
                raise FileNotFoundError(f"Image file not found: {image}")
            with _pil_image().open(image) as img:
                text = pytesseract.image_to_string(img, lang=lang)
        else:
            text = pytesseract.image_to_string(image, lang=lang)

        return text_to_rows(text)


_CELL_SPLIT_RE = re.compile(r"\t+| {2,}")


def text_to_rows(text: str) -> list[list[str]]:
    """Split OCR text into table rows."""
    rows = []
    for line in text.splitlines():
        if not line.strip():
            continue
        rows.append([cell.strip() for cell in _CELL_SPLIT_RE.split(line.strip())])
    return rows


def _pil_image():
    try:
        from PIL import Image
    except ImportError:
        raise RuntimeError("Pillow is not installed. Run: pip install Pillow")
    return Image

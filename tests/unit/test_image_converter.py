"""
Unit tests for the image converter.
"""

from unittest.mock import patch

import fitz
import pytest
from PIL import Image

from docforge.converters.image_converter import ImageConverter, text_to_rows
from tests.fixtures import OCR_TEXT


class TestToPdf:
    """Tests for combining images into a PDF."""

    def test_one_page_per_image(self, sample_images, tmp_path):
        """Test page count and order of the combined PDF."""
        out = tmp_path / "combined.pdf"
        ImageConverter.to_pdf([str(p) for p in sample_images], str(out))

        doc = fitz.open(str(out))
        assert doc.page_count == 2
        # First image is landscape, second portrait
        assert doc[0].rect.width > doc[0].rect.height
        assert doc[1].rect.width < doc[1].rect.height
        doc.close()

    def test_no_images(self, tmp_path):
        """Test that an empty list is rejected."""
        with pytest.raises(ValueError, match="No images"):
            ImageConverter.to_pdf([], str(tmp_path / "out.pdf"))

    def test_missing_image(self, tmp_path):
        """Test that a missing image raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ImageConverter.to_pdf([str(tmp_path / "nope.png")], str(tmp_path / "out.pdf"))


class TestLanguages:
    """Tests for OCR language mapping."""

    @pytest.mark.parametrize(
        "language,code",
        [("English", "eng"), ("Chinese (Simplified)", "chi_sim"), ("German", "deu"), ("por", "por")],
    )
    def test_language_code(self, language, code):
        assert ImageConverter.language_code(language) == code

    def test_unknown_language(self):
        with pytest.raises(ValueError, match="Unsupported OCR language"):
            ImageConverter.language_code("Klingon")


class TestTextToRows:
    """Tests for splitting OCR text into cells."""

    def test_split_on_tabs_and_space_runs(self):
        """Test that tabs and wide gaps separate cells but single spaces do not."""
        assert text_to_rows(OCR_TEXT) == [
            ["Item", "Price"],
            ["Paneer Tikka", "240"],
            ["Naan", "40"],
        ]

    def test_blank_text(self):
        assert text_to_rows("\n  \n") == []


class TestToTable:
    """Tests for OCR table extraction."""

    def test_from_path(self, sample_images):
        """Test OCR of an image file with the mapped language code."""
        with patch("pytesseract.image_to_string", return_value=OCR_TEXT) as ocr:
            rows = ImageConverter.to_table(str(sample_images[0]), language="French")

        assert rows[0] == ["Item", "Price"]
        assert ocr.call_args.kwargs["lang"] == "fra"

    def test_from_pil_image(self):
        """Test OCR of an in-memory image."""
        img = Image.new("RGB", (10, 10))
        with patch("pytesseract.image_to_string", return_value="a  b") as ocr:
            rows = ImageConverter.to_table(img)

        assert rows == [["a", "b"]]
        assert ocr.call_args.args[0] is img

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ImageConverter.to_table(str(tmp_path / "missing.png"))

    def test_unknown_language_checked_first(self, sample_images):
        """Test that the language is validated before OCR runs."""
        with patch("pytesseract.image_to_string") as ocr:
            with pytest.raises(ValueError):
                ImageConverter.to_table(str(sample_images[0]), language="Klingon")
        ocr.assert_not_called()

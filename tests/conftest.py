"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import datetime
from pathlib import Path
import pytest

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from docforge.converters.spreadsheet_converter import SpreadsheetConverter
from docforge.core import DocForge
from docforge.dedupe import Table
from docforge.usage import DailyUsageCounter
from tests.fixtures import CONTACTS_TABLE, MENU_TABLE, ORDERS_TABLE


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark as integration test")


# ============================================================================
# Helpers
# ============================================================================


class FakeClock:
    """Callable clock whose time can be moved by tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def write_xlsx(path: Path, rows, sheet_title: str = "Sheet1") -> Path:
    """Write rows to a workbook and return its path."""
    SpreadsheetConverter.write_table(Table(rows=[list(r) for r in rows]), str(path), sheet_title)
    return path


# ============================================================================
# Engine Fixtures
# ============================================================================


@pytest.fixture
def output_dir(tmp_path):
    """Directory for conversion outputs."""
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def engine(output_dir):
    """Create an engine writing into the test output directory."""
    return DocForge(output_dir=str(output_dir))


@pytest.fixture
def clock():
    """Provide a controllable clock starting mid-morning."""
    return FakeClock(datetime(2025, 3, 10, 9, 30, 0))


@pytest.fixture
def usage_counter(clock):
    """Create a small usage counter driven by the fake clock."""
    return DailyUsageCounter(limit=3, warning_at=2, clock=clock)


# ============================================================================
# File Fixtures
# ============================================================================


@pytest.fixture
def orders_xlsx(tmp_path):
    """Workbook holding the orders table."""
    return write_xlsx(tmp_path / "orders.xlsx", ORDERS_TABLE)


@pytest.fixture
def contacts_xlsx(tmp_path):
    """Workbook holding the contacts table."""
    return write_xlsx(tmp_path / "contacts.xlsx", CONTACTS_TABLE)


@pytest.fixture
def menu_xlsx(tmp_path):
    """Workbook holding the menu table."""
    return write_xlsx(tmp_path / "menu.xlsx", MENU_TABLE, sheet_title="Menu")


@pytest.fixture
def sample_pdf(tmp_path):
    """Create a three-page PDF with a line of text per page."""
    import fitz

    path = tmp_path / "sample.pdf"
    doc = fitz.open()
    for i in range(3):
        page = doc.new_page()
        page.insert_text((72, 72), f"Page {i + 1} of the sample report")
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def sample_images(tmp_path):
    """Create two small images in different formats."""
    from PIL import Image

    red = tmp_path / "red.png"
    blue = tmp_path / "blue.jpg"
    Image.new("RGBA", (40, 30), (255, 0, 0, 255)).save(red)
    Image.new("RGB", (30, 40), (0, 0, 255)).save(blue)
    return [red, blue]


@pytest.fixture
def empty_file(tmp_path):
    """A zero-byte upload."""
    path = tmp_path / "empty.xlsx"
    path.write_bytes(b"")
    return path

# Test fixtures
from .sample_tables import (
    ORDERS_TABLE,
    CONTACTS_TABLE,
    EMPTY_FIRST_COLUMN_TABLE,
    MENU_TABLE,
    OCR_TEXT,
)

__all__ = [
    "ORDERS_TABLE",
    "CONTACTS_TABLE",
    "EMPTY_FIRST_COLUMN_TABLE",
    "MENU_TABLE",
    "OCR_TEXT",
]

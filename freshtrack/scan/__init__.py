"""QR payload parsing and validation."""

from .models import (
    REQUIRED_FIELDS,
    Category,
    GroceryItem,
    InvalidItem,
    ScannedItem,
    ScanResult,
)
from .validator import validate

__all__ = [
    "validate",
    "ScanResult",
    "ScannedItem",
    "GroceryItem",
    "InvalidItem",
    "Category",
    "REQUIRED_FIELDS",
]

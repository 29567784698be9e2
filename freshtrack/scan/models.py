"""Data models for scanned grocery payloads."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import date

logger = logging.getLogger(__name__)

# Fixed order in which required fields are checked and reported
REQUIRED_FIELDS: tuple[str, ...] = (
    "item_name",
    "expiry_date",
    "purchase_date",
    "category",
)

UNKNOWN_ITEM_LABEL = "Unknown Item"
NOT_AN_OBJECT_LABEL = "An item was not a valid object"


class Category(str, enum.Enum):
    PRODUCE = "Produce"
    DAIRY = "Dairy"
    MEAT = "Meat"
    PANTRY = "Pantry"
    FROZEN = "Frozen"
    OTHER = "Other"

    @classmethod
    def lookup(cls, value: str) -> Category | None:
        """Match a category name case-insensitively."""
        needle = value.strip().lower()
        for member in cls:
            if member.value.lower() == needle:
                return member
        return None

    @classmethod
    def parse(cls, value: str) -> Category:
        """Like :meth:`lookup`, but unknown names fall back to OTHER."""
        member = cls.lookup(value)
        if member is None:
            logger.debug("Unknown category %r mapped to %s", value, cls.OTHER.value)
            return cls.OTHER
        return member


@dataclass(frozen=True)
class ScannedItem:
    """A validated grocery item that has not been assigned an id yet."""

    item_name: str
    category: Category
    purchase_date: date
    expiry_date: date

    def to_dict(self) -> dict:
        return {
            "item_name": self.item_name,
            "category": self.category.value,
            "purchase_date": self.purchase_date.isoformat(),
            "expiry_date": self.expiry_date.isoformat(),
        }


@dataclass(frozen=True)
class GroceryItem:
    """A grocery item owned by the inventory store."""

    id: str
    item_name: str
    category: Category
    purchase_date: date
    expiry_date: date

    @classmethod
    def from_scanned(cls, item: ScannedItem, item_id: str) -> GroceryItem:
        return cls(
            id=item_id,
            item_name=item.item_name,
            category=item.category,
            purchase_date=item.purchase_date,
            expiry_date=item.expiry_date,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "item_name": self.item_name,
            "category": self.category.value,
            "purchase_date": self.purchase_date.isoformat(),
            "expiry_date": self.expiry_date.isoformat(),
        }


@dataclass
class InvalidItem:
    """A rejected payload entry and the reasons it was rejected.

    This is a report collected alongside the valid items, never raised.
    """

    item_label: str
    missing_fields: list[str] = field(default_factory=list)
    invalid_fields: list[str] = field(default_factory=list)

    def describe(self) -> str:
        parts: list[str] = []
        if self.missing_fields:
            parts.append(f"is missing: {', '.join(self.missing_fields)}")
        if self.invalid_fields:
            parts.append(f"has invalid: {', '.join(self.invalid_fields)}")
        if not parts:
            return self.item_label
        return f"{self.item_label} {'; '.join(parts)}"


@dataclass
class ScanResult:
    """Outcome of validating one scanned payload."""

    valid: list[ScannedItem] = field(default_factory=list)
    errors: list[InvalidItem] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def __bool__(self) -> bool:
        return bool(self.valid)

    def summary(self) -> str:
        """One line per rejected entry, as shown to the user after a scan."""
        return "\n".join(f"- {e.describe()}" for e in self.errors)

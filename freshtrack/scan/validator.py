"""Validation of raw QR payload text into grocery items."""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any

from ..errors import ParseError
from .models import (
    NOT_AN_OBJECT_LABEL,
    REQUIRED_FIELDS,
    UNKNOWN_ITEM_LABEL,
    Category,
    InvalidItem,
    ScannedItem,
    ScanResult,
)

logger = logging.getLogger(__name__)


def validate(raw: str) -> ScanResult:
    """Parse a scanned payload into valid items and per-item errors.

    The payload is a JSON object or a JSON array of objects. A bad entry
    never stops the rest of the batch from being validated.

    Raises:
        ParseError: If the payload is empty or is not valid JSON.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ParseError("Scanned data is empty or not a string.")

    try:
        parsed = json.loads(raw)
    except (ValueError, RecursionError) as e:
        # Oversized integers and deep nesting fail outside JSONDecodeError
        raise ParseError(
            f"Scanned data does not contain valid JSON: {e}"
        ) from e

    entries = parsed if isinstance(parsed, list) else [parsed]

    result = ScanResult()
    for entry in entries:
        if not isinstance(entry, dict):
            result.errors.append(InvalidItem(item_label=NOT_AN_OBJECT_LABEL))
            continue

        item, error = _validate_entry(entry)
        if error is not None:
            logger.warning("Rejected scanned item: %s", error.describe())
            result.errors.append(error)
        else:
            result.valid.append(item)

    logger.info(
        "Validated scan: %d valid, %d rejected",
        len(result.valid),
        len(result.errors),
    )
    return result


def _validate_entry(
    entry: dict[str, Any],
) -> tuple[ScannedItem | None, InvalidItem | None]:
    missing = [f for f in REQUIRED_FIELDS if _is_missing(entry.get(f))]

    invalid: list[str] = []
    name = entry.get("item_name")
    if "item_name" not in missing and not isinstance(name, str):
        invalid.append("item_name")

    dates: dict[str, date] = {}
    for key in ("expiry_date", "purchase_date"):
        if key in missing:
            continue
        parsed = _parse_date(entry[key])
        if parsed is None:
            invalid.append(key)
        else:
            dates[key] = parsed

    category = entry.get("category")
    if "category" not in missing and not isinstance(category, str):
        invalid.append("category")

    if missing or invalid:
        return None, InvalidItem(
            item_label=_label_for(name),
            missing_fields=missing,
            invalid_fields=[f for f in REQUIRED_FIELDS if f in invalid],
        )

    return (
        ScannedItem(
            item_name=name.strip(),
            category=Category.parse(category),
            purchase_date=dates["purchase_date"],
            expiry_date=dates["expiry_date"],
        ),
        None,
    )


def _label_for(name: Any) -> str:
    if isinstance(name, str):
        return name.strip() or UNKNOWN_ITEM_LABEL
    return str(name) if name else UNKNOWN_ITEM_LABEL


def _is_missing(value: Any) -> bool:
    """Absent, null, blank or otherwise falsy values count as missing."""
    if isinstance(value, str):
        return not value.strip()
    return not value


def _parse_date(value: Any) -> date | None:
    """Parse an ISO date, accepting a full timestamp by its date part."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    try:
        # "2025-01-10T08:00:00Z" and "2025-01-10 08:00" → "2025-01-10"
        return date.fromisoformat(text[:10])
    except ValueError:
        return None

"""Expiry status classification."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, datetime

EXPIRING_SOON_DAYS = 3


class ExpiryStatus(str, enum.Enum):
    EXPIRED = "Expired"
    EXPIRING_SOON = "ExpiringSoon"
    FRESH = "Fresh"
    UNKNOWN = "Unknown"


# Display order: most urgent first
_RANKS: dict[ExpiryStatus, int] = {
    ExpiryStatus.EXPIRED: 0,
    ExpiryStatus.EXPIRING_SOON: 1,
    ExpiryStatus.FRESH: 2,
    ExpiryStatus.UNKNOWN: 3,
}


@dataclass(frozen=True)
class ExpiryInfo:
    status: ExpiryStatus
    days_remaining: int

    @property
    def rank(self) -> int:
        return _RANKS[self.status]

    @property
    def label(self) -> str:
        """Short status text for an inventory listing."""
        match self.status:
            case ExpiryStatus.EXPIRED:
                return "Expired"
            case ExpiryStatus.EXPIRING_SOON:
                return f"Expires in {self.days_remaining}d"
            case ExpiryStatus.FRESH:
                return "Fresh"
            case _:
                return "N/A"


def _as_date(value: date | datetime) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def classify(expiry_date: date | datetime | None, today: date | datetime) -> ExpiryInfo:
    """Classify an expiry date relative to ``today``.

    Only calendar dates are compared; any time of day is dropped. Items
    expiring within ``EXPIRING_SOON_DAYS`` days (inclusive, including
    today) are ``EXPIRING_SOON``.
    """
    if expiry_date is None:
        return ExpiryInfo(ExpiryStatus.UNKNOWN, 0)

    days = (_as_date(expiry_date) - _as_date(today)).days
    if days < 0:
        status = ExpiryStatus.EXPIRED
    elif days <= EXPIRING_SOON_DAYS:
        status = ExpiryStatus.EXPIRING_SOON
    else:
        status = ExpiryStatus.FRESH
    return ExpiryInfo(status, days)

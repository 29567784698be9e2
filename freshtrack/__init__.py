"""Grocery expiry tracking: scan validation, inventory and expiry alerts."""

from .config import FreshTrackConfig, load_config
from .engine import FreshTrackEngine
from .errors import DeliveryError, FreshTrackError, ParseError
from .expiry import ExpiryInfo, ExpiryStatus, classify
from .inventory import InventoryStore, new_item_id
from .notifier import AlertReason, ExpiryNotifier, Notification
from .notify import DeliveryChannel, create_channel
from .scan import (
    Category,
    GroceryItem,
    InvalidItem,
    ScannedItem,
    ScanResult,
    validate,
)

__all__ = [
    "validate",
    "ScanResult",
    "ScannedItem",
    "GroceryItem",
    "InvalidItem",
    "Category",
    "InventoryStore",
    "new_item_id",
    "classify",
    "ExpiryInfo",
    "ExpiryStatus",
    "ExpiryNotifier",
    "Notification",
    "AlertReason",
    "DeliveryChannel",
    "create_channel",
    "FreshTrackEngine",
    "FreshTrackConfig",
    "load_config",
    "FreshTrackError",
    "ParseError",
    "DeliveryError",
]

"""Expiry notifications for items in the inventory.

The notifier reacts to two events only: items being added to the store, and
the calendar day changing. Each alert is keyed by ``(item_id, day)`` so a
given item is announced at most once per day, however often it is evaluated.

* When items are added, only those items are evaluated, so an insert never
  re-announces unrelated items on the same day.
* When the day changes, every item in the store is evaluated once for the
  new day.

An item is announced when it is exactly three days from expiry, or when it
expires today or has already expired.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime

from .config import DEFAULT_TITLE
from .errors import DeliveryError
from .expiry import EXPIRING_SOON_DAYS, classify
from .inventory import InventoryStore
from .notify import DeliveryChannel
from .scan.models import GroceryItem

logger = logging.getLogger(__name__)


class AlertReason(str, enum.Enum):
    EXPIRING_SOON = "ExpiringSoon"
    EXPIRED_TODAY = "ExpiredToday"
    ALREADY_EXPIRED = "AlreadyExpired"


_MESSAGES: dict[AlertReason, str] = {
    AlertReason.EXPIRING_SOON: "{name} will expire in 3 days",
    AlertReason.EXPIRED_TODAY: "{name} expires today!",
    AlertReason.ALREADY_EXPIRED: "{name} has expired!",
}


@dataclass(frozen=True)
class NotificationRecord:
    item_id: str
    day_bucket: date
    reason: AlertReason


@dataclass(frozen=True)
class Notification:
    """A notification request handed to the delivery channel."""

    item_id: str
    item_name: str
    reason: AlertReason
    day_bucket: date
    title: str
    body: str


DeliveryErrorHandler = Callable[[Notification, DeliveryError], None]


def alert_reason(days_remaining: int) -> AlertReason | None:
    """Return why an item should be announced, or None if it should not."""
    if days_remaining == EXPIRING_SOON_DAYS:
        return AlertReason.EXPIRING_SOON
    if days_remaining == 0:
        return AlertReason.EXPIRED_TODAY
    if days_remaining < 0:
        return AlertReason.ALREADY_EXPIRED
    return None


class ExpiryNotifier:
    """Decides when to notify about expiring items and sends the notifications.

    Subscribes to ``store`` on construction. Deliveries are fire-and-forget:
    inside a running event loop each one becomes a task (see :meth:`drain`);
    otherwise it runs to completion before the next item is evaluated. A
    failed delivery is logged and passed to ``on_delivery_error``; it never
    stops the remaining items from being evaluated.
    """

    def __init__(
        self,
        store: InventoryStore,
        channel: DeliveryChannel,
        *,
        clock: Callable[[], datetime] = datetime.now,
        title: str = DEFAULT_TITLE,
        on_delivery_error: DeliveryErrorHandler | None = None,
    ) -> None:
        self._store = store
        self._channel = channel
        self._clock = clock
        self._title = title
        self._on_delivery_error = on_delivery_error
        self._today: date = clock().date()
        self._records: dict[tuple[str, date], NotificationRecord] = {}
        self._pending: set[asyncio.Task] = set()
        store.subscribe(self.on_items_added)

    @property
    def today(self) -> date:
        return self._today

    def close(self) -> None:
        """Stop reacting to inventory changes."""
        self._store.unsubscribe(self.on_items_added)

    def on_items_added(self, item_ids: Iterable[str]) -> list[Notification]:
        """Evaluate newly inserted items for the current day."""
        items = [
            item
            for item in (self._store.get(i) for i in item_ids)
            if item is not None
        ]
        return self._evaluate(items)

    def on_day_change(self, today: date) -> list[Notification]:
        """Move to a new day and evaluate every item in the store."""
        self._today = today
        self._records = {
            key: record
            for key, record in self._records.items()
            if record.day_bucket >= today
        }
        items = self._store.filter()
        logger.info("Day changed to %s, checking %d item(s)", today, len(items))
        return self._evaluate(items)

    def check_day(self) -> bool:
        """Fire a day change if the clock has moved to another date.

        Returns:
            True if a day change was fired.
        """
        today = self._clock().date()
        if today == self._today:
            return False
        self.on_day_change(today)
        return True

    async def drain(self) -> None:
        """Wait for all deliveries started so far to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def _evaluate(self, items: Iterable[GroceryItem]) -> list[Notification]:
        today = self._today
        emitted: list[Notification] = []
        for item in items:
            info = classify(item.expiry_date, today)
            reason = alert_reason(info.days_remaining)
            if reason is None:
                continue

            key = (item.id, today)
            if key in self._records:
                logger.debug("Already notified about %s on %s", item.item_name, today)
                continue

            self._records[key] = NotificationRecord(item.id, today, reason)
            notification = Notification(
                item_id=item.id,
                item_name=item.item_name,
                reason=reason,
                day_bucket=today,
                title=self._title,
                body=_MESSAGES[reason].format(name=item.item_name),
            )
            emitted.append(notification)
            self._dispatch(notification)
        return emitted

    def _dispatch(self, notification: Notification) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._deliver(notification))
            return

        task = loop.create_task(self._deliver(notification))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, notification: Notification) -> None:
        try:
            await self._channel.deliver(notification.title, notification.body)
        except Exception as e:
            if isinstance(e, DeliveryError):
                error = e
            else:
                error = DeliveryError(str(e))
                error.__cause__ = e
            logger.error(
                "Failed to deliver notification for %s: %s",
                notification.item_name,
                error,
            )
            if self._on_delivery_error is not None:
                try:
                    self._on_delivery_error(notification, error)
                except Exception:
                    logger.exception(
                        "Delivery error handler failed for %s", notification.item_name
                    )
        else:
            logger.info("Notification sent: %s", notification.body)

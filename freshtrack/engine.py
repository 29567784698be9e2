"""Wiring of the scan, inventory and notification components."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime

from .config import FreshTrackConfig, load_config
from .inventory import InventoryStore, new_item_id
from .notifier import DeliveryErrorHandler, ExpiryNotifier
from .notify import DeliveryChannel, create_channel
from .scan import Category, GroceryItem, ScannedItem, ScanResult, validate


class FreshTrackEngine:
    """The grocery tracking core as seen by a host application.

    The host supplies scanned text, confirms which items to keep, and owns
    the engine's lifetime. Day-change polling runs only inside
    ``async with engine:``.
    """

    def __init__(
        self,
        config: FreshTrackConfig | None = None,
        *,
        channel: DeliveryChannel | None = None,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = new_item_id,
        on_delivery_error: DeliveryErrorHandler | None = None,
    ) -> None:
        self.config = config or load_config()
        self.store = InventoryStore(id_factory=id_factory)
        self.notifier = ExpiryNotifier(
            self.store,
            channel or create_channel(self.config),
            clock=clock,
            title=self.config.notify.title,
            on_delivery_error=on_delivery_error,
        )
        self._scheduler = None

    def scan(self, raw: str) -> ScanResult:
        """Validate a scanned payload. Raises ParseError on bad payloads."""
        return validate(raw)

    def confirm(self, items: Iterable[ScannedItem]) -> list[str]:
        """Add the items the user approved and return their ids."""
        return self.store.insert(items)

    def remove(self, item_id: str) -> bool:
        return self.store.remove(item_id)

    def items(self, category: Category | str | None = None) -> list[GroceryItem]:
        return self.store.filter(category)

    async def start(self) -> None:
        from .scheduler import ExpiryScheduler

        if self._scheduler is None:
            self._scheduler = ExpiryScheduler(
                self.notifier, poll_interval=self.config.scheduler.poll_interval
            )
        self._scheduler.start()

    async def stop(self) -> None:
        if self._scheduler is not None:
            self._scheduler.stop()
        await self.notifier.drain()

    async def __aenter__(self) -> FreshTrackEngine:
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

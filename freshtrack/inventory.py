"""In-memory grocery inventory kept in expiry order."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable, Iterator

from .scan.models import Category, GroceryItem, ScannedItem

logger = logging.getLogger(__name__)

MutationListener = Callable[[list[str]], None]

ALL_CATEGORIES = "All"


def new_item_id() -> str:
    """Return a random item id (uuid4, backed by the OS CSPRNG)."""
    return str(uuid.uuid4())


class InventoryStore:
    """Owns the canonical collection of grocery items.

    Items are always held sorted ascending by ``expiry_date``; items with the
    same expiry date keep their insertion order. Listeners registered with
    :meth:`subscribe` are called with the ids added by each :meth:`insert`.
    """

    def __init__(self, id_factory: Callable[[], str] = new_item_id) -> None:
        self._id_factory = id_factory
        self._items: list[GroceryItem] = []
        self._by_id: dict[str, GroceryItem] = {}
        self._listeners: list[MutationListener] = []

    def subscribe(self, listener: MutationListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: MutationListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def insert(self, items: Iterable[ScannedItem]) -> list[str]:
        """Add confirmed items and return their newly assigned ids.

        Raises:
            ValueError: If the id factory produces an id already in use.
        """
        new_items: list[GroceryItem] = []
        seen: set[str] = set()
        for item in items:
            item_id = self._id_factory()
            if item_id in self._by_id or item_id in seen:
                raise ValueError(f"Duplicate item id generated: {item_id!r}")
            seen.add(item_id)
            new_items.append(GroceryItem.from_scanned(item, item_id))

        if not new_items:
            return []

        # sorted() is stable, so equal expiry dates keep insertion order
        self._items = sorted(
            [*self._items, *new_items], key=lambda i: i.expiry_date
        )
        for item in new_items:
            self._by_id[item.id] = item

        ids = [item.id for item in new_items]
        logger.info("Added %d item(s) to inventory", len(ids))

        for listener in list(self._listeners):
            listener(ids)
        return ids

    def remove(self, item_id: str) -> bool:
        """Remove an item by id. Returns False if it was not present."""
        item = self._by_id.pop(item_id, None)
        if item is None:
            return False
        self._items = [i for i in self._items if i.id != item_id]
        logger.info("Removed %s from inventory", item.item_name)
        return True

    def filter(self, category: Category | str | None = None) -> list[GroceryItem]:
        """Return items in expiry order, optionally restricted to a category.

        ``None`` or ``"All"`` returns every item.

        Raises:
            ValueError: If ``category`` names no known category.
        """
        if category is None:
            return list(self._items)
        if not isinstance(category, Category):
            if category.strip().lower() == ALL_CATEGORIES.lower():
                return list(self._items)
            name = category
            category = Category.lookup(name)
            if category is None:
                raise ValueError(f"Unknown category: {name!r}")
        return [i for i in self._items if i.category is category]

    def get(self, item_id: str) -> GroceryItem | None:
        return self._by_id.get(item_id)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[GroceryItem]:
        return iter(list(self._items))

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._by_id

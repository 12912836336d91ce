"""
Item source abstraction.

Supplies the current item catalog to the feed engine. Each call is a one-shot
snapshot; the engine never subscribes to changes.
"""

from typing import Any, Dict, List, Protocol, Union

from .models.item import Item

CatalogEntry = Union[Item, Dict[str, Any]]


class ItemSource(Protocol):
    """Protocol for catalog access. Implement for a database, file, or API."""

    async def get_all_items(self) -> List[CatalogEntry]:
        """Return every item currently in the inventory."""
        ...


class InMemoryItemSource:
    """Item source backed by a list held in memory. Used for tests and demos."""

    def __init__(self, items: List[CatalogEntry]):
        self._items = list(items)

    def replace(self, items: List[CatalogEntry]) -> None:
        self._items = list(items)

    async def get_all_items(self) -> List[CatalogEntry]:
        return list(self._items)

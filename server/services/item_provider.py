"""
Item Provider implementations.

Supplies the inventory catalog to the feed engine (see feed.sources.ItemSource).
Implementations: JSON file (local testing and demos) and in-memory.
"""

import asyncio
import json
from pathlib import Path
from typing import Dict, List, Optional, Union

from feed.models.item import Item, ensure_items
from feed.sources import InMemoryItemSource


class JsonItemProvider:
    """
    Item provider backed by a JSON file holding a list of item records.
    Used when ITEMS_JSON_PATH is set; the file is re-read on every call so
    each feed page sees the current snapshot.
    """

    def __init__(self, items_path: Union[Path, str]):
        self._items_path = Path(items_path)
        if not self._items_path.exists():
            raise FileNotFoundError(f"Items JSON not found: {self._items_path}")

    @property
    def path(self) -> Path:
        return self._items_path

    def _load(self) -> List[Item]:
        with open(self._items_path) as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("items", [])
        return ensure_items(data)

    def get_items(self) -> List[Item]:
        return self._load()

    def get_item(self, item_id: int) -> Optional[Item]:
        return next((i for i in self._load() if i.id == item_id), None)

    async def get_all_items(self) -> List[Item]:
        """Async path for the feed engine; file I/O runs in a worker thread."""
        return await asyncio.to_thread(self._load)


class InMemoryItemProvider(InMemoryItemSource):
    """In-memory provider with the same lookup helpers as JsonItemProvider."""

    def get_items(self) -> List[Item]:
        return ensure_items(self._items)

    def get_item(self, item_id: int) -> Optional[Item]:
        return next((i for i in self.get_items() if i.id == item_id), None)

    @classmethod
    def from_dicts(cls, records: List[Dict]) -> "InMemoryItemProvider":
        return cls(ensure_items(records))

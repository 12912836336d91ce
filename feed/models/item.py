"""
Item model — read-only view of an inventory record for the feed engine.

Used by the scorer, recovery model and reason templates instead of raw dicts.
Built from catalog/API dicts via Item.model_validate(d).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ItemStatus(str, Enum):
    """Lifecycle status of an item."""

    IN_STOCK = "in_stock"
    USED_UP = "used_up"
    EXPIRED = "expired"
    GIVEN_AWAY = "given_away"
    DISCARDED = "discarded"


class OpenStatus(str, Enum):
    """Whether the item's packaging has been opened."""

    UNOPENED = "unopened"
    OPENED = "opened"
    OTHER = "other"


class Location(BaseModel):
    """Storage location: area > container > sublocation."""

    id: int = 0
    area: str
    container: Optional[str] = None
    sublocation: Optional[str] = None

    def full_path(self) -> str:
        parts = [self.area]
        if self.container:
            parts.append(self.container)
            if self.sublocation:
                parts.append(self.sublocation)
        return " > ".join(parts)


class Tag(BaseModel):
    id: int = 0
    name: str
    color: Optional[str] = None


class Photo(BaseModel):
    id: int = 0
    uri: str
    is_main: bool = False
    display_order: int = 0


class Item(BaseModel):
    """
    Inventory item as seen by the feed engine.

    Only id, name and category are required; everything else degrades to a
    neutral value so scoring stays total for partial records.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    category: str = ""
    brand: Optional[str] = None
    price: Optional[float] = None
    added_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    open_status: OpenStatus = OpenStatus.OTHER
    status: ItemStatus = ItemStatus.IN_STOCK
    location: Optional[Location] = None
    tags: List[Tag] = Field(default_factory=list)
    photos: List[Photo] = Field(default_factory=list)

    @field_validator("open_status", mode="before")
    @classmethod
    def _missing_open_status(cls, value):
        return OpenStatus.OTHER if value is None else value

    @field_validator("status", mode="before")
    @classmethod
    def _missing_status(cls, value):
        return ItemStatus.IN_STOCK if value is None else value

    @property
    def has_brand(self) -> bool:
        return bool(self.brand and self.brand.strip())

    def tag_names(self) -> List[str]:
        """Lower-cased tag names."""
        return [t.name.lower() for t in self.tags]


def ensure_items(items: List[Union[Dict[str, Any], "Item"]]) -> List["Item"]:
    """Convert list of dicts or Items to list of Item models for use in the pipeline."""
    return [
        Item.model_validate(i) if isinstance(i, dict) else i
        for i in items
    ]

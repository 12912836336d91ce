"""Data models for the feed engine."""

from .config import DEFAULT_CONFIG, FeedConfig, resolve_config
from .item import Item, ItemStatus, Location, OpenStatus, Photo, Tag, ensure_items
from .scoring import (
    DisplayItem,
    DisplayScoreResult,
    FeedType,
    ItemDebugInfo,
    ItemDisplayState,
    ScoreBreakdown,
    ScoredItem,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DisplayItem",
    "DisplayScoreResult",
    "FeedConfig",
    "FeedType",
    "Item",
    "ItemDebugInfo",
    "ItemDisplayState",
    "ItemStatus",
    "Location",
    "OpenStatus",
    "Photo",
    "ScoreBreakdown",
    "ScoredItem",
    "Tag",
    "ensure_items",
    "resolve_config",
]

"""
Memory Lane feed engine — adaptive ranking of inventory items.

Single entry point for the feed package:
- models/: FeedConfig, Item, ScoredItem, DisplayItem, FeedType
- stages/: item_scorer, recovery, display_state, anti_loop, coverage, reasons, orchestrator
- delivery: DeliveryPacer for paced batch loading
- sources: ItemSource protocol and an in-memory implementation
"""

from .delivery import DeliveryPacer, LoadingState
from .models import (
    DEFAULT_CONFIG,
    DisplayItem,
    FeedConfig,
    FeedType,
    Item,
    ItemDebugInfo,
    ItemDisplayState,
    ItemStatus,
    Location,
    OpenStatus,
    ScoredItem,
    Tag,
    ensure_items,
    resolve_config,
)
from .sources import InMemoryItemSource, ItemSource
from .stages import (
    AntiLoopMixer,
    DisplayStateTracker,
    FeedOrchestrator,
    ItemScorer,
    RecoveryModel,
)

__all__ = [
    "DEFAULT_CONFIG",
    "AntiLoopMixer",
    "DeliveryPacer",
    "DisplayItem",
    "DisplayStateTracker",
    "FeedConfig",
    "FeedOrchestrator",
    "FeedType",
    "InMemoryItemSource",
    "Item",
    "ItemDebugInfo",
    "ItemDisplayState",
    "ItemScorer",
    "ItemSource",
    "ItemStatus",
    "LoadingState",
    "Location",
    "OpenStatus",
    "RecoveryModel",
    "ScoredItem",
    "Tag",
    "ensure_items",
    "resolve_config",
]

"""
Scoring models: per-item display state and the transient results passed
between pipeline stages.

Contains:
- FeedType: closed set of reason annotations
- ItemDisplayState: mutable per-item session state (owned by DisplayStateTracker)
- DisplayScoreResult, ScoreBreakdown, ScoredItem, DisplayItem, ItemDebugInfo
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .item import Item


class FeedType(str, Enum):
    """Reason annotation shown on a feed entry."""

    MEMORY = "memory"          # "Remember this one?"
    INSIGHT = "insight"        # "You seem to like this brand"
    DISCOVERY = "discovery"    # "A find from the bedroom"
    SUGGESTION = "suggestion"  # "Maybe open it?"


class ItemDisplayState(BaseModel):
    """Session-scoped display bookkeeping for one item."""

    item_id: int
    display_penalty: float = 0.0
    last_display_position: int = 0
    display_count: int = 0
    # Includes displays from before a per-item reset.
    total_display_count: int = 0


class DisplayScoreResult(BaseModel):
    """Display score with the terms that produced it."""

    final_score: float
    algorithm_score: float
    penalty: float
    recovery: float
    browse_distance: int
    required_distance: int


class ScoreBreakdown(BaseModel):
    """The four clamped sub-scores and their weighted total."""

    memory: float
    insight: float
    relationship: float
    needs: float
    total: float


class ScoredItem(BaseModel):
    """An item with its static and display scores."""

    item: Item
    algorithm_score: float
    display_score: float
    browse_distance: int
    display_state: Optional[ItemDisplayState] = None


class DisplayItem(BaseModel):
    """A feed entry handed to the consumer."""

    item: Item
    show_reason: bool
    reason_text: Optional[str] = None
    reason_type: Optional[FeedType] = None
    algorithm_score: float
    display_score: float


class ItemDebugInfo(BaseModel):
    """Per-item diagnostic snapshot for tooling."""

    item_id: int
    name: str
    algorithm_score: float
    final_score: float
    penalty: float
    recovery: float
    recovery_rate: float
    browse_distance: int
    required_distance: int
    display_count: int
    total_display_count: int
    last_display_position: int
    global_position: int

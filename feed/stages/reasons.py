"""
Reason annotations for feed entries (memory, insight, discovery, suggestion).

Each selected entry independently gets a reason with reason_probability;
the type is drawn uniformly and the text is templated from the item's
age, brand, category, location, tags and status.
"""

from datetime import datetime
from typing import Callable, Dict, List, Optional

import numpy as np

from ..models.config import FeedConfig
from ..models.item import Item, ItemStatus, OpenStatus
from ..models.scoring import DisplayItem, FeedType, ScoredItem
from ..utils.clock import days_since, utc_now

FEED_TYPES = (FeedType.MEMORY, FeedType.INSIGHT, FeedType.DISCOVERY, FeedType.SUGGESTION)


def memory_reason(item: Item, now: datetime) -> str:
    days = days_since(item.added_at, now)
    if item.open_status == OpenStatus.UNOPENED:
        return "Still unopened. Want to give it a try?"
    if days > 90:
        return f"It's been {days} days. Remember why you got it?"
    if days > 30:
        return "You haven't looked at this in a while. Check on it?"
    if item.price is not None and item.price >= 500:
        return "A valuable item worth keeping an eye on"
    return "Remember this one?"


def insight_reason(item: Item, now: datetime) -> str:
    if item.has_brand:
        return f"You seem to like {item.brand}"
    if item.category.strip():
        return f"Part of your {item.category} collection"
    if item.price is not None and item.price >= 1000:
        return "A high-value item that deserves some care"
    return "Quite a distinctive item"


def discovery_reason(item: Item, now: datetime) -> str:
    if item.location is not None:
        return f"A treasure found in {item.location.area}"
    if item.has_brand:
        return f"Goes well with your other {item.brand} things"
    if item.tags:
        return f"Tagged as {item.tags[0].name}"
    return "An interesting find"


def suggestion_reason(item: Item, now: datetime) -> str:
    if item.status == ItemStatus.EXPIRED:
        return "Expired. Time to deal with it?"
    if item.status == ItemStatus.USED_UP:
        return "Used up. Need a new one?"
    if item.status == ItemStatus.DISCARDED:
        return "Discarded. You can clear this record"
    if item.status == ItemStatus.GIVEN_AWAY:
        return "Given away. Note down where it went?"
    if item.open_status == OpenStatus.UNOPENED:
        return "Consider opening and using it"
    return "Might need a look"


REASON_TEMPLATES: Dict[FeedType, Callable[[Item, datetime], str]] = {
    FeedType.MEMORY: memory_reason,
    FeedType.INSIGHT: insight_reason,
    FeedType.DISCOVERY: discovery_reason,
    FeedType.SUGGESTION: suggestion_reason,
}


def reason_text(item: Item, feed_type: FeedType, now: Optional[datetime] = None) -> str:
    """Templated reason for one item and reason type."""
    return REASON_TEMPLATES[feed_type](item, now or utc_now())


def apply_reason_rule(
    scored: List[ScoredItem],
    config: FeedConfig,
    rng: np.random.Generator,
    now: Optional[datetime] = None,
) -> List[DisplayItem]:
    """Wrap each scored item as a DisplayItem; an independent trial decides its reason."""
    now = now or utc_now()
    result = []
    for entry in scored:
        show_reason = float(rng.random()) < config.reason_probability
        reason_type = None
        text = None
        if show_reason:
            reason_type = FEED_TYPES[int(rng.integers(len(FEED_TYPES)))]
            text = reason_text(entry.item, reason_type, now)
        result.append(DisplayItem(
            item=entry.item,
            show_reason=show_reason,
            reason_text=text,
            reason_type=reason_type,
            algorithm_score=entry.algorithm_score,
            display_score=entry.display_score,
        ))
    return result

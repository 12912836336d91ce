"""
Item scoring — static, catalog-relative relevance score in [0, 1].

Four dimensions, each clamped to [0, 1] before weighting:
- memory: age, value, and open status (forgotten or still-sealed items)
- insight: brand, category and price patterns across the catalog
- relationship: co-located, related and co-tagged items
- needs: lifecycle urgency, open status, value protection

The public entry point is ItemScorer.score; breakdown() exposes the sub-scores.
"""

from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from ..models.config import FeedConfig, resolve_config
from ..models.item import Item, ItemStatus, OpenStatus
from ..models.scoring import ScoreBreakdown
from ..utils.clock import days_since, utc_now
from ..utils.keywords import item_keywords

# (lower bound, bonus) pairs, checked top-down; first match wins.
Brackets = Sequence[Tuple[float, float]]

MEMORY_PRICE_BRACKETS: Brackets = (
    (2000, 0.3), (1000, 0.25), (500, 0.2), (200, 0.15), (100, 0.1), (50, 0.05),
)
BRAND_COUNT_BRACKETS: Brackets = ((5, 0.4), (3, 0.3), (2, 0.2))
CATEGORY_SHARE_BRACKETS: Brackets = ((0.3, 0.3), (0.2, 0.2), (0.1, 0.15))
PRICE_RATIO_BRACKETS: Brackets = ((2.0, 0.3), (1.5, 0.25), (0.8, 0.2), (0.5, 0.15))
LOCATION_DENSITY_BRACKETS: Brackets = ((10, 0.4), (5, 0.3), (2, 0.2))
VALUE_PROTECTION_BRACKETS: Brackets = ((500, 0.3), (200, 0.2), (50, 0.1))

MEMORY_OPEN_BONUS = {
    OpenStatus.UNOPENED: 0.3,
    OpenStatus.OPENED: 0.1,
    OpenStatus.OTHER: 0.02,
}
NEEDS_OPEN_BONUS = {
    OpenStatus.UNOPENED: 0.3,
    OpenStatus.OPENED: 0.15,
    OpenStatus.OTHER: 0.1,
}
STATUS_URGENCY = {
    ItemStatus.EXPIRED: 0.4,
    ItemStatus.USED_UP: 0.3,
    ItemStatus.IN_STOCK: 0.1,
    ItemStatus.GIVEN_AWAY: 0.05,
    ItemStatus.DISCARDED: 0.02,
}

NO_PRICE_MEMORY_BONUS = 0.1
RELATED_ITEM_BONUS = 0.05
RELATED_ITEMS_CAP = 0.3
SHARED_TAG_BONUS = 0.02
SHARED_TAGS_CAP = 0.3
RELATED_PRICE_RATIO = 2.0
MIN_SHARED_KEYWORDS = 2


def bracket(value: float, brackets: Brackets, default: float) -> float:
    """Bonus of the first bracket whose lower bound value reaches, else default."""
    for lower_bound, bonus in brackets:
        if value >= lower_bound:
            return bonus
    return default


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def _same_text(a: Optional[str], b: Optional[str]) -> bool:
    return a is not None and b is not None and a.lower() == b.lower()


def _age_bonus(days: int) -> float:
    # Strict bounds: "more than N days"
    if days > 180:
        return 0.4
    if days > 90:
        return 0.35
    if days > 30:
        return 0.25
    if days > 7:
        return 0.15
    return 0.05


def is_related(item: Item, other: Item) -> bool:
    """True if the two items share keywords, brand, category, or a price band."""
    if len(item_keywords(item) & item_keywords(other)) >= MIN_SHARED_KEYWORDS:
        return True
    if item.has_brand and _same_text(item.brand, other.brand):
        return True
    if _same_text(item.category, other.category):
        return True
    p1 = item.price or 0.0
    p2 = other.price or 0.0
    if p1 > 0 and p2 > 0:
        if max(p1 / p2, p2 / p1) <= RELATED_PRICE_RATIO:
            return True
    return False


class ItemScorer:
    """Weighted multi-dimensional score of one item against a catalog snapshot."""

    def __init__(
        self,
        config: Optional[FeedConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = resolve_config(config)
        self._clock = clock or utc_now

    def score(self, item: Item, all_items: List[Item]) -> float:
        """Static relevance score in [0, 1]."""
        return self.breakdown(item, all_items).total

    def breakdown(self, item: Item, all_items: List[Item]) -> ScoreBreakdown:
        """All four sub-scores and their weighted total."""
        cfg = self.config
        memory = self.memory_score(item)
        insight = self.insight_score(item, all_items)
        relationship = self.relationship_score(item, all_items)
        needs = self.needs_score(item)
        total = (
            memory * cfg.weight_memory
            + insight * cfg.weight_insight
            + relationship * cfg.weight_relationship
            + needs * cfg.weight_needs
        )
        return ScoreBreakdown(
            memory=memory,
            insight=insight,
            relationship=relationship,
            needs=needs,
            total=_clamp_unit(total),
        )

    def memory_score(self, item: Item) -> float:
        """Age, value and open status."""
        score = _age_bonus(days_since(item.added_at, self._clock()))
        if item.price is None:
            score += NO_PRICE_MEMORY_BONUS
        else:
            score += bracket(item.price, MEMORY_PRICE_BRACKETS, 0.02)
        score += MEMORY_OPEN_BONUS[item.open_status]
        return _clamp_unit(score)

    def insight_score(self, item: Item, all_items: List[Item]) -> float:
        """Brand loyalty, category share, and price position within the catalog."""
        score = 0.0

        if item.has_brand:
            brand_count = sum(
                1 for other in all_items
                if other.has_brand and _same_text(other.brand, item.brand)
            )
            score += bracket(brand_count, BRAND_COUNT_BRACKETS, 0.1)

        same_category = sum(1 for other in all_items if _same_text(other.category, item.category))
        category_share = same_category / len(all_items) if all_items else 0.0
        score += bracket(category_share, CATEGORY_SHARE_BRACKETS, 0.05)

        if item.price is not None:
            prices = [other.price for other in all_items if other.price is not None]
            average_price = sum(prices) / len(prices) if prices else 0.0
            ratio = item.price / average_price if average_price > 0 else 0.0
            score += bracket(ratio, PRICE_RATIO_BRACKETS, 0.1)

        return _clamp_unit(score)

    def relationship_score(self, item: Item, all_items: List[Item]) -> float:
        """Location density, related items, and shared tags."""
        score = 0.0

        if item.location is not None:
            density = sum(
                1 for other in all_items
                if other.location is not None
                and _same_text(other.location.area, item.location.area)
            )
            score += bracket(density, LOCATION_DENSITY_BRACKETS, 0.1)

        related = sum(
            1 for other in all_items
            if other.id != item.id and is_related(item, other)
        )
        score += min(related * RELATED_ITEM_BONUS, RELATED_ITEMS_CAP)

        own_tags = set(item.tag_names())
        if own_tags:
            shared = sum(
                len(own_tags & set(other.tag_names()))
                for other in all_items
                if other.id != item.id
            )
            score += min(shared * SHARED_TAG_BONUS, SHARED_TAGS_CAP)

        return _clamp_unit(score)

    def needs_score(self, item: Item) -> float:
        """Lifecycle urgency, open status, and value protection."""
        score = STATUS_URGENCY[item.status]
        score += NEEDS_OPEN_BONUS[item.open_status]
        if item.price is not None:
            score += bracket(item.price, VALUE_PROTECTION_BRACKETS, 0.0)
        return _clamp_unit(score)

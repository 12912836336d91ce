"""
Recovery model: how fast an item's display penalty wears off.

recovery_rate is a multiplicative chain over score, price, open status,
lifecycle status, category importance and brand; required_browse_distance
turns it into "how many other entries must be browsed"; recovery_amount
returns the share of the penalty restored so far, in discrete steps.
"""

from typing import Dict, Optional

from ..models.config import FeedConfig, resolve_config
from ..models.item import Item, ItemStatus, OpenStatus
from .item_scorer import Brackets, bracket

MIN_RECOVERY_RATE = 0.3
MAX_RECOVERY_RATE = 3.0
MIN_BROWSE_DISTANCE = 5
MAX_BROWSE_DISTANCE = 100

SCORE_RATE_BRACKETS: Brackets = ((0.8, 2.0), (0.6, 1.5), (0.4, 1.0), (0.2, 0.7))
PRICE_RATE_BRACKETS: Brackets = (
    (2000, 1.4), (1000, 1.3), (500, 1.1), (100, 1.0), (50, 0.9),
)
NO_PRICE_RATE = 0.9

OPEN_STATUS_RATE = {
    OpenStatus.UNOPENED: 1.3,
    OpenStatus.OPENED: 1.0,
    OpenStatus.OTHER: 0.8,
}
ITEM_STATUS_RATE = {
    ItemStatus.EXPIRED: 1.4,
    ItemStatus.USED_UP: 1.2,
    ItemStatus.IN_STOCK: 1.0,
    ItemStatus.GIVEN_AWAY: 0.8,
    ItemStatus.DISCARDED: 0.6,
}


def _importance(multiplier: float, *names: str) -> Dict[str, float]:
    return {name: multiplier for name in names}


# Lower-cased category name -> rate multiplier. Unlisted categories get 1.0.
CATEGORY_IMPORTANCE: Dict[str, float] = {
    **_importance(1.2, "electronics", "digital", "computer accessories", "数码产品", "电子设备", "电脑配件"),
    **_importance(1.3, "important documents", "certificates", "documents", "重要文件", "证件", "文档"),
    **_importance(1.2, "valuables", "jewelry", "collectibles", "贵重物品", "珠宝", "收藏品"),
    **_importance(1.3, "medicine", "medical supplies", "药品", "医疗用品"),
    **_importance(0.8, "food", "snacks", "drinks", "食品", "零食", "饮料"),
    **_importance(0.7, "consumables", "daily necessities", "cleaning supplies", "消耗品", "日用品", "清洁用品"),
    **_importance(0.6, "toys", "games", "entertainment", "玩具", "游戏", "娱乐"),
}

PREMIUM_BRANDS = (
    "apple", "iphone", "ipad", "macbook", "mac",
    "samsung", "华为", "huawei", "xiaomi", "小米",
    "sony", "canon", "nikon", "bose",
    "gucci", "louis vuitton", "hermes", "chanel",
    "nike", "adidas", "puma",
)
PREMIUM_BRAND_RATE = 1.1

PENALTY_DISTANCE_BRACKETS: Brackets = ((1.5, 1.8), (1.0, 1.5), (0.5, 1.2), (0.2, 1.0))
LIGHT_PENALTY_DISTANCE_FACTOR = 0.8

# Recovered share of the penalty by progress.
RECOVERY_STEPS: Brackets = (
    (1.0, 1.0), (0.9, 0.9), (0.8, 0.8), (0.6, 0.6), (0.4, 0.4), (0.2, 0.2), (0.1, 0.1),
)


def is_premium_brand(brand: Optional[str]) -> bool:
    if not brand:
        return False
    lowered = brand.lower()
    return any(name in lowered for name in PREMIUM_BRANDS)


class RecoveryModel:
    """Per-item penalty recovery, derived from item traits and its score."""

    def __init__(self, config: Optional[FeedConfig] = None):
        self.config = resolve_config(config)

    def recovery_rate(self, item: Item, algorithm_score: float) -> float:
        """Rate multiplier in [0.3, 3.0]; higher means the item resurfaces sooner."""
        rate = 1.0
        rate *= bracket(algorithm_score, SCORE_RATE_BRACKETS, 0.5)
        if item.price is None:
            rate *= NO_PRICE_RATE
        else:
            rate *= bracket(item.price, PRICE_RATE_BRACKETS, 0.8)
        rate *= OPEN_STATUS_RATE[item.open_status]
        rate *= ITEM_STATUS_RATE[item.status]
        rate *= CATEGORY_IMPORTANCE.get(item.category.lower(), 1.0)
        if is_premium_brand(item.brand):
            rate *= PREMIUM_BRAND_RATE
        return max(MIN_RECOVERY_RATE, min(MAX_RECOVERY_RATE, rate))

    def required_browse_distance(
        self,
        item: Item,
        algorithm_score: float,
        current_penalty: float,
    ) -> int:
        """Entries that must be browsed before the penalty is fully restored, in [5, 100]."""
        rate = self.recovery_rate(item, algorithm_score)
        adjusted = int(self.config.base_recovery_distance / rate)
        factor = bracket(current_penalty, PENALTY_DISTANCE_BRACKETS, LIGHT_PENALTY_DISTANCE_FACTOR)
        distance = int(adjusted * factor)
        return max(MIN_BROWSE_DISTANCE, min(MAX_BROWSE_DISTANCE, distance))

    def recovery_amount(
        self,
        item: Item,
        algorithm_score: float,
        current_penalty: float,
        browse_distance: int,
    ) -> float:
        """Share of current_penalty restored after browse_distance entries."""
        if current_penalty <= 0:
            return 0.0
        required = self.required_browse_distance(item, algorithm_score, current_penalty)
        progress = min(1.0, browse_distance / required)
        return current_penalty * bracket(progress, RECOVERY_STEPS, 0.0)

    def describe(
        self,
        item: Item,
        algorithm_score: float,
        current_penalty: float,
        browse_distance: int,
    ) -> Dict[str, float]:
        """Recovery internals for one item (diagnostics only)."""
        return {
            "algorithm_score": algorithm_score,
            "recovery_rate": self.recovery_rate(item, algorithm_score),
            "penalty": current_penalty,
            "required_distance": self.required_browse_distance(item, algorithm_score, current_penalty),
            "browse_distance": browse_distance,
            "recovery": self.recovery_amount(item, algorithm_score, current_penalty, browse_distance),
        }

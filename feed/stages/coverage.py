"""
Coverage rule — keep a minority share of low-scoring items in every page.

Splits the ranked list at coverage_threshold, takes coverage_ratio of the page
from the high bucket and the rest from the low bucket, then shuffles the
combined page so the two tiers are not visibly layered.
"""

import logging
import math
from typing import List

import numpy as np

from ..models.config import FeedConfig
from ..models.scoring import ScoredItem

logger = logging.getLogger(__name__)


def split_by_threshold(ranked: List[ScoredItem], threshold: float):
    """(high, low) buckets, each preserving rank order."""
    high = [s for s in ranked if s.display_score >= threshold]
    low = [s for s in ranked if s.display_score < threshold]
    return high, low


def apply_coverage_rule(
    ranked: List[ScoredItem],
    count: int,
    config: FeedConfig,
    rng: np.random.Generator,
) -> List[ScoredItem]:
    """
    Select one page from the ranked list.

    Args:
        ranked: Items in final rank order. Not mutated.
        count: Requested page size.
        config: Supplies coverage_threshold and coverage_ratio.
        rng: Shuffles the mixed page.

    Returns:
        All items when the catalog fits in one page; the top `count` when either
        bucket is empty; otherwise the mixed page. A bucket smaller than its
        quota is not padded from the other one, so the page can come back short.
    """
    if len(ranked) <= count:
        return list(ranked)

    high, low = split_by_threshold(ranked, config.coverage_threshold)
    if not high or not low:
        return ranked[:count]

    high_count = math.floor(count * config.coverage_ratio)
    low_count = count - high_count
    selected = high[:high_count] + low[:low_count]
    if len(selected) < count:
        logger.warning(
            "Coverage rule returned %d of %d requested (high=%d, low=%d)",
            len(selected), count, len(high), len(low),
        )
    return [selected[i] for i in rng.permutation(len(selected))]

#!/usr/bin/env python3
"""
Coverage Rule Tests

Tests the high/low quota that keeps low-scoring items in every page.

Test Scenarios:
---------------
1. 7 high + 13 low, count=10: quota is 9 high + 1 low, but only 8 come back
2. Catalog no larger than the page: everything is returned
3. One empty bucket: top `count` in rank order
4. Full buckets: exactly 9 high and 1 low

Run:
----
    pytest tests/test_coverage.py -v
"""

import numpy as np
import pytest

from conftest import make_item
from feed.models.config import DEFAULT_CONFIG
from feed.models.scoring import ScoredItem
from feed.stages.coverage import apply_coverage_rule, split_by_threshold


def scored(item_id: int, display_score: float) -> ScoredItem:
    return ScoredItem(
        item=make_item(item_id),
        algorithm_score=display_score,
        display_score=display_score,
        browse_distance=0,
    )


def ranked_catalog(high: int, low: int):
    entries = [scored(i, 0.9 - i * 0.01) for i in range(high)]
    entries += [scored(100 + i, 0.2 - i * 0.01) for i in range(low)]
    return entries


@pytest.fixture
def rng():
    return np.random.default_rng(0)


def test_short_high_bucket_is_not_padded(rng):
    ranked = ranked_catalog(high=7, low=13)
    page = apply_coverage_rule(ranked, 10, DEFAULT_CONFIG, rng)
    assert len(page) == 8
    high = [s for s in page if s.display_score >= 0.3]
    low = [s for s in page if s.display_score < 0.3]
    assert len(high) == 7
    assert len(low) == 1
    assert low[0].item.id == 100


def test_full_buckets_follow_quota(rng):
    ranked = ranked_catalog(high=20, low=20)
    page = apply_coverage_rule(ranked, 10, DEFAULT_CONFIG, rng)
    ids = {s.item.id for s in page}
    assert len(page) == 10
    assert ids == set(range(9)) | {100}


def test_small_catalog_returned_whole(rng):
    ranked = ranked_catalog(high=3, low=2)
    page = apply_coverage_rule(ranked, 10, DEFAULT_CONFIG, rng)
    assert page == ranked


def test_empty_low_bucket_takes_top(rng):
    ranked = ranked_catalog(high=15, low=0)
    page = apply_coverage_rule(ranked, 10, DEFAULT_CONFIG, rng)
    assert page == ranked[:10]


def test_empty_high_bucket_takes_top(rng):
    ranked = ranked_catalog(high=0, low=15)
    page = apply_coverage_rule(ranked, 10, DEFAULT_CONFIG, rng)
    assert page == ranked[:10]


def test_input_not_mutated(rng):
    ranked = ranked_catalog(high=12, low=12)
    before = [s.item.id for s in ranked]
    apply_coverage_rule(ranked, 10, DEFAULT_CONFIG, rng)
    assert [s.item.id for s in ranked] == before


def test_split_threshold_is_inclusive():
    entries = [scored(1, 0.3), scored(2, 0.29)]
    high, low = split_by_threshold(entries, 0.3)
    assert [s.item.id for s in high] == [1]
    assert [s.item.id for s in low] == [2]

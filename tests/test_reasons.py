#!/usr/bin/env python3
"""
Reason Annotation Tests

Tests the per-entry reason trial and the reason templates.

Test Scenarios:
---------------
1. Over 10,000 entries, about 10% carry a reason
2. Every shown reason has both a type and a text; hidden ones have neither
3. Templates pick the most specific text for the item

Run:
----
    pytest tests/test_reasons.py -v
"""

from collections import Counter

import numpy as np
import pytest

from conftest import FIXED_NOW, make_item
from feed.models.config import DEFAULT_CONFIG, FeedConfig
from feed.models.scoring import FeedType, ScoredItem
from feed.stages.reasons import apply_reason_rule, reason_text


def scored_entries(n: int):
    item = make_item(1, name="Kettle", category="appliances", brand="Smeg")
    entry = ScoredItem(item=item, algorithm_score=0.5, display_score=0.5, browse_distance=0)
    return [entry] * n


class TestReasonRule:

    def test_reason_frequency(self):
        page = apply_reason_rule(scored_entries(10_000), DEFAULT_CONFIG,
                                 np.random.default_rng(2024), now=FIXED_NOW)
        share = sum(1 for e in page if e.show_reason) / len(page)
        assert share == pytest.approx(0.10, abs=0.015)

    def test_reason_types_cover_all_four(self):
        page = apply_reason_rule(scored_entries(4000), DEFAULT_CONFIG,
                                 np.random.default_rng(1), now=FIXED_NOW)
        types = Counter(e.reason_type for e in page if e.show_reason)
        assert set(types) == set(FeedType)

    def test_shown_reason_is_complete(self):
        page = apply_reason_rule(scored_entries(500), DEFAULT_CONFIG,
                                 np.random.default_rng(3), now=FIXED_NOW)
        for entry in page:
            if entry.show_reason:
                assert entry.reason_type is not None
                assert entry.reason_text
            else:
                assert entry.reason_type is None
                assert entry.reason_text is None

    def test_probability_bounds(self):
        never = apply_reason_rule(scored_entries(200), FeedConfig(reason_probability=0.0),
                                  np.random.default_rng(3), now=FIXED_NOW)
        always = apply_reason_rule(scored_entries(200), FeedConfig(reason_probability=1.0),
                                   np.random.default_rng(3), now=FIXED_NOW)
        assert not any(e.show_reason for e in never)
        assert all(e.show_reason for e in always)

    def test_order_and_scores_preserved(self):
        entries = scored_entries(20)
        page = apply_reason_rule(entries, DEFAULT_CONFIG, np.random.default_rng(0), now=FIXED_NOW)
        assert [e.item.id for e in page] == [e.item.id for e in entries]
        assert all(e.display_score == 0.5 for e in page)


class TestTemplates:

    def test_memory_unopened(self):
        item = make_item(1, days_old=400, open_status="unopened")
        assert reason_text(item, FeedType.MEMORY, FIXED_NOW) == "Still unopened. Want to give it a try?"

    def test_memory_age(self):
        item = make_item(1, days_old=120, open_status="opened")
        assert reason_text(item, FeedType.MEMORY, FIXED_NOW) == (
            "It's been 120 days. Remember why you got it?"
        )

    def test_insight_brand_then_category(self):
        branded = make_item(1, brand="Muji", category="stationery")
        plain = make_item(2, category="stationery")
        assert reason_text(branded, FeedType.INSIGHT, FIXED_NOW) == "You seem to like Muji"
        assert reason_text(plain, FeedType.INSIGHT, FIXED_NOW) == "Part of your stationery collection"

    def test_discovery_location(self):
        item = make_item(1, location={"area": "Garage", "container": "Box 3"})
        assert reason_text(item, FeedType.DISCOVERY, FIXED_NOW) == "A treasure found in Garage"

    def test_discovery_tag_fallback(self):
        item = make_item(1, tags=[{"name": "camping"}])
        assert reason_text(item, FeedType.DISCOVERY, FIXED_NOW) == "Tagged as camping"

    def test_suggestion_by_status(self):
        expired = make_item(1, status="expired")
        used_up = make_item(2, status="used_up")
        assert reason_text(expired, FeedType.SUGGESTION, FIXED_NOW) == "Expired. Time to deal with it?"
        assert reason_text(used_up, FeedType.SUGGESTION, FIXED_NOW) == "Used up. Need a new one?"

#!/usr/bin/env python3
"""
Recovery Model Tests

Tests how fast a display penalty wears off.

Test Scenarios:
---------------
1. recovery_rate is clamped to [0.3, 3.0]
2. required_browse_distance is clamped to [5, 100] and grows with the penalty
3. recovery_amount is stepped and never exceeds the current penalty
4. describe() reports the same numbers as the individual calls

Run:
----
    pytest tests/test_recovery.py -v
"""

import pytest

from conftest import make_item
from feed.stages.recovery import RecoveryModel, is_premium_brand


@pytest.fixture
def model():
    return RecoveryModel()


@pytest.fixture
def neutral_item():
    """Rate multiplier of exactly 1.0 at algorithm score 0.5."""
    return make_item(1, category="misc", price=100, open_status="opened")


class TestRecoveryRate:

    def test_neutral_item(self, model, neutral_item):
        assert model.recovery_rate(neutral_item, 0.5) == pytest.approx(1.0)

    def test_upper_clamp(self, model):
        item = make_item(1, category="Electronics", brand="Apple", price=2000,
                         open_status="unopened")
        assert model.recovery_rate(item, 0.9) == pytest.approx(3.0)

    def test_lower_clamp(self, model):
        item = make_item(1, category="games", status="discarded")
        assert model.recovery_rate(item, 0.1) == pytest.approx(0.3)

    def test_chinese_category_names(self, model):
        plain = make_item(1, category="misc", price=100, open_status="opened")
        medicine = make_item(2, category="药品", price=100, open_status="opened")
        assert model.recovery_rate(medicine, 0.5) == pytest.approx(
            model.recovery_rate(plain, 0.5) * 1.3
        )

    def test_premium_brand_substring(self):
        assert is_premium_brand("Apple Inc.")
        assert is_premium_brand("NIKE")
        assert not is_premium_brand("Breville")
        assert not is_premium_brand(None)


class TestRequiredBrowseDistance:

    def test_neutral_item_distances(self, model, neutral_item):
        assert model.required_browse_distance(neutral_item, 0.5, 0.5) == 24
        assert model.required_browse_distance(neutral_item, 0.5, 0.1) == 16
        assert model.required_browse_distance(neutral_item, 0.5, 1.0) == 30

    def test_bounds(self, model):
        fast = make_item(1, category="electronics", brand="Apple", price=2000,
                         open_status="unopened")
        slow = make_item(2, category="games", status="discarded")
        assert model.required_browse_distance(fast, 0.9, 0.0) == 5
        assert model.required_browse_distance(slow, 0.1, 2.0) == 100

    def test_monotonic_in_penalty(self, model, neutral_item):
        distances = [
            model.required_browse_distance(neutral_item, 0.5, p)
            for p in (0.0, 0.3, 0.6, 1.2, 1.8)
        ]
        assert distances == sorted(distances)


class TestRecoveryAmount:

    def test_no_penalty_no_recovery(self, model, neutral_item):
        assert model.recovery_amount(neutral_item, 0.5, 0.0, 50) == 0.0

    def test_stepped_progress(self, model, neutral_item):
        # required distance 24 at penalty 0.5
        assert model.recovery_amount(neutral_item, 0.5, 0.5, 0) == 0.0
        assert model.recovery_amount(neutral_item, 0.5, 0.5, 2) == 0.0
        assert model.recovery_amount(neutral_item, 0.5, 0.5, 12) == pytest.approx(0.2)
        assert model.recovery_amount(neutral_item, 0.5, 0.5, 24) == pytest.approx(0.5)

    def test_never_exceeds_penalty(self, model, neutral_item):
        for distance in (0, 5, 30, 1000):
            assert model.recovery_amount(neutral_item, 0.5, 0.8, distance) <= 0.8


def test_describe_matches_individual_calls(model, neutral_item):
    info = model.describe(neutral_item, 0.5, 0.5, 12)
    assert info["recovery_rate"] == pytest.approx(1.0)
    assert info["required_distance"] == 24
    assert info["recovery"] == pytest.approx(0.2)
    assert info["browse_distance"] == 12

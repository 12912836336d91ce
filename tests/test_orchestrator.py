#!/usr/bin/env python3
"""
Feed Orchestrator Tests

End-to-end page generation over an in-memory catalog.

Test Scenarios:
---------------
1. Empty catalog and non-positive counts return an empty page
2. Item source failures propagate unchanged
3. A page advances both position counters by its length
4. Same seed and clock replay the same pages
5. Statistics, debug info and resets

Run:
----
    pytest tests/test_orchestrator.py -v
"""

import asyncio

import pytest

from conftest import make_item
from feed.models.config import FeedConfig
from feed.models.scoring import DisplayItem
from feed.sources import InMemoryItemSource
from feed.stages.orchestrator import FeedOrchestrator


class FailingSource:
    async def get_all_items(self):
        raise RuntimeError("inventory database unavailable")


@pytest.fixture
def orchestrator(catalog, clock):
    return FeedOrchestrator(InMemoryItemSource(catalog), seed=11, clock=clock)


def big_catalog(n: int = 30):
    return [
        make_item(i, days_old=5 * i, name=f"Thing {i}",
                  category=("tools", "books", "food")[i % 3],
                  price=float(10 * i), open_status=("opened", "unopened")[i % 2])
        for i in range(1, n + 1)
    ]


class TestGenerateFeed:

    def test_empty_catalog(self, clock):
        orch = FeedOrchestrator(InMemoryItemSource([]), seed=1, clock=clock)
        assert asyncio.run(orch.generate_feed(10)) == []
        assert orch.display_tracker.global_position == 0

    def test_non_positive_count(self, orchestrator):
        assert asyncio.run(orchestrator.generate_feed(0)) == []
        assert asyncio.run(orchestrator.generate_feed(-3)) == []
        assert orchestrator.display_tracker.global_position == 0

    def test_source_error_propagates(self, clock):
        orch = FeedOrchestrator(FailingSource(), seed=1, clock=clock)
        with pytest.raises(RuntimeError, match="unavailable"):
            asyncio.run(orch.generate_feed(5))

    def test_small_catalog_returns_everything(self, orchestrator, catalog):
        page = asyncio.run(orchestrator.generate_feed(10))
        assert len(page) == len(catalog)
        assert all(isinstance(entry, DisplayItem) for entry in page)
        assert {entry.item.id for entry in page} == {item.id for item in catalog}

    def test_both_counters_advance_by_page_length(self, orchestrator):
        page = asyncio.run(orchestrator.generate_feed(10))
        assert orchestrator.display_tracker.global_position == len(page)
        assert orchestrator.anti_loop.display_count == len(page)
        assert orchestrator.anti_loop.recent_history == [entry.item.id for entry in page]

    def test_shown_items_are_penalized(self, orchestrator):
        page = asyncio.run(orchestrator.generate_feed(10))
        for entry in page:
            state = orchestrator.display_tracker.get_state(entry.item.id)
            assert state.display_count == 1
            assert state.display_penalty == pytest.approx(0.5)

    def test_page_has_no_duplicates(self, clock):
        orch = FeedOrchestrator(InMemoryItemSource(big_catalog()), seed=5, clock=clock)
        for _ in range(4):
            page = asyncio.run(orch.generate_feed(8))
            ids = [entry.item.id for entry in page]
            assert len(ids) == len(set(ids))
            assert len(ids) <= 8

    def test_default_count(self, clock):
        config = FeedConfig(default_feed_count=4)
        orch = FeedOrchestrator(InMemoryItemSource(big_catalog()), config=config, seed=5, clock=clock)
        page = asyncio.run(orch.generate_feed())
        assert 0 < len(page) <= 4

    def test_accepts_raw_dict_records(self, clock):
        records = [{"id": 1, "name": "Tent", "category": "outdoor"},
                   {"id": 2, "name": "Stove", "category": "outdoor"}]
        orch = FeedOrchestrator(InMemoryItemSource(records), seed=1, clock=clock)
        page = asyncio.run(orch.generate_feed(5))
        assert {entry.item.name for entry in page} == {"Tent", "Stove"}

    def test_seeded_replay(self, clock):
        def run(seed):
            orch = FeedOrchestrator(InMemoryItemSource(big_catalog()), seed=seed, clock=clock)
            pages = []
            for _ in range(3):
                page = asyncio.run(orch.generate_feed(6))
                pages.append([(e.item.id, e.show_reason, e.reason_type) for e in page])
            return pages

        assert run(99) == run(99)


class TestDiagnostics:

    def test_statistics(self, orchestrator, catalog):
        asyncio.run(orchestrator.generate_feed(10))
        stats = asyncio.run(orchestrator.get_algorithm_statistics())
        assert stats["total_items"] == len(catalog)
        assert stats["high_score_items"] + stats["low_score_items"] == len(catalog)
        assert 0.0 <= stats["average_algorithm_score"] <= 1.0
        assert stats["display_manager"]["global_position"] == len(catalog)
        assert stats["anti_loop_manager"]["global_display_count"] == len(catalog)

    def test_statistics_do_not_change_seeded_pages(self, clock):
        def second_page(call_stats: bool):
            orch = FeedOrchestrator(InMemoryItemSource(big_catalog()), seed=7, clock=clock)
            asyncio.run(orch.generate_feed(8))
            if call_stats:
                asyncio.run(orch.get_algorithm_statistics())
            page = asyncio.run(orch.generate_feed(8))
            return [(e.item.id, e.show_reason, e.reason_type) for e in page]

        assert second_page(call_stats=True) == second_page(call_stats=False)

    def test_statistics_on_empty_catalog(self, clock):
        orch = FeedOrchestrator(InMemoryItemSource([]), seed=1, clock=clock)
        stats = asyncio.run(orch.get_algorithm_statistics())
        assert stats["total_items"] == 0
        assert stats["average_display_score"] == 0.0

    def test_item_debug_info(self, orchestrator):
        asyncio.run(orchestrator.generate_feed(10))
        info = asyncio.run(orchestrator.get_item_debug_info(1))
        assert info is not None
        assert info.item_id == 1
        assert info.display_count == 1
        assert asyncio.run(orchestrator.get_item_debug_info(999)) is None

    def test_reset_algorithm_state(self, orchestrator):
        asyncio.run(orchestrator.generate_feed(10))
        orchestrator.reset_algorithm_state()
        assert orchestrator.display_tracker.global_position == 0
        assert orchestrator.anti_loop.display_count == 0
        assert len(orchestrator.display_tracker) == 0

    def test_partial_reset_keeps_positions(self, orchestrator):
        asyncio.run(orchestrator.generate_feed(10))
        position = orchestrator.display_tracker.global_position
        orchestrator.partial_reset(keep_recent=0)
        assert orchestrator.display_tracker.global_position == position

"""
Feed orchestrator — turns the item catalog into one page of the feed.

generate_feed runs:
1. catalog snapshot from the item source
2. per item: algorithm score -> display score -> anti-loop adjustments
3. rank + intelligent shuffle
4. coverage rule (high/low quota)
5. reason annotations
6. display bookkeeping, in final page order, on both trackers

Not safe for concurrent generate_feed calls on the same instance; callers
serialize access (the server holds a lock).
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

import numpy as np

from ..models.config import FeedConfig, resolve_config
from ..models.item import Item, ensure_items
from ..models.scoring import DisplayItem, ItemDebugInfo, ScoredItem
from ..sources import ItemSource
from ..utils.clock import utc_now
from .anti_loop import AntiLoopMixer
from .coverage import apply_coverage_rule
from .display_state import DisplayStateTracker
from .item_scorer import ItemScorer
from .reasons import apply_reason_rule
from .recovery import RecoveryModel

logger = logging.getLogger(__name__)


class FeedOrchestrator:
    """Composes scorer, display-state tracker and anti-loop mixer into a feed."""

    def __init__(
        self,
        item_source: ItemSource,
        config: Optional[FeedConfig] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.item_source = item_source
        self.config = resolve_config(config)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._clock = clock or utc_now
        self.scorer = ItemScorer(self.config, clock=self._clock)
        self.recovery_model = RecoveryModel(self.config)
        self.display_tracker = DisplayStateTracker(self.config, self.recovery_model)
        self.anti_loop = AntiLoopMixer(
            self.config,
            rng=self.rng,
            clock=lambda: self._clock().timestamp(),
        )

    async def _fetch_catalog(self) -> List[Item]:
        """One snapshot of the catalog; source errors propagate unchanged."""
        return ensure_items(await self.item_source.get_all_items())

    def _score_catalog(
        self,
        items: List[Item],
        rng: Optional[np.random.Generator] = None,
    ) -> List[ScoredItem]:
        """Algorithm, display and anti-loop scores for every item; rng defaults to the shared one."""
        scored = []
        for item in items:
            algorithm_score = self.scorer.score(item, items)
            result = self.display_tracker.display_score(item, algorithm_score)
            final_score = self.anti_loop.apply_adjustments(
                item.id, result.final_score, algorithm_score, rng=rng
            )
            state = self.display_tracker.get_state(item.id)
            scored.append(ScoredItem(
                item=item,
                algorithm_score=algorithm_score,
                display_score=final_score,
                browse_distance=result.browse_distance,
                display_state=state.model_copy() if state is not None else None,
            ))
        return scored

    def _rank(self, scored: List[ScoredItem]) -> List[ScoredItem]:
        """Descending by display score, near-ties shuffled."""
        by_id: Dict[int, ScoredItem] = {s.item.id: s for s in scored}
        pairs = [(s.item.id, s.display_score) for s in scored]
        return [by_id[item_id] for item_id, _ in self.anti_loop.intelligent_shuffle(pairs)]

    def _record_displays(self, page: List[DisplayItem]) -> None:
        for entry in page:
            self.display_tracker.record_display(entry.item.id)
            self.anti_loop.record_display(entry.item.id)

    async def generate_feed(self, count: Optional[int] = None) -> List[DisplayItem]:
        """
        Produce the next page of the feed and record it as shown.

        Returns fewer than `count` entries when the catalog is smaller, or when
        the coverage quota cannot be met from the high-score bucket.
        """
        if count is None:
            count = self.config.default_feed_count
        if count <= 0:
            return []

        items = await self._fetch_catalog()
        if not items:
            return []

        scored = self._score_catalog(items)
        ranked = self._rank(scored)
        selected = apply_coverage_rule(ranked, count, self.config, self.rng)
        page = apply_reason_rule(selected, self.config, self.rng, now=self._clock())
        self._record_displays(page)

        logger.debug(
            "Feed page: %d of %d requested from %d items (reasons=%d, position=%d)",
            len(page), count, len(items),
            sum(1 for entry in page if entry.show_reason),
            self.display_tracker.global_position,
        )
        return page

    async def get_algorithm_statistics(self) -> Dict:
        """
        Aggregate scores and tracker state.

        Scores the catalog with a private generator and records no displays,
        so later seeded pages are unaffected.
        """
        items = await self._fetch_catalog()
        scored = self._score_catalog(items, rng=np.random.default_rng())
        algorithm_scores = np.array([s.algorithm_score for s in scored], dtype=float)
        display_scores = np.array([s.display_score for s in scored], dtype=float)
        threshold = self.config.coverage_threshold
        return {
            "total_items": len(items),
            "average_algorithm_score": float(algorithm_scores.mean()) if scored else 0.0,
            "average_display_score": float(display_scores.mean()) if scored else 0.0,
            "display_manager": self.display_tracker.statistics(),
            "anti_loop_manager": self.anti_loop.status(),
            "high_score_items": int((display_scores >= threshold).sum()),
            "low_score_items": int((display_scores < threshold).sum()),
        }

    def reset_algorithm_state(self) -> None:
        """Forget all display history (both trackers)."""
        self.display_tracker.reset_all()
        self.anti_loop.reset()
        logger.info("Feed algorithm state reset")

    def partial_reset(self, keep_recent: int = 50) -> None:
        self.display_tracker.partial_reset(keep_recent)

    async def get_item_debug_info(self, item_id: int) -> Optional[ItemDebugInfo]:
        """Per-item internals, or None when the item is not in the catalog."""
        items = await self._fetch_catalog()
        item = next((i for i in items if i.id == item_id), None)
        if item is None:
            return None
        algorithm_score = self.scorer.score(item, items)
        return self.display_tracker.debug_info(item, algorithm_score)

"""
Display state tracking: per-item penalty, recovery and browse distance
for the current session.

Every shown item accrues a stepped penalty; the penalty is offset by the
recovery model once enough other entries have been browsed. State is
in-memory only and is not safe for concurrent mutation: one writer per
tracker instance.
"""

import logging
from typing import Dict, List, Optional

from ..models.config import FeedConfig, resolve_config
from ..models.item import Item
from ..models.scoring import DisplayScoreResult, ItemDebugInfo, ItemDisplayState
from .recovery import RecoveryModel

logger = logging.getLogger(__name__)

# Penalty added on a display, indexed by the display count before it.
PENALTY_STEPS = (0.5, 0.3, 0.25, 0.2)
REPEAT_PENALTY = 0.15


def display_penalty_step(display_count: int) -> float:
    """Penalty increment for an item already shown display_count times."""
    if display_count < len(PENALTY_STEPS):
        return PENALTY_STEPS[display_count]
    return REPEAT_PENALTY


class DisplayStateTracker:
    """Owns the global position counter and the per-item display states."""

    def __init__(
        self,
        config: Optional[FeedConfig] = None,
        recovery_model: Optional[RecoveryModel] = None,
    ):
        self.config = resolve_config(config)
        self.recovery_model = recovery_model or RecoveryModel(self.config)
        self._states: Dict[int, ItemDisplayState] = {}
        self._global_position = 0

    @property
    def global_position(self) -> int:
        return self._global_position

    def __len__(self) -> int:
        return len(self._states)

    def _get_or_create(self, item_id: int) -> ItemDisplayState:
        state = self._states.get(item_id)
        if state is None:
            state = ItemDisplayState(item_id=item_id)
            self._states[item_id] = state
        return state

    def get_state(self, item_id: int) -> Optional[ItemDisplayState]:
        return self._states.get(item_id)

    def browse_distance(self, item_id: int) -> Optional[int]:
        """Positions since the item was last shown; None when it has no state."""
        state = self._states.get(item_id)
        if state is None:
            return None
        return self._global_position - state.last_display_position

    def display_score(self, item: Item, algorithm_score: float) -> DisplayScoreResult:
        """algorithm_score minus the accrued penalty plus recovery, floored at 0."""
        state = self._get_or_create(item.id)
        browse_distance = self._global_position - state.last_display_position
        penalty = state.display_penalty
        recovery = self.recovery_model.recovery_amount(
            item, algorithm_score, penalty, browse_distance
        )
        required = self.recovery_model.required_browse_distance(item, algorithm_score, penalty)
        return DisplayScoreResult(
            final_score=max(0.0, algorithm_score - penalty + recovery),
            algorithm_score=algorithm_score,
            penalty=penalty,
            recovery=recovery,
            browse_distance=browse_distance,
            required_distance=required,
        )

    def record_display(self, item_id: int) -> None:
        """Apply the display penalty and advance the global position."""
        state = self._get_or_create(item_id)
        state.display_penalty += display_penalty_step(state.display_count)
        state.last_display_position = self._global_position
        state.display_count += 1
        state.total_display_count += 1
        self._global_position += 1
        self._periodic_cleanup()

    def record_batch_display(self, item_ids: List[int]) -> None:
        """Record displays in list order; later items see a larger global position."""
        for item_id in item_ids:
            self.record_display(item_id)

    def _periodic_cleanup(self) -> None:
        cfg = self.config
        if self._global_position > cfg.cleanup_threshold and self._states:
            baseline = min(s.last_display_position for s in self._states.values())
            if baseline:
                for state in self._states.values():
                    state.last_display_position -= baseline
                self._global_position -= baseline
                logger.debug("Display positions re-baselined by %d", baseline)

        stale_before = self._global_position - cfg.stale_window
        stale = [
            item_id for item_id, state in self._states.items()
            if state.last_display_position < stale_before
            and state.display_penalty <= cfg.stale_penalty_max
        ]
        for item_id in stale:
            del self._states[item_id]

    def partial_reset(self, keep_recent: int = 50) -> None:
        """
        Soften history without forgetting it.

        Items not shown within the last keep_recent positions get their penalty
        halved; items shown more than 3 times have their display count set back
        to 1 so the penalty steps restart high. Accrued penalty is kept.
        """
        recent_threshold = self._global_position - keep_recent
        for state in self._states.values():
            if state.last_display_position < recent_threshold:
                state.display_penalty *= 0.5
            if state.display_count > 3:
                state.display_count = 1
        logger.info("Partial display reset (keep_recent=%d, states=%d)", keep_recent, len(self._states))

    def reset_item(self, item_id: int) -> None:
        state = self._states.get(item_id)
        if state is not None:
            state.display_penalty = 0.0
            state.display_count = 0
            state.last_display_position = 0

    def reset_all(self) -> None:
        self._states.clear()
        self._global_position = 0

    def statistics(self) -> Dict[str, float]:
        states = list(self._states.values())
        penalties = [s.display_penalty for s in states]
        return {
            "total_items": len(states),
            "total_displays": sum(s.total_display_count for s in states),
            "average_penalty": sum(penalties) / len(penalties) if penalties else 0.0,
            "max_penalty": max(penalties, default=0.0),
            "global_position": self._global_position,
            "items_with_penalty": sum(1 for p in penalties if p > 0),
        }

    def debug_info(self, item: Item, algorithm_score: float) -> ItemDebugInfo:
        result = self.display_score(item, algorithm_score)
        state = self._states[item.id]
        return ItemDebugInfo(
            item_id=item.id,
            name=item.name,
            algorithm_score=result.algorithm_score,
            final_score=result.final_score,
            penalty=result.penalty,
            recovery=result.recovery,
            recovery_rate=self.recovery_model.recovery_rate(item, algorithm_score),
            browse_distance=result.browse_distance,
            required_distance=result.required_distance,
            display_count=state.display_count,
            total_display_count=state.total_display_count,
            last_display_position=state.last_display_position,
            global_position=self._global_position,
        )

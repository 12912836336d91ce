"""
Anti-loop mixing — keeps the feed from settling into a fixed order.

Adds a uniform random term, an hour-of-day / per-item time wave, a penalty
for items in the recent history, and a per-epoch jitter; intelligent_shuffle
randomizes order among near-ties without disturbing the gross ranking.

Randomness comes from an injected numpy Generator so sequences can be replayed.
"""

import math
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Tuple

import numpy as np

from ..models.config import FeedConfig, resolve_config
from ..utils.clock import epoch_seconds

MS_PER_HOUR = 60 * 60 * 1000
MS_PER_HALF_HOUR = 30 * 60 * 1000
TIME_WAVE_AMPLITUDE = 0.05
JITTER_AMPLITUDE = 0.1

# Occurrences in the recent history -> score adjustment.
DIVERSITY_PENALTIES = ((3, -0.3), (2, -0.2), (1, -0.1))

ScoredPair = Tuple[int, float]


class AntiLoopMixer:
    """Short-term display history plus randomized score adjustments."""

    def __init__(
        self,
        config: Optional[FeedConfig] = None,
        rng: Optional[np.random.Generator] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.config = resolve_config(config)
        self.rng = rng if rng is not None else np.random.default_rng()
        self._clock = clock or epoch_seconds
        self._history: Deque[int] = deque(maxlen=self.config.history_window)
        # Independent of DisplayStateTracker.global_position.
        self._display_count = 0

    @property
    def display_count(self) -> int:
        return self._display_count

    @property
    def recent_history(self) -> List[int]:
        return list(self._history)

    def apply_adjustments(
        self,
        item_id: int,
        base_score: float,
        algorithm_score: float,
        rng: Optional[np.random.Generator] = None,
    ) -> float:
        """
        Base score plus random, time, diversity and jitter terms, floored at 0.

        rng overrides the mixer's generator for the random term only.
        """
        score = base_score
        score += self.random_factor(rng)
        score += self.time_dynamic_factor(item_id)
        score += self.diversity_penalty(item_id)
        score += self.score_jitter(algorithm_score)
        return max(0.0, score)

    def random_factor(self, rng: Optional[np.random.Generator] = None) -> float:
        """Uniform in [0, random_factor_max)."""
        source = rng if rng is not None else self.rng
        return float(source.random()) * self.config.random_factor_max

    def time_dynamic_factor(self, item_id: int) -> float:
        """Hour-of-day wave plus an item/time wave, each within +-0.05."""
        now_ms = int(self._clock() * 1000)
        hour_cycle = (now_ms // MS_PER_HOUR) % 24
        hour_factor = math.sin(hour_cycle * 2 * math.pi / 24) * TIME_WAVE_AMPLITUDE
        item_phase = ((item_id * now_ms) // MS_PER_HALF_HOUR) % 100
        item_factor = math.sin(item_phase) * TIME_WAVE_AMPLITUDE
        return hour_factor + item_factor

    def diversity_penalty(self, item_id: int) -> float:
        recent_count = sum(1 for shown in self._history if shown == item_id)
        for occurrences, penalty in DIVERSITY_PENALTIES:
            if recent_count >= occurrences:
                return penalty
        return 0.0

    def score_jitter(self, algorithm_score: float) -> float:
        """Within +-0.05; fixed for a given (epoch, score) once the first epoch has elapsed."""
        cycle = self._display_count // self.config.jitter_epoch
        if cycle <= 0:
            return 0.0
        seed = int(cycle * algorithm_score * 1000)
        local = np.random.default_rng(seed)
        return (float(local.random()) - 0.5) * JITTER_AMPLITUDE

    def intelligent_shuffle(self, scored_pairs: List[ScoredPair]) -> List[ScoredPair]:
        """
        Sort by score descending, then shuffle within runs of near-equal scores.

        A new group starts whenever the gap to the previous score reaches
        shuffle_group_gap, so items that far apart never swap places.
        """
        ordered = sorted(scored_pairs, key=lambda pair: pair[1], reverse=True)
        groups: List[List[ScoredPair]] = []
        current: List[ScoredPair] = []
        last_score = math.inf
        for pair in ordered:
            if last_score - pair[1] >= self.config.shuffle_group_gap and current:
                groups.append(current)
                current = []
            current.append(pair)
            last_score = pair[1]
        if current:
            groups.append(current)

        result: List[ScoredPair] = []
        for group in groups:
            result.extend(group[i] for i in self.rng.permutation(len(group)))
        return result

    def record_display(self, item_id: int) -> None:
        self._history.append(item_id)
        self._display_count += 1

    def detect_loop_pattern(self) -> bool:
        """Diagnostic: few distinct items among the most recent displays."""
        window = self.config.loop_window
        if len(self._history) < window:
            return False
        recent = list(self._history)[-window:]
        return len(set(recent)) <= self.config.loop_distinct_max

    def status(self) -> Dict:
        recent = list(self._history)
        return {
            "recent_display_count": len(recent),
            "global_display_count": self._display_count,
            "unique_recent_items": len(set(recent)),
            "potential_loop": self.detect_loop_pattern(),
            "recent_history": recent[-self.config.loop_window:],
        }

    def reset(self) -> None:
        self._history.clear()
        self._display_count = 0

"""Pipeline stages: item scoring, recovery, display state, anti-loop mixing, coverage, reasons, orchestration."""

from .anti_loop import AntiLoopMixer
from .coverage import apply_coverage_rule
from .display_state import DisplayStateTracker
from .item_scorer import ItemScorer
from .orchestrator import FeedOrchestrator
from .reasons import apply_reason_rule, reason_text
from .recovery import RecoveryModel

__all__ = [
    "AntiLoopMixer",
    "DisplayStateTracker",
    "FeedOrchestrator",
    "ItemScorer",
    "RecoveryModel",
    "apply_coverage_rule",
    "apply_reason_rule",
    "reason_text",
]

"""
Feed configuration — scoring weights, coverage quota, anti-loop, recovery,
display-state housekeeping, and delivery pacing.

FeedConfig defaults are defined here. The server may pass a dict
(e.g. from a feed_config.json file); from_dict() merges it with these defaults.
"""

from typing import Dict, Optional

from pydantic import BaseModel, model_validator


class FeedConfig(BaseModel):
    """Configuration for the adaptive feed ranking engine."""

    # -------------------------------------------------------------------------
    # Item score weights (must sum to 1.0)
    # score = memory * w_m + insight * w_i + relationship * w_r + needs * w_n
    # -------------------------------------------------------------------------

    # Forgotten, valuable or still-sealed items.
    weight_memory: float = 0.30
    # Brand, category and price patterns across the whole catalog.
    weight_insight: float = 0.25
    # Co-located, related and co-tagged items.
    weight_relationship: float = 0.25
    # Lifecycle urgency and value protection.
    weight_needs: float = 0.20

    # -------------------------------------------------------------------------
    # Coverage rule (high/low split of the ranked list)
    # -------------------------------------------------------------------------

    # Display scores at or above this value go to the high bucket.
    coverage_threshold: float = 0.3
    # Share of a page taken from the high bucket; the rest comes from the low bucket.
    coverage_ratio: float = 0.9

    # -------------------------------------------------------------------------
    # Reason annotations
    # -------------------------------------------------------------------------

    # Independent per-entry probability of attaching a reason.
    reason_probability: float = 0.10

    # -------------------------------------------------------------------------
    # Anti-loop mixing
    # -------------------------------------------------------------------------

    # Ring buffer size for recently shown item ids.
    history_window: int = 20
    # Number of displays per jitter epoch.
    jitter_epoch: int = 100
    # Upper bound (exclusive) of the uniform random term.
    random_factor_max: float = 0.2
    # Consecutive ranked scores closer than this are shuffled together.
    shuffle_group_gap: float = 0.1
    # Loop detection: last N displays with at most M distinct items.
    loop_window: int = 10
    loop_distinct_max: int = 4

    # -------------------------------------------------------------------------
    # Recovery
    # required_distance = base_recovery_distance / recovery_rate * penalty_factor
    # -------------------------------------------------------------------------

    base_recovery_distance: int = 20

    # -------------------------------------------------------------------------
    # Display state housekeeping
    # -------------------------------------------------------------------------

    # Re-baseline all positions once the global position exceeds this.
    cleanup_threshold: int = 10000
    # States last shown this many positions ago are eligible for eviction...
    stale_window: int = 1000
    # ...when their penalty is at or below this value.
    stale_penalty_max: float = 0.1

    # Page size used when generate_feed() is called without a count.
    default_feed_count: int = 10

    # -------------------------------------------------------------------------
    # Delivery pacing
    # delay = min + (max - min) * (1 - min(loaded / acceleration_items, 1))
    # -------------------------------------------------------------------------

    batch_size: int = 6
    # Pre-load when this many entries (or fewer) remain below the viewport.
    preload_threshold: int = 15
    max_batch_interval_ms: int = 80
    min_batch_interval_ms: int = 40
    acceleration_items: int = 12

    @model_validator(mode="after")
    def weights_sum_to_one(self):
        total = (
            self.weight_memory
            + self.weight_insight
            + self.weight_relationship
            + self.weight_needs
        )
        if abs(total - 1.0) > 0.01:
            raise ValueError(f"Score weights must sum to 1.0, got {total}")
        return self

    @model_validator(mode="after")
    def probabilities_in_range(self):
        for name in ("coverage_ratio", "reason_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.min_batch_interval_ms > self.max_batch_interval_ms:
            raise ValueError("min_batch_interval_ms must not exceed max_batch_interval_ms")
        return self

    @model_validator(mode="after")
    def counts_are_positive(self):
        # Divisors and window sizes used on every feed page and paced batch
        for name in (
            "batch_size",
            "jitter_epoch",
            "acceleration_items",
            "history_window",
            "loop_window",
            "cleanup_threshold",
        ):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be positive, got {value}")
        return self

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "FeedConfig":
        """Create config from dictionary (e.g., loaded from JSON)."""
        flat = {}
        if "weights" in config_dict:
            w = config_dict["weights"]
            for dim in ("memory", "insight", "relationship", "needs"):
                if dim in w:
                    flat[f"weight_{dim}"] = w[dim]
        if "coverage" in config_dict:
            cov = config_dict["coverage"]
            if "threshold" in cov:
                flat["coverage_threshold"] = cov["threshold"]
            if "ratio" in cov:
                flat["coverage_ratio"] = cov["ratio"]
        if "reasons" in config_dict:
            rs = config_dict["reasons"]
            if "probability" in rs:
                flat["reason_probability"] = rs["probability"]
        for section in ("anti_loop", "recovery", "display_state", "pacing"):
            if section in config_dict:
                flat.update(config_dict[section])
        # Flat keys at the top level are accepted as-is
        flat.update({k: v for k, v in config_dict.items() if not isinstance(v, dict)})
        allowed = set(cls.model_fields)
        filtered = {k: v for k, v in flat.items() if k in allowed}
        return cls.model_validate(filtered)


DEFAULT_CONFIG = FeedConfig()


def resolve_config(config: Optional["FeedConfig"]) -> "FeedConfig":
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG

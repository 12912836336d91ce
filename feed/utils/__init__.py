"""Shared utilities for item age, clocks, and keyword extraction."""

from .clock import days_since, epoch_seconds, utc_now
from .keywords import item_keywords

__all__ = [
    "days_since",
    "epoch_seconds",
    "utc_now",
    "item_keywords",
]

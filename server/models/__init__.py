"""Pydantic request/response models for the API."""

from .common import FeedCard
from .feed import FeedPageResponse, NextPageRequest, ResetRequest, StreamRequest

__all__ = [
    "FeedCard",
    "FeedPageResponse",
    "NextPageRequest",
    "ResetRequest",
    "StreamRequest",
]

"""Feed-related Pydantic models."""

from typing import List

from pydantic import BaseModel

from .common import FeedCard


class NextPageRequest(BaseModel):
    count: int = 10  # DEFAULT_PAGE_SIZE


class StreamRequest(BaseModel):
    current_count: int = 0
    total_needed: int = 18


class ResetRequest(BaseModel):
    partial: bool = False
    keep_recent: int = 50


class FeedPageResponse(BaseModel):
    items: List[FeedCard]
    requested: int
    returned: int
    reason_count: int
    global_position: int

"""Common Pydantic models shared across routes."""

from typing import List, Optional

from pydantic import BaseModel


class FeedCard(BaseModel):
    id: int
    name: str
    category: str
    brand: Optional[str] = None
    price: Optional[float] = None
    added_at: str
    open_status: str
    status: str
    location: Optional[str] = None
    tags: List[str] = []
    main_photo: Optional[str] = None
    show_reason: bool = False
    reason_text: Optional[str] = None
    reason_type: Optional[str] = None
    algorithm_score: Optional[float] = None
    display_score: Optional[float] = None
    feed_position: Optional[int] = None

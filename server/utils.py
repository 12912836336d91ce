"""Pure helpers: feed card formatting and page-size constants."""

from typing import Optional

from feed.models.item import Item
from feed.models.scoring import DisplayItem

from .models import FeedCard

# Feed page constants (used by routes/feed)
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


def _main_photo(item: Item) -> Optional[str]:
    """URI of the main photo, else the first by display order."""
    if not item.photos:
        return None
    main = next((p for p in item.photos if p.is_main), None)
    if main is None:
        main = min(item.photos, key=lambda p: p.display_order)
    return main.uri


def to_feed_card(entry: DisplayItem, position: Optional[int] = None) -> FeedCard:
    """Convert a DisplayItem into the API card format."""
    item = entry.item
    return FeedCard(
        id=item.id,
        name=item.name,
        category=item.category,
        brand=item.brand,
        price=item.price,
        added_at=item.added_at.isoformat(),
        open_status=item.open_status.value,
        status=item.status.value,
        location=item.location.full_path() if item.location else None,
        tags=[t.name for t in item.tags],
        main_photo=_main_photo(item),
        show_reason=entry.show_reason,
        reason_text=entry.reason_text,
        reason_type=entry.reason_type.value if entry.reason_type else None,
        algorithm_score=round(entry.algorithm_score, 4),
        display_score=round(entry.display_score, 4),
        feed_position=position,
    )

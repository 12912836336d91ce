"""Item catalog endpoints."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..state import get_state

router = APIRouter()


@router.get("")
def list_items(limit: Optional[int] = Query(None), offset: int = Query(0)):
    """List items from the current catalog."""
    state = get_state()
    items = state.item_provider.get_items()
    paginated = items[offset : offset + limit] if limit else items[offset:]
    return {
        "items": paginated,
        "total": len(items),
        "offset": offset,
        "limit": limit,
    }


@router.get("/{item_id}")
def get_item(item_id: int):
    """Get item details."""
    state = get_state()
    item = state.item_provider.get_item(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return item

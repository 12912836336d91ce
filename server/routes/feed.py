"""Feed endpoints: next page, paced stream, stats, reset, per-item debug."""

import asyncio
import json
import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from ..models import FeedPageResponse, NextPageRequest, ResetRequest, StreamRequest
from ..state import get_state
from ..utils import MAX_PAGE_SIZE, to_feed_card

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_count(count: int) -> None:
    if count < 1 or count > MAX_PAGE_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"count must be between 1 and {MAX_PAGE_SIZE}",
        )


async def _generate(state, count: int):
    """Generate one page; catalog failures become 502."""
    try:
        return await state.generate_page(count)
    except (OSError, ValueError) as e:
        logger.error("[feed] item source failed: %s", e)
        raise HTTPException(status_code=502, detail=f"Item source unavailable: {e}")


@router.post("/next", response_model=FeedPageResponse)
async def next_page(request: NextPageRequest):
    """Generate the next page of the feed and record it as shown."""
    _check_count(request.count)
    state = get_state()
    page = await _generate(state, request.count)
    logger.info("[feed] next: requested=%d returned=%d", request.count, len(page))
    return FeedPageResponse(
        items=[to_feed_card(entry, i) for i, entry in enumerate(page)],
        requested=request.count,
        returned=len(page),
        reason_count=sum(1 for entry in page if entry.show_reason),
        global_position=state.orchestrator.display_tracker.global_position,
    )


@router.post("/stream")
async def stream_feed(request: StreamRequest):
    """
    Deliver total_needed - current_count entries as NDJSON, one line per paced batch.

    Empty when the pacer is already loading for another request. The catalog is
    checked before streaming starts (502 on failure); a failure mid-stream ends
    the body with an {"error": ...} line.
    """
    remaining = request.total_needed - request.current_count
    if remaining > MAX_PAGE_SIZE * 4:
        raise HTTPException(status_code=400, detail="Requested stream is too long")
    state = get_state()
    if remaining > 0:
        try:
            await state.item_provider.get_all_items()
        except (OSError, ValueError) as e:
            logger.error("[feed] item source failed: %s", e)
            raise HTTPException(status_code=502, detail=f"Item source unavailable: {e}")
    queue: asyncio.Queue = asyncio.Queue()

    async def _on_batch(batch):
        await queue.put(batch)

    async def _run():
        try:
            await state.pacer.load_more_smoothly(
                request.current_count,
                request.total_needed,
                _on_batch,
                state.generate_page,
            )
        finally:
            await queue.put(None)

    async def _lines():
        task = asyncio.create_task(_run())
        position = request.current_count
        try:
            while True:
                batch = await queue.get()
                if batch is None:
                    break
                cards = []
                for entry in batch:
                    cards.append(to_feed_card(entry, position).model_dump(mode="json"))
                    position += 1
                yield json.dumps({"items": cards}) + "\n"
            try:
                await task
            except (OSError, ValueError) as e:
                logger.error("[feed] stream stopped at position %d: %s", position, e)
                yield json.dumps({"error": f"Item source unavailable: {e}"}) + "\n"
        finally:
            if not task.done():
                task.cancel()

    return StreamingResponse(_lines(), media_type="application/x-ndjson")


@router.get("/stats")
async def feed_stats():
    """Aggregate scores and display-state statistics."""
    state = get_state()
    async with state.feed_lock:
        try:
            return await state.orchestrator.get_algorithm_statistics()
        except (OSError, ValueError) as e:
            raise HTTPException(status_code=502, detail=f"Item source unavailable: {e}")


@router.post("/reset")
async def reset_feed(request: ResetRequest):
    """Forget display history (or soften it with partial=true)."""
    state = get_state()
    async with state.feed_lock:
        if request.partial:
            state.orchestrator.partial_reset(request.keep_recent)
        else:
            state.orchestrator.reset_algorithm_state()
    logger.info("[feed] reset: partial=%s keep_recent=%d", request.partial, request.keep_recent)
    return {
        "reset": "partial" if request.partial else "full",
        "global_position": state.orchestrator.display_tracker.global_position,
    }


@router.get("/items/{item_id}/debug")
async def item_debug(item_id: int):
    """Per-item scoring and display-state internals."""
    state = get_state()
    async with state.feed_lock:
        info = await state.orchestrator.get_item_debug_info(item_id)
    if info is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return info

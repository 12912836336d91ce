"""
Delivery pacing. Streams a requested number of feed entries in small,
accelerating batches for smooth incremental loading.

States: IDLE -> LOADING -> IDLE. PRE_LOADING is set by the consumer (e.g. the
viewport is near the bottom) and is informational only. The pause between
batches is the cancellation point; the state returns to IDLE on every exit.
"""

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Union

from .models.config import FeedConfig, resolve_config

logger = logging.getLogger(__name__)

Batch = List[Any]
BatchGenerator = Callable[[int], Union[Batch, Awaitable[Batch]]]
BatchCallback = Callable[[Batch], Union[None, Awaitable[None]]]


class LoadingState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PRE_LOADING = "pre_loading"


async def _resolve(value):
    if inspect.isawaitable(value):
        return await value
    return value


class DeliveryPacer:
    """Paces batched delivery; does not affect ranking."""

    def __init__(
        self,
        config: Optional[FeedConfig] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self.config = resolve_config(config)
        self._sleep = sleep or asyncio.sleep
        self._state = LoadingState.IDLE

    @property
    def state(self) -> LoadingState:
        return self._state

    async def load_more_smoothly(
        self,
        current_count: int,
        total_needed: int,
        on_batch: BatchCallback,
        generator: BatchGenerator,
    ) -> None:
        """
        Generate and deliver total_needed - current_count entries in batches.

        Returns immediately when a load is already running. `generator(n)` returns
        up to n entries; `on_batch(entries)` receives each batch. Either may be a
        plain function or a coroutine function.
        """
        if self._state == LoadingState.LOADING:
            return
        self._state = LoadingState.LOADING
        try:
            remaining = total_needed - current_count
            if remaining <= 0:
                return
            await self._load_in_batches(remaining, on_batch, generator)
        finally:
            self._state = LoadingState.IDLE

    async def _load_in_batches(
        self,
        total: int,
        on_batch: BatchCallback,
        generator: BatchGenerator,
    ) -> None:
        remaining = total
        loaded = 0
        while remaining > 0:
            size = min(self.config.batch_size, remaining)
            batch = await _resolve(generator(size))
            await _resolve(on_batch(batch))
            remaining -= size
            loaded += size
            if remaining > 0:
                await self._sleep(self.batch_delay_ms(loaded) / 1000)
        logger.debug("Delivered %d entries", loaded)

    def batch_delay_ms(self, loaded: int) -> int:
        """Pause before the next batch; shrinks from max to min as loaded grows."""
        cfg = self.config
        progress = min(loaded / cfg.acceleration_items, 1.0)
        delay_range = cfg.max_batch_interval_ms - cfg.min_batch_interval_ms
        return cfg.min_batch_interval_ms + int(delay_range * (1.0 - progress))

    def should_pre_load(self, visible_count: int, total_count: int, first_visible: int) -> bool:
        """True when idle and the viewport is within preload_threshold of the end."""
        if self._state != LoadingState.IDLE:
            return False
        from_bottom = total_count - (first_visible + visible_count)
        return from_bottom <= self.config.preload_threshold

    def start_pre_loading(self) -> None:
        if self._state == LoadingState.IDLE:
            self._state = LoadingState.PRE_LOADING

    def reset(self) -> None:
        self._state = LoadingState.IDLE

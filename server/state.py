"""Application state: item provider, feed engine, pacer, and the feed lock."""

import asyncio
import logging
from typing import Optional, Union

from feed.delivery import DeliveryPacer
from feed.models.config import FeedConfig
from feed.stages.orchestrator import FeedOrchestrator

from .config import ServerConfig, get_config
from .services import InMemoryItemProvider, JsonItemProvider

logger = logging.getLogger(__name__)

ItemProvider = Union[JsonItemProvider, InMemoryItemProvider]


class AppState:
    """Global application state."""

    def __init__(
        self,
        config: ServerConfig,
        item_provider: Optional[ItemProvider] = None,
        feed_config: Optional[FeedConfig] = None,
    ):
        self.config = config
        self.feed_config = feed_config or config.load_feed_config()

        # Item catalog: explicit provider, else JSON file when present, else empty
        self.item_provider = item_provider or self._create_item_provider(config)
        logger.info("[startup] Item provider: %s", type(self.item_provider).__name__)

        # One feed session per process; ranking state lives in memory only
        self.orchestrator = FeedOrchestrator(
            self.item_provider,
            config=self.feed_config,
            seed=config.feed_seed,
        )
        self.pacer = DeliveryPacer(self.feed_config)

        # Display trackers are single-writer; every feed page is generated under this lock
        self.feed_lock = asyncio.Lock()

    def _create_item_provider(self, config: ServerConfig) -> ItemProvider:
        """Create item provider (JSON file when it exists, else an empty in-memory catalog)."""
        path = config.items_json_path
        if path is not None and path.exists():
            return JsonItemProvider(path)
        if path is not None:
            logger.warning("[startup] Items JSON not found: %s, using empty catalog", path)
        return InMemoryItemProvider([])

    async def generate_page(self, count: int):
        """Serialized FeedOrchestrator.generate_feed."""
        async with self.feed_lock:
            return await self.orchestrator.generate_feed(count)


_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        config = get_config()
        _state = AppState(config)
    return _state


def set_state(state: Optional[AppState]) -> None:
    """Install (or clear, with None) the global state. Used by create_app and tests."""
    global _state
    _state = state

"""
Memory Lane Feed API — FastAPI app factory.

Use: uvicorn server.app:app
Or:  from server import app
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import register_routes
from .state import AppState, get_state, set_state

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    state = get_state()
    ok, errors = state.config.validate()
    for error in errors:
        logger.warning("[startup] %s", error)
    try:
        items = state.item_provider.get_items()
        logger.info("[startup] Catalog loaded: %d items", len(items))
    except (OSError, ValueError) as e:
        logger.warning("[startup] Failed to load catalog: %s", e)
    yield


def create_app(state: Optional[AppState] = None) -> FastAPI:
    """Build FastAPI app with CORS, routes, and startup checks."""
    if state is not None:
        set_state(state)
    app = FastAPI(
        title="Memory Lane Feed API",
        description="Adaptive, non-repeating feed over a personal inventory",
        version="1.0.0",
        lifespan=_lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_routes(app)
    return app


app = create_app()

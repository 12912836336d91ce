"""Root and health endpoints."""

from fastapi import APIRouter

from ..state import get_state

router = APIRouter()


@router.get("/")
def root():
    state = get_state()
    return {
        "name": "Memory Lane Feed API",
        "version": "1.0.0",
        "current": {
            "item_provider": type(state.item_provider).__name__,
            "global_position": state.orchestrator.display_tracker.global_position,
            "pacer_state": state.pacer.state.value,
        },
        "endpoints": {
            "items": ["/api/items", "/api/items/{id}"],
            "feed": ["/api/feed/next", "/api/feed/stream"],
            "diagnostics": ["/api/feed/stats", "/api/feed/reset", "/api/feed/items/{id}/debug"],
        },
    }


@router.get("/api/health")
def health():
    state = get_state()
    config_ok, errors = state.config.validate()
    return {
        "status": "healthy" if config_ok else "degraded",
        "errors": errors,
    }

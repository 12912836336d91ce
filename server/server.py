#!/usr/bin/env python3
"""
Memory Lane Feed Server — entrypoint for uvicorn server.server:app.

For uvicorn server:app use server/__init__.py (exposes app from server.app).
"""

import logging

from .app import app

if __name__ == "__main__":
    import uvicorn

    from .config import get_config

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = get_config()
    uvicorn.run(app, host=config.host, port=config.port)

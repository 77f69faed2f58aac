#!/usr/bin/env python3
"""Vibe Search Server entrypoint: python -m vibe_api.server"""

import uvicorn

from .app import app
from .config import get_config

if __name__ == "__main__":
    config = get_config()
    config.configure_logging()
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())

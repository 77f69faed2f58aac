"""
Vibe Search API: FastAPI app factory.

Use: uvicorn vibe_api.app:app
Or:  from vibe_api import app
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import register_routes
from .state import AppState, get_state, set_state

logger = logging.getLogger(__name__)


def create_app(state: Optional[AppState] = None) -> FastAPI:
    """Build FastAPI app with CORS, routes, and startup/shutdown hooks."""
    if state is not None:
        set_state(state)

    app = FastAPI(
        title="Vibe Search API",
        description="Vibe-first media recommendations with seen-media filtering",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_routes(app)

    @app.on_event("startup")
    async def load_index():
        state = get_state()
        state.config.configure_logging()
        ok, errors = state.config.validate()
        for err in errors:
            logger.warning("[startup] Config: %s", err)
        loaded = state.load_index()
        await state.start_background()
        logger.info(
            "[startup] Ready: index=%d media=%d config_ok=%s",
            loaded, state.store.media_count(), ok,
        )

    @app.on_event("shutdown")
    async def stop_background():
        await get_state().stop_background()

    return app


app = create_app()

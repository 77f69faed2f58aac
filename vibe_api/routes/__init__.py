"""Register all route modules on the FastAPI app."""

from fastapi import FastAPI

from .media import router as media_router
from .recommend import router as recommend_router
from .root import router as root_router
from .seen import router as seen_router
from .stats import router as stats_router


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the app."""
    app.include_router(root_router)
    app.include_router(seen_router, prefix="/api", tags=["seen"])
    app.include_router(recommend_router, prefix="/api", tags=["recommend"])
    app.include_router(media_router, prefix="/api", tags=["media"])
    app.include_router(stats_router, prefix="/api", tags=["stats"])

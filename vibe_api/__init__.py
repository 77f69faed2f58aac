"""Vibe Search API service (FastAPI)."""

from .app import app, create_app

__all__ = ["app", "create_app"]

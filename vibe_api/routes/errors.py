"""Map search-core exceptions to HTTP errors."""

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException

from vibesearch import IngestionFailed, MediaNotFound, RetrievalFailed

logger = logging.getLogger(__name__)


@contextmanager
def core_errors(action: str) -> Iterator[None]:
    """MediaNotFound -> 404; upstream (embedding, store, LLM) failures -> 502."""
    try:
        yield
    except MediaNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except (RetrievalFailed, IngestionFailed) as e:
        logger.error("[api] %s failed: %s", action, e)
        raise HTTPException(status_code=502, detail=f"{action} failed: {e}") from e

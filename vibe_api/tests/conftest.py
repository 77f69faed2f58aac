"""
API test fixtures: an AppState over a temp catalog file with a keyword
embedder and a canned chat model, served through FastAPI's TestClient.
"""

import json
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from vibesearch import MediaRecord
from vibe_api.app import create_app
from vibe_api.config import ServerConfig
from vibe_api.state import AppState, set_state

# Axis per vibe keyword; queries and profiles containing a keyword point along it
KEYWORDS = ("neon", "cozy", "space")


class KeywordEmbedder:
    model = "keyword-test"

    def __init__(self):
        self.error: Optional[Exception] = None

    async def embed(self, text: str) -> List[float]:
        if self.error:
            raise self.error
        text = text.lower()
        vec = [1.0 if k in text else 0.0 for k in KEYWORDS]
        return vec if any(vec) else [0.1, 0.1, 0.1]

    def model_name(self) -> str:
        return self.model


class CannedChat:
    """Rerank prompts get `rankings`; any other prompt gets `profile`."""

    model = "canned-chat"

    def __init__(self):
        self.rankings: List[Dict] = []
        self.profile = "cozy rain on a cafe window"
        self.error: Optional[Exception] = None

    async def complete(self, system_prompt: str, user_prompt: str, temperature: float = 0.3) -> str:
        if self.error:
            raise self.error
        if '"rankings"' in system_prompt:
            return json.dumps({"rankings": self.rankings})
        return self.profile


# (id, title, type, vibe, quality, popularity, vector)
CATALOG = [
    ("movie-Blade-Runner", "Blade Runner", "movie", "neon rain noir", 0.9, 0.9, [1.0, 0.0, 0.0]),
    ("anime-Ghost-in-the-Shell", "Ghost in the Shell", "anime", "neon cyber melancholy", 0.8, 0.2, [0.9, 0.0, 0.1]),
    ("anime-Mushishi", "Mushishi", "anime", "cozy quiet forests", 0.7, 0.1, [0.0, 1.0, 0.0]),
    ("movie-Solaris", "Solaris", "movie", "space grief", 0.2, 0.8, [0.0, 0.0, 1.0]),
]


@pytest.fixture
def server_config(tmp_path):
    return ServerConfig(
        openai_api_key=None,
        data_path=tmp_path / "catalog.json",
        log_level="WARNING",
    )


@pytest.fixture
def embedder():
    return KeywordEmbedder()


@pytest.fixture
def chat():
    return CannedChat()


def _seed(state: AppState) -> None:
    for media_id, title, media_type, vibe, quality, popularity, vector in CATALOG:
        state.store.save_media(MediaRecord(
            id=media_id,
            title=title,
            media_type=media_type,
            year=1990,
            vibe_profile=vibe,
            quality_score=quality,
            popularity_score=popularity,
        ))
        state.store.store_embedding(media_id, vector, KeywordEmbedder.model)


@pytest.fixture
def state(server_config, embedder, chat):
    state = AppState(server_config, embedder=embedder, chat=chat)
    _seed(state)
    yield state
    set_state(None)


@pytest.fixture
def client(state):
    """TestClient as a context manager so startup loads the index."""
    with TestClient(create_app(state)) as c:
        yield c


@pytest.fixture
def bare_client(server_config, embedder):
    """No chat model: judge and ingestion are unavailable."""
    state = AppState(server_config, embedder=embedder)
    _seed(state)
    with TestClient(create_app(state)) as c:
        yield c
    set_state(None)

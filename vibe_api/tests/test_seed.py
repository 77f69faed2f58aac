"""
Seed Script Tests

A failing entry is reported and skipped without aborting the run; re-running
repairs titles stored without a vector.

Run:
----
    pytest vibe_api/tests/test_seed.py -v
"""

import asyncio
import json

import pytest

from vibe_api.scripts.seed import seed
from vibe_api.state import AppState, set_state


class FlakyEmbedder:
    """Fails on any text containing "stormy" while `failing` is set."""

    def __init__(self):
        self.failing = True

    async def embed(self, text):
        if self.failing and "stormy" in text:
            raise RuntimeError("embedding quota exceeded")
        return [1.0, 0.0] if "neon" in text else [0.0, 1.0]

    def model_name(self):
        return "flaky-test"


@pytest.fixture
def seed_file(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps({
        "quality_score": 0.8,
        "entries": [
            {"title": "Akira", "media_type": "anime", "year": 1988, "fallback_vibe": "neon chaos"},
            {"title": "Stalker", "media_type": "movie", "year": 1979, "fallback_vibe": "stormy stillness"},
            {"title": "Aria", "media_type": "anime", "year": 2005, "fallback_vibe": "calm water"},
        ],
    }))
    return path


@pytest.fixture
def seed_state(server_config):
    state = AppState(server_config, embedder=FlakyEmbedder())
    yield state
    set_state(None)


class TestSeed:
    def test_failed_entry_does_not_abort_run(self, seed_file, seed_state):
        added = asyncio.run(seed(seed_file, state=seed_state))
        store = seed_state.store
        assert added == 2
        assert store.get_embedding("anime-Akira") == [1.0, 0.0]
        assert store.get_embedding("anime-Aria") == [0.0, 1.0]
        assert store.get_media("movie-Stalker") is not None
        assert store.get_embedding("movie-Stalker") is None
        assert store.get_media("anime-Akira").quality_score == 0.8
        assert store.get_media("anime-Akira").vibe_profile == "neon chaos"

    def test_rerun_repairs_missing_vectors(self, seed_file, seed_state):
        asyncio.run(seed(seed_file, state=seed_state))
        seed_state.embedder.failing = False
        assert asyncio.run(seed(seed_file, state=seed_state)) == 1
        store = seed_state.store
        assert store.get_embedding("movie-Stalker") == [0.0, 1.0]
        assert store.embedding_count() == 3
        assert store.media_count() == 3

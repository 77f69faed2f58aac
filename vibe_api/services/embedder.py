"""
Embedding providers for vibe profiles and queries.

Usage:
    embedder = OpenAIEmbedder(api_key="sk-...")
    vector = await embedder.embed("melancholic neon-noir with slow pacing")

PlaceholderEmbedder is a deterministic character-code hash for local
development without an API key. Its vectors carry no meaning; never mix them
with real embeddings in one index (model_name() differs, and startup only
loads vectors whose model matches).
"""

import os
from typing import List, Optional, Tuple

import numpy as np
from openai import AsyncOpenAI

DEFAULT_MODEL = "text-embedding-3-small"
DEFAULT_DIMENSIONS = 1536


class OpenAIEmbedder:
    """Embeds text with OpenAI's embedding API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        dimensions: int = DEFAULT_DIMENSIONS,
        timeout: float = 30.0,
    ):
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.model = model
        self.dimensions = dimensions
        self.timeout = timeout
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        """Get or create the OpenAI client."""
        if not self.api_key:
            raise ValueError(
                "OpenAI API key not provided. Set OPENAI_API_KEY environment variable "
                "or pass api_key to OpenAIEmbedder."
            )
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    async def embed(self, text: str) -> List[float]:
        response = await self.client.embeddings.create(
            model=self.model,
            input=text,
            dimensions=self.dimensions,
        )
        if not response.data:
            raise ValueError("no embedding data in response")
        return list(response.data[0].embedding)

    def model_name(self) -> str:
        return self.model


class PlaceholderEmbedder:
    """Deterministic pseudo-embedding for development."""

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS):
        self.dimensions = dimensions

    async def embed(self, text: str) -> List[float]:
        return self.embed_sync(text)

    def embed_sync(self, text: str) -> List[float]:
        vec = np.zeros(self.dimensions, dtype=np.float64)
        for i, ch in enumerate(text):
            vec[i % self.dimensions] += ord(ch) / 1000.0
        norm = np.linalg.norm(vec)
        if norm > 0:
            vec /= norm
        return vec.tolist()

    def model_name(self) -> str:
        return "placeholder-dev"


def check_openai_available(api_key: Optional[str]) -> Tuple[bool, str]:
    """(available, message) for the health endpoint; does not call the API."""
    if not (api_key or "").strip():
        return False, "OPENAI_API_KEY not set (using placeholder embeddings)"
    return True, "configured"

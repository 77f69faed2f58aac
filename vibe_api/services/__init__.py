"""External collaborators for the search core: store, embedders, LLM."""

from .catalog_store import JsonCatalogStore
from .embedder import OpenAIEmbedder, PlaceholderEmbedder, check_openai_available
from .llm_client import LiteLLMChat, VibeProfileWriter

__all__ = [
    "JsonCatalogStore",
    "LiteLLMChat",
    "OpenAIEmbedder",
    "PlaceholderEmbedder",
    "VibeProfileWriter",
    "check_openai_available",
]

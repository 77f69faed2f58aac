"""
Error taxonomy for the search pipeline.

Only RetrievalFailed (and MediaNotFound on lookups by id) cross the
orchestrator boundary. JudgeDegraded stays inside it.
"""


class RetrievalFailed(Exception):
    """Query embedding or exclusion lookup failed; the request has no result."""


class EmbeddingFailed(RetrievalFailed):
    """The embedding provider raised or timed out."""


class ExclusionLookupFailed(RetrievalFailed):
    """The seen-media lookup raised or timed out."""


class MediaNotFound(LookupError):
    """A media id has no record (or no stored vector) where one is required."""

    def __init__(self, media_id: str, what: str = "media"):
        super().__init__(f"{what} not found: {media_id}")
        self.media_id = media_id


class JudgeDegraded(Exception):
    """The reranker failed or timed out; callers fall back to similarity order."""


class IngestionFailed(Exception):
    """Profile generation, embedding or persistence failed while adding media."""

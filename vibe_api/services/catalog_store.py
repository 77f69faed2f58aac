"""
Catalog store: media records, users, watch history and vibe embeddings.

Persisted to a single JSON file (e.g. data/catalog.json):

    {
      "media":      {media_id: MediaRecord dict},
      "users":      {user_id: {"user_id", "created_at"}},
      "seen":       {user_id: [{"media_id", "rating", "seen_at"}]},
      "embeddings": {media_id: {"vector": [...], "model": str}}
    }

Every method has a sync form; the *_async forms used by the search pipeline
run the sync one in a worker thread so file I/O never blocks the event loop.
"""

import asyncio
import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from vibesearch import MediaNotFound, MediaRecord

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class JsonCatalogStore:
    """Catalog backed by a JSON file, guarded by one lock."""

    def __init__(self, path: Union[Path, str], max_quality_boost: float = 2.0):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self.max_quality_boost = max_quality_boost
        self._media: Dict[str, Dict] = {}
        self._users: Dict[str, Dict] = {}
        self._seen: Dict[str, List[Dict]] = {}
        self._embeddings: Dict[str, Dict] = {}
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            return
        with open(self._path) as f:
            data = json.load(f)
        self._media = data.get("media", {})
        self._users = data.get("users", {})
        self._seen = data.get("seen", {})
        self._embeddings = data.get("embeddings", {})
        logger.info(
            "[store] LOADED path=%s media=%d embeddings=%d users=%d",
            self._path, len(self._media), len(self._embeddings), len(self._users),
        )

    def _save(self) -> None:
        out = {
            "media": self._media,
            "users": self._users,
            "seen": self._seen,
            "embeddings": self._embeddings,
        }
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        with open(tmp, "w") as f:
            json.dump(out, f, indent=2)
        tmp.replace(self._path)

    # ------------------------------------------------------------------
    # Media
    # ------------------------------------------------------------------

    def get_media(self, media_id: str) -> Optional[MediaRecord]:
        with self._lock:
            d = self._media.get(media_id)
        return MediaRecord.model_validate(d) if d else None

    def find_by_title(self, title: str) -> Optional[MediaRecord]:
        key = title.strip().lower()
        with self._lock:
            for d in self._media.values():
                if d.get("title", "").strip().lower() == key:
                    return MediaRecord.model_validate(d)
        return None

    def save_media(self, media: MediaRecord) -> MediaRecord:
        """Insert or replace a record."""
        with self._lock:
            self._media[media.id] = media.model_dump(mode="json")
            self._save()
        return media

    def list_media(self) -> List[MediaRecord]:
        with self._lock:
            records = list(self._media.values())
        return [MediaRecord.model_validate(d) for d in records]

    def media_count(self) -> int:
        with self._lock:
            return len(self._media)

    def apply_quality_boost(self, media_id: str, amount: float) -> float:
        """Add a capped boost to quality_score; returns the new score."""
        amount = min(amount, self.max_quality_boost)
        with self._lock:
            d = self._media.get(media_id)
            if d is None:
                raise MediaNotFound(media_id)
            d["quality_score"] = float(d.get("quality_score", 0.0)) + amount
            d["updated_at"] = _now()
            self._save()
            return d["quality_score"]

    # ------------------------------------------------------------------
    # Embeddings
    # ------------------------------------------------------------------

    def store_embedding(self, media_id: str, vector: List[float], model: str) -> None:
        with self._lock:
            self._embeddings[media_id] = {"vector": [float(x) for x in vector], "model": model}
            self._save()

    def get_embedding(self, media_id: str) -> Optional[List[float]]:
        with self._lock:
            entry = self._embeddings.get(media_id)
        return list(entry["vector"]) if entry else None

    def all_embeddings(self, model: Optional[str] = None) -> Dict[str, List[float]]:
        """Every stored vector, optionally only those produced by `model`."""
        with self._lock:
            return {
                media_id: list(entry["vector"])
                for media_id, entry in self._embeddings.items()
                if model is None or entry.get("model") == model
            }

    def embedding_count(self) -> int:
        with self._lock:
            return len(self._embeddings)

    # ------------------------------------------------------------------
    # Users and watch history
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> Optional[Dict]:
        with self._lock:
            return self._users.get(user_id)

    def ensure_user(self, user_id: str) -> Dict:
        """Return the user, creating it on first sight."""
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                user = {"user_id": user_id, "created_at": _now()}
                self._users[user_id] = user
                self._save()
                logger.info("[store] USER_CREATED user_id=%s", user_id)
            return user

    def mark_seen(self, user_id: str, media_id: str, rating: Optional[float] = None) -> Dict:
        """Record media as seen; marking again replaces the rating."""
        with self._lock:
            if media_id not in self._media:
                raise MediaNotFound(media_id)
            self.ensure_user(user_id)
            entries = [e for e in self._seen.get(user_id, []) if e["media_id"] != media_id]
            entry = {"media_id": media_id, "rating": rating, "seen_at": _now()}
            entries.append(entry)
            self._seen[user_id] = entries
            self._save()
            return entry

    def unmark_seen(self, user_id: str, media_id: str) -> bool:
        with self._lock:
            entries = self._seen.get(user_id, [])
            kept = [e for e in entries if e["media_id"] != media_id]
            if len(kept) == len(entries):
                return False
            self._seen[user_id] = kept
            self._save()
            return True

    def seen_entries(self, user_id: str) -> List[Dict]:
        """Seen entries (most recent first) joined with their media records."""
        with self._lock:
            entries = list(self._seen.get(user_id, []))
            out = []
            for e in reversed(entries):
                media = self._media.get(e["media_id"])
                if media is not None:
                    out.append({**e, "media": media})
            return out

    def seen_ids(self, user_id: str) -> Set[str]:
        """Unknown user -> empty set."""
        with self._lock:
            return {e["media_id"] for e in self._seen.get(user_id, [])}

    # ------------------------------------------------------------------
    # Async forms for the search pipeline
    # ------------------------------------------------------------------

    async def lookup_exclusion_ids_async(self, user_id: str) -> Set[str]:
        return await asyncio.to_thread(self.seen_ids, user_id)

    async def fetch_record_async(self, media_id: str) -> Optional[MediaRecord]:
        return await asyncio.to_thread(self.get_media, media_id)

    async def list_media_async(self) -> List[MediaRecord]:
        return await asyncio.to_thread(self.list_media)

    async def find_by_title_async(self, title: str) -> Optional[MediaRecord]:
        return await asyncio.to_thread(self.find_by_title, title)

    async def save_media_async(self, media: MediaRecord) -> MediaRecord:
        return await asyncio.to_thread(self.save_media, media)

    async def store_embedding_async(self, media_id: str, vector: List[float], model: str) -> None:
        await asyncio.to_thread(self.store_embedding, media_id, vector, model)

    async def apply_quality_boost_async(self, media_id: str, amount: float) -> float:
        return await asyncio.to_thread(self.apply_quality_boost, media_id, amount)

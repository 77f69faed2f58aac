#!/usr/bin/env python3
"""
Seed the catalog with a starter set of titles.

Each entry gets a vibe profile from the LLM when OPENAI_API_KEY is set; on
error, or without a key, the entry's pre-written fallback profile is used.
Profiles are embedded with the configured embedder and stored alongside the
records, so the next server start loads them into the index.

Usage:
  From repo root:
    python -m vibe_api.scripts.seed
    python -m vibe_api.scripts.seed --seed-file my_titles.json --data-path data/catalog.json
"""

import argparse
import asyncio
import json
from pathlib import Path
from typing import Dict, Optional

from vibesearch import IngestionFailed, MediaIngestor, VectorIndex, VibeProfileRequest

from ..config import get_config
from ..services import JsonCatalogStore, VibeProfileWriter
from ..state import AppState

DEFAULT_SEED_FILE = Path(__file__).resolve().parent / "seed_catalog.json"


class FallbackProfileWriter:
    """LLM profile when available, else the pre-written one for the title."""

    def __init__(self, fallbacks: Dict[str, str], primary: Optional[VibeProfileWriter] = None):
        self.fallbacks = fallbacks
        self.primary = primary

    async def write_profile(self, title: str, media_type: str, year: Optional[int], synopsis: str) -> str:
        if self.primary is not None:
            try:
                return await self.primary.write_profile(title, media_type, year, synopsis)
            except Exception as e:
                print(f"  LLM error for {title}: {e}, using fallback")
        return self.fallbacks[title]


async def seed(seed_file: Path, data_path: Optional[Path] = None, state: Optional[AppState] = None) -> int:
    """
    Ingest every new entry; returns the number added or repaired.

    An entry that fails (e.g. the embedding call) is reported and skipped; a
    title already stored without a vector is refreshed, so re-running the seed
    repairs earlier failures.
    """
    if state is None:
        config = get_config()
        if data_path is not None:
            config.data_path = data_path
        state = AppState(config)

    with open(seed_file) as f:
        data = json.load(f)
    entries = data["entries"]
    quality = float(data.get("quality_score", 0.0))

    store: JsonCatalogStore = state.store
    store.ensure_user("default")
    writer = FallbackProfileWriter({e["title"]: e["fallback_vibe"] for e in entries}, state.profile_writer)
    ingestor = MediaIngestor(store, state.embedder, writer, VectorIndex(), state.search_config)

    print(f"Seeding catalog: {state.config.data_path}")
    print(f"Embedding model: {state.embedder.model_name()}")
    added = 0
    failed = []
    for entry in entries:
        existing = store.find_by_title(entry["title"])
        if existing is not None and store.get_embedding(existing.id) is not None:
            print(f"  {entry['title']}: already exists, skipping")
            continue
        try:
            if existing is not None:
                media = await ingestor.refresh(existing.id)
            else:
                media = await ingestor.ingest(VibeProfileRequest(
                    title=entry["title"],
                    media_type=entry["media_type"],
                    year=entry.get("year"),
                    synopsis=entry.get("synopsis", ""),
                ))
        except IngestionFailed as e:
            print(f"  {entry['title']}: FAILED ({e})")
            failed.append(entry["title"])
            continue
        store.save_media(media.model_copy(update={"quality_score": quality}))
        added += 1
        print(f"  {media.title} ({media.year}): done")
    skipped = len(entries) - added - len(failed)
    print(f"Seed complete: {added} added, {skipped} skipped, {len(failed)} failed")
    if failed:
        print("Re-run the seed to retry: " + ", ".join(failed))
    return added


def main():
    parser = argparse.ArgumentParser(description="Seed the vibe catalog")
    parser.add_argument("--seed-file", type=Path, default=DEFAULT_SEED_FILE)
    parser.add_argument("--data-path", type=Path, default=None, help="Catalog JSON (default: DATA_PATH)")
    args = parser.parse_args()
    get_config().configure_logging()
    asyncio.run(seed(args.seed_file, args.data_path))


if __name__ == "__main__":
    main()

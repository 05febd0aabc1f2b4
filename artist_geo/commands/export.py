from __future__ import annotations

import json
import logging
from pathlib import Path

from ..resolver import ArtistLocationResolver
from ..store import LocationStore

logger = logging.getLogger(__name__)


def build_location_map(store: LocationStore, resolver: ArtistLocationResolver) -> dict[str, dict]:
    """Resolved locations for every stored artist with coordinates, by normalized name."""
    locations: dict[str, dict] = {}
    for record in store.iter_records_with_coordinates():
        location = resolver.get_location(record.normalized_key)
        if location is None:
            continue
        locations[record.normalized_key] = location.to_dict()
    return locations


def run(store: LocationStore, resolver: ArtistLocationResolver, *, out: Path) -> int:
    locations = build_location_map(store, resolver)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(
        json.dumps(locations, indent=2, ensure_ascii=False, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    size_mb = out.stat().st_size / 1024 / 1024
    logger.info("Exported %d locations to %s", len(locations), out)
    print(f"Exported {len(locations)} locations to {out} ({size_mb:.2f} MB)")
    return len(locations)

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from ..models import RawLocationRecord
from ..providers.musicbrainz import record_from_artist
from ..resolver import ArtistLocationResolver


def load_artist_payload(path: Path) -> dict[str, Any]:
    """Read a single MusicBrainz artist object from a JSON file."""
    with path.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)
    if isinstance(payload, dict) and isinstance(payload.get("artist"), dict):
        payload = payload["artist"]
    if not isinstance(payload, dict):
        raise ValueError(f"{path} does not contain a MusicBrainz artist object")
    return payload


def run(
    resolver: ArtistLocationResolver,
    name: Optional[str],
    *,
    from_json: Optional[Path] = None,
    **fields: Any,
) -> RawLocationRecord:
    if from_json is not None:
        record = record_from_artist(load_artist_payload(from_json), name=name)
        if record is None:
            raise ValueError(f"{from_json} has no artist name; pass one explicitly")
    else:
        if not name:
            raise ValueError("an artist name is required")
        record = RawLocationRecord(name=name, **{k: v for k, v in fields.items() if v is not None})
    stored = resolver.record_location(name or record.name, record)
    location = resolver.get_location(stored.normalized_key)
    if location:
        print(f"Stored {stored.name}: {location.to_dict()}")
    else:
        pending = stored.area_query()
        suffix = f" (area {pending}, coordinates pending)" if pending else ""
        print(f"Stored {stored.name}: no coordinates{suffix}")
    return stored

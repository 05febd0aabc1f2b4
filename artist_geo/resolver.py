"""
Artist location orchestration.

The resolver owns a process-lifetime session cache and a store handle. It is
constructed explicitly (see ``ArtistGeoApp.create``) and passed to callers.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Protocol

from .disambiguation import resolve
from .models import (
    LocationBatch,
    RawLocationRecord,
    ResolvedLocation,
    coordinate_pair,
    normalize_name,
)
from .overrides import SPECIAL_CASES, lookup_override

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """The part of ``LocationStore`` the resolver depends on."""

    def get(self, normalized_key: str) -> Optional[RawLocationRecord]: ...

    def put(self, normalized_key: str, record: RawLocationRecord) -> None: ...


class ArtistLocationResolver:
    def __init__(
        self,
        store: RecordStore,
        overrides: Mapping[str, ResolvedLocation] = SPECIAL_CASES,
    ) -> None:
        self.store = store
        self.overrides = overrides
        self._cache: dict[str, Optional[ResolvedLocation]] = {}

    @property
    def cached_count(self) -> int:
        return len(self._cache)

    def clear_cache(self) -> None:
        self._cache.clear()

    def get_location(self, artist_name: str) -> Optional[ResolvedLocation]:
        """Resolve an artist name without any network access.

        Unknown artists and records without coordinates both yield None and
        are cached as such. ``StoreUnavailableError`` propagates and nothing
        is cached for that name.
        """
        key = normalize_name(artist_name)
        if not key:
            return None
        if key in self._cache:
            return self._cache[key]
        override = lookup_override(key, self.overrides)
        if override is not None:
            self._cache[key] = override
            return override
        raw = self.store.get(key)
        location = resolve(raw) if raw is not None else None
        if raw is not None and location is None and raw.has_area():
            logger.debug("%s has area %r but no coordinates yet", key, raw.area_query())
        self._cache[key] = location
        return location

    def record_location(self, artist_name: str, raw: RawLocationRecord) -> RawLocationRecord:
        """Upsert a raw record for ``artist_name`` (last write wins)."""
        key = normalize_name(artist_name)
        if not key:
            raise ValueError("artist name must not be empty")
        pair = coordinate_pair(raw.lat, raw.lng)
        lat, lng = pair if pair else (None, None)
        record = dataclasses.replace(
            raw,
            name=artist_name.strip(),
            normalized_key=key,
            lat=lat,
            lng=lng,
            updated_at=datetime.now(timezone.utc),
        )
        self.store.put(key, record)
        self._cache.pop(key, None)
        logger.debug(
            "Recorded location for %s (area=%r, coordinates=%s)",
            key,
            record.area_query(),
            "yes" if pair else "no",
        )
        return record

    def resolve_artist_location(self, name: str) -> Optional[dict[str, Any]]:
        location = self.get_location(name)
        return location.to_dict() if location else None

    def ingest_raw_location(self, name: str, **fields: Any) -> None:
        fields.pop("name", None)
        fields.pop("normalized_key", None)
        fields.pop("updated_at", None)
        self.record_location(name, RawLocationRecord(name=name, **fields))

    def resolve_batch(
        self,
        names: Iterable[str],
        start_index: int = 0,
        batch_size: int = 100,
    ) -> LocationBatch:
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        all_names = list(names)
        start = max(0, start_index)
        window = all_names[start : start + batch_size]
        batch = LocationBatch(
            locations=[(name, self.get_location(name)) for name in window],
            processed=len(window),
            next_index=start + batch_size,
            has_more=start + batch_size < len(all_names),
        )
        logger.info(
            "Batch complete: %d locations found out of %d artists",
            batch.found,
            batch.processed,
        )
        return batch

    def area_query_for(self, artist_name: str) -> Optional[str]:
        raw = self.store.get(normalize_name(artist_name))
        return raw.area_query() if raw else None

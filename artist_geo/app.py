from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .config import Settings
from .models import RawLocationRecord
from .providers.musicbrainz import MusicBrainzLocationProvider
from .resolver import ArtistLocationResolver
from .store import LocationStore

logger = logging.getLogger(__name__)


@dataclass
class ArtistGeoApp:
    settings: Settings
    store: LocationStore
    resolver: ArtistLocationResolver
    _musicbrainz: MusicBrainzLocationProvider | None = None

    @classmethod
    def create(cls, settings: Settings) -> "ArtistGeoApp":
        store = LocationStore(settings.store.path)
        resolver = ArtistLocationResolver(store)
        return cls(settings=settings, store=store, resolver=resolver)

    def get_musicbrainz(self) -> MusicBrainzLocationProvider:
        if self._musicbrainz is None:
            self._musicbrainz = MusicBrainzLocationProvider(self.settings.providers)
        return self._musicbrainz

    def fetch_and_record(self, artist_name: str) -> Optional[RawLocationRecord]:
        """Live-lookup fallback: fetch from MusicBrainz and store what was found."""
        record = self.get_musicbrainz().fetch(artist_name)
        if record is None:
            logger.info("No MusicBrainz area found for %s", artist_name)
            return None
        return self.resolver.record_location(artist_name, record)

    def close(self) -> None:
        self.store.close()

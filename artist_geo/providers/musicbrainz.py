"""
MusicBrainz artist area lookup.

Turns MusicBrainz artist payloads (web service results via ``musicbrainzngs``
or JSON dump entries) into ``RawLocationRecord`` objects for the store.
MusicBrainz rarely carries coordinates, so fetched records usually land in the
store with area names only and wait for an external geocoding pass.
"""

from __future__ import annotations

import functools
import logging
import socket
import time
import urllib.error
from typing import Any, Callable, Mapping, Optional, Tuple

import musicbrainzngs

from ..config import ProviderSettings
from ..models import RawLocationRecord, clean_text, coordinate_pair

logger = logging.getLogger(__name__)

APP_NAME = "artist-geo"
APP_VERSION = "0.1"


def record_from_artist(
    artist: Mapping[str, Any], name: Optional[str] = None
) -> Optional[RawLocationRecord]:
    """Build a raw record from one MusicBrainz artist object.

    ``name`` overrides the artist's own name so records are keyed by what the
    caller searched for. Returns None when there is no usable name.
    """
    display_name = clean_text(name) or clean_text(artist.get("name"))
    if not display_name:
        return None
    area = artist.get("area") or {}
    begin_area = artist.get("begin-area") or {}
    codes = area.get("iso-3166-1-codes") or area.get("iso-3166-1-code-list") or []
    country_code = clean_text(artist.get("country")) or (clean_text(codes[0]) if codes else None)
    coordinates = _relation_coordinates(artist)
    lat, lng = coordinates if coordinates else (None, None)
    return RawLocationRecord(
        name=display_name,
        external_id=artist.get("id"),
        area_name=area.get("name"),
        begin_area_name=begin_area.get("name"),
        country_code=country_code,
        lat=lat,
        lng=lng,
    )


def _relation_coordinates(artist: Mapping[str, Any]) -> Optional[Tuple[float, float]]:
    relations = artist.get("relations") or artist.get("area-relation-list") or []
    for relation in relations:
        if not isinstance(relation, Mapping):
            continue
        area = relation.get("area") or {}
        coords = area.get("coordinates") or {}
        pair = coordinate_pair(coords.get("latitude"), coords.get("longitude"))
        if pair:
            return pair
    return None


class MusicBrainzLocationProvider:
    """Live per-artist lookup against the MusicBrainz web service.

    Respects the 1 request/second rate limit and retries transient network
    errors. Failures are logged and reported as "no result", never raised.
    """

    def __init__(self, settings: ProviderSettings) -> None:
        self.settings = settings
        self._last_request = 0.0
        musicbrainzngs.set_useragent(APP_NAME, APP_VERSION, contact=settings.musicbrainz_useragent)

    def fetch(self, artist_name: str) -> Optional[RawLocationRecord]:
        query = clean_text(artist_name)
        if not query:
            return None
        search = self._call(
            functools.partial(
                musicbrainzngs.search_artists, artist=query, limit=self.settings.search_limit
            ),
            label="MusicBrainz artist search",
            subject=query,
        )
        candidates = (search or {}).get("artist-list") or []
        if not candidates:
            logger.debug("No MusicBrainz results for %s", query)
            return None
        for candidate in candidates:
            artist_id = candidate.get("id")
            if not artist_id:
                continue
            details = self._call(
                functools.partial(
                    musicbrainzngs.get_artist_by_id, artist_id, includes=["area-rels"]
                ),
                label="MusicBrainz artist lookup",
                subject=query,
            )
            artist = (details or {}).get("artist")
            if not artist:
                continue
            record = record_from_artist(artist, name=query)
            if record and record.has_area():
                logger.info("%s -> %s (%s)", query, record.area_query(), artist_id)
                return record
        logger.debug("No MusicBrainz candidate for %s carries an area", query)
        return None

    def _respect_rate_limit(self) -> None:
        delay = max(0.0, float(self.settings.request_delay_seconds))
        elapsed = time.monotonic() - self._last_request
        if elapsed < delay:
            time.sleep(delay - elapsed)
        self._last_request = time.monotonic()

    def _call(self, fn: Callable[[], Any], *, label: str, subject: str) -> Any:
        retries = max(0, int(self.settings.network_retries))
        backoff = max(0.0, float(self.settings.network_retry_backoff_seconds))
        attempts = 1 + retries
        last_exc: Exception | None = None
        for attempt in range(1, attempts + 1):
            self._respect_rate_limit()
            try:
                return fn()
            except Exception as exc:
                if self._is_response_error(exc):
                    logger.warning("%s failed for %s: %s", label, subject, exc)
                    return None
                if not self._is_transient_network_error(exc):
                    raise
                last_exc = exc
                if attempt >= attempts:
                    break
                sleep_for = backoff * (2 ** (attempt - 1))
                if sleep_for:
                    time.sleep(sleep_for)
        logger.warning("%s failed for %s: %s", label, subject, last_exc)
        return None

    @staticmethod
    def _is_response_error(exc: Exception) -> bool:
        response_err = getattr(musicbrainzngs, "ResponseError", None)
        return bool(response_err) and isinstance(exc, response_err)

    @staticmethod
    def _is_transient_network_error(exc: Exception) -> bool:
        if isinstance(exc, (socket.gaierror, urllib.error.URLError, TimeoutError, ConnectionError)):
            return True
        network_err = getattr(musicbrainzngs, "NetworkError", None)
        return bool(network_err) and isinstance(exc, network_err)

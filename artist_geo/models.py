from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


def normalize_name(name: Optional[str]) -> str:
    """Return the store/cache identity for an artist name."""
    if not name:
        return ""
    return name.strip().lower()


def clean_text(value: object) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    text = str(value).strip()
    return text or None


def parse_coordinate(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def coordinate_pair(lat: object, lng: object) -> Optional[Tuple[float, float]]:
    """Return ``(lat, lng)`` only when both values are usable coordinates."""
    lat_value = parse_coordinate(lat)
    lng_value = parse_coordinate(lng)
    if lat_value is None or lng_value is None:
        return None
    if not -90.0 <= lat_value <= 90.0 or not -180.0 <= lng_value <= 180.0:
        return None
    return lat_value, lng_value


@dataclass(slots=True)
class RawLocationRecord:
    name: str
    normalized_key: str = ""
    external_id: Optional[str] = None
    area_name: Optional[str] = None
    begin_area_name: Optional[str] = None
    country_code: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    city: Optional[str] = None
    country: Optional[str] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.normalized_key:
            self.normalized_key = normalize_name(self.name)
        self.external_id = clean_text(self.external_id)
        self.area_name = clean_text(self.area_name)
        self.begin_area_name = clean_text(self.begin_area_name)
        self.country_code = clean_text(self.country_code)
        self.city = clean_text(self.city)
        self.country = clean_text(self.country)

    @property
    def coordinates(self) -> Optional[Tuple[float, float]]:
        return coordinate_pair(self.lat, self.lng)

    def has_coordinates(self) -> bool:
        return self.coordinates is not None

    def has_area(self) -> bool:
        return bool(self.area_name or self.begin_area_name)

    def area_query(self) -> Optional[str]:
        """The string a geocoder should look up for this record."""
        return self.begin_area_name or self.area_name or self.country_code

    def to_record(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "normalized_key": self.normalized_key,
            "external_id": self.external_id,
            "area_name": self.area_name,
            "begin_area_name": self.begin_area_name,
            "country_code": self.country_code,
            "lat": self.lat,
            "lng": self.lng,
            "city": self.city,
            "country": self.country,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True, slots=True)
class ResolvedLocation:
    lat: float
    lng: float
    city: Optional[str] = None
    country: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"lat": self.lat, "lng": self.lng}
        if self.city:
            payload["city"] = self.city
        if self.country:
            payload["country"] = self.country
        return payload


@dataclass(slots=True)
class LocationBatch:
    locations: List[Tuple[str, Optional[ResolvedLocation]]] = field(default_factory=list)
    processed: int = 0
    next_index: int = 0
    has_more: bool = False

    @property
    def found(self) -> int:
        return sum(1 for _name, location in self.locations if location is not None)

    def to_record(self) -> Dict[str, object]:
        return {
            "locations": [
                {"name": name, "location": location.to_dict() if location else None}
                for name, location in self.locations
            ],
            "processed": self.processed,
            "nextIndex": self.next_index,
            "hasMore": self.has_more,
        }


class ArtistGeoError(Exception):
    """Base class for errors raised by the artist location core."""


class StoreUnavailableError(ArtistGeoError):
    """Raised when the location store cannot be read or written.

    Distinct from an unknown location so callers can retry instead of
    recording "no location".
    """

"""
Static country tables used by the disambiguator.

Membership in ``KNOWN_COUNTRIES`` decides whether a free-text area is treated
as a country or as a city/region, so the list is kept explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

KNOWN_COUNTRIES: frozenset[str] = frozenset(
    {
        "United States",
        "United Kingdom",
        "Canada",
        "Australia",
        "Germany",
        "France",
        "Japan",
        "Italy",
        "Spain",
        "Netherlands",
        "Sweden",
        "Norway",
        "Denmark",
        "Finland",
        "Poland",
        "Brazil",
        "Mexico",
        "Argentina",
        "India",
        "China",
        "South Korea",
        "Russia",
        "Belgium",
        "Switzerland",
        "Austria",
        "Portugal",
        "Greece",
        "Ireland",
        "New Zealand",
        "South Africa",
        "Turkey",
        "Indonesia",
        "Thailand",
        "Vietnam",
        "Philippines",
        "Chile",
        "Colombia",
        "Peru",
    }
)

COUNTRY_CODE_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "US": "United States",
        "GB": "United Kingdom",
        "CA": "Canada",
        "AU": "Australia",
        "DE": "Germany",
        "FR": "France",
        "JP": "Japan",
        "IT": "Italy",
        "ES": "Spain",
        "NL": "Netherlands",
        "SE": "Sweden",
        "NO": "Norway",
        "DK": "Denmark",
        "FI": "Finland",
        "PL": "Poland",
        "BR": "Brazil",
        "MX": "Mexico",
        "AR": "Argentina",
        "IN": "India",
        "CN": "China",
        "KR": "South Korea",
        "RU": "Russia",
        "IE": "Ireland",
        "NZ": "New Zealand",
        "ZA": "South Africa",
        "TR": "Turkey",
        "ID": "Indonesia",
        "TH": "Thailand",
        "VN": "Vietnam",
        "PH": "Philippines",
        "CL": "Chile",
        "CO": "Colombia",
        "PE": "Peru",
    }
)


@dataclass(frozen=True, slots=True)
class CoordinateBox:
    country: str
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng


# Order matters: boxes overlap near borders and the first match wins.
COORDINATE_BOXES: tuple[CoordinateBox, ...] = (
    CoordinateBox("United States", 24.396308, 49.384358, -125.0, -66.93457),
    CoordinateBox("United Kingdom", 49.8, 60.9, -8.2, 1.8),
    CoordinateBox("Canada", 41.7, 83.1, -141.0, -52.6),
)


def is_known_country(value: Optional[str]) -> bool:
    return bool(value) and value in KNOWN_COUNTRIES


def country_name_for_code(code: Optional[str]) -> Optional[str]:
    """Display name for an ISO 3166-1 alpha-2 code, or None when unmapped."""
    if not code:
        return None
    return COUNTRY_CODE_NAMES.get(code.strip().upper())


def map_country_code(code: Optional[str]) -> Optional[str]:
    """Display name for a code, falling back to the raw code itself."""
    if not code:
        return None
    return country_name_for_code(code) or code.strip()


def infer_country_from_coordinates(lat: float, lng: float) -> Optional[str]:
    for box in COORDINATE_BOXES:
        if box.contains(lat, lng):
            return box.country
    return None

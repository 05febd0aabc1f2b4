"""
Geo disambiguation for raw artist location records.

MusicBrainz area data is inconsistent: ``area`` may be a country, a region or
a city, stored city/country values may be swapped or duplicated, and the
country code may be the only reliable signal. ``resolve`` turns a raw record
into one consistent ``ResolvedLocation`` in two stages:

1. pick a candidate ``(city, country)`` pair from the first matching source
   rule;
2. run the correction passes in ``CORRECTION_PASSES`` order.

Every pass is a small pure function over ``_Candidate`` so individual rules
can be changed and tested in isolation. Nothing here raises on bad input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .countries import (
    infer_country_from_coordinates,
    is_known_country,
    map_country_code,
)
from .models import RawLocationRecord, ResolvedLocation, clean_text

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Candidate:
    city: Optional[str]
    country: Optional[str]
    country_code: Optional[str]
    lat: float
    lng: float


# ---------------------------------------------------------------------------
# Candidate selection
# ---------------------------------------------------------------------------


def _candidate_pair(raw: RawLocationRecord) -> tuple[Optional[str], Optional[str]]:
    city = clean_text(raw.city)
    country = clean_text(raw.country)
    area = clean_text(raw.area_name)
    begin_area = clean_text(raw.begin_area_name)
    code = clean_text(raw.country_code)

    # Stored pair looks sane: a non-country city inside a recognized country.
    if (
        city
        and country
        and city != country
        and not is_known_country(city)
        and is_known_country(country)
    ):
        return city, country

    if begin_area and area:
        if is_known_country(area):
            return begin_area, area
        # area is probably a region or state; the code is mapped later.
        return begin_area, code or area

    if begin_area:
        return begin_area, country or area or code

    if area:
        if is_known_country(area):
            return city or begin_area, area
        if country and is_known_country(country) and country != area:
            return area, country
        return area, code

    return city or begin_area, country or code


# ---------------------------------------------------------------------------
# Correction passes
# ---------------------------------------------------------------------------


def _holds_raw_code(c: _Candidate) -> bool:
    # The source rules park the raw country code in ``country`` until pass d.
    return bool(c.country_code and c.country) and c.country.upper() == c.country_code.upper()


def swap_reversed_pair(c: _Candidate) -> None:
    """a. Country is not a country but city is: the source had them reversed."""
    if (
        c.country
        and c.city
        and not _holds_raw_code(c)
        and not is_known_country(c.country)
        and is_known_country(c.city)
    ):
        c.city, c.country = c.country, c.city


def move_city_out_of_country(c: _Candidate) -> None:
    """b. An unrecognized country with no city is really a city name."""
    if c.country and not c.city and not _holds_raw_code(c) and not is_known_country(c.country):
        c.city = c.country
        c.country = None


def collapse_duplicate(c: _Candidate) -> None:
    """c. city == country and it is not a country: the country is wrong."""
    if c.city and c.city == c.country and not is_known_country(c.city):
        c.country = None


def map_code_to_country(c: _Candidate) -> None:
    """d. Fill a missing country from the country code (raw code if unmapped)."""
    if c.country_code and (not c.country or _holds_raw_code(c)):
        c.country = map_country_code(c.country_code)


def infer_from_coordinates(c: _Candidate) -> None:
    """e. Last-resort bounding-box guess when only a city is known."""
    if c.city and not c.country:
        c.country = infer_country_from_coordinates(c.lat, c.lng)


def recheck_duplicate(c: _Candidate) -> None:
    """f. Never let city == country, or a country name as city, reach callers.

    Post: city != country, and city is not a recognized country name.
    """
    if c.city and c.city == c.country:
        c.country = map_country_code(c.country_code)
        if c.country == c.city:
            c.country = None
    if c.city and is_known_country(c.city):
        if not c.country or c.country == c.city:
            c.country = c.city
        c.city = None


CORRECTION_PASSES: tuple[Callable[[_Candidate], None], ...] = (
    swap_reversed_pair,
    move_city_out_of_country,
    collapse_duplicate,
    map_code_to_country,
    infer_from_coordinates,
    recheck_duplicate,
)


def resolve(raw: Optional[RawLocationRecord]) -> Optional[ResolvedLocation]:
    """Resolve a raw record into a clean location.

    Returns None when the record is missing or has no usable coordinates;
    callers treat that as "area known at best, coordinates pending".
    """
    if raw is None:
        return None
    coordinates = raw.coordinates
    if coordinates is None:
        if raw.lat is not None or raw.lng is not None:
            logger.debug(
                "Ignoring malformed coordinates for %s: lat=%r lng=%r",
                raw.normalized_key,
                raw.lat,
                raw.lng,
            )
        return None
    lat, lng = coordinates
    city, country = _candidate_pair(raw)
    candidate = _Candidate(
        city=city,
        country=country,
        country_code=clean_text(raw.country_code),
        lat=lat,
        lng=lng,
    )
    for correction in CORRECTION_PASSES:
        correction(candidate)
    return ResolvedLocation(lat=lat, lng=lng, city=candidate.city, country=candidate.country)

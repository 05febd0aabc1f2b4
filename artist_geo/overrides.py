from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from .models import ResolvedLocation, normalize_name

_LONDON = ResolvedLocation(lat=51.5074, lng=-0.1278, city="London", country="United Kingdom")

# Artists whose MusicBrainz area data resolves to the wrong place.
SPECIAL_CASES: Mapping[str, ResolvedLocation] = MappingProxyType(
    {
        "m.i.a.": _LONDON,
        "m.i.a": _LONDON,
    }
)


def lookup_override(
    normalized_key: str,
    table: Mapping[str, ResolvedLocation] = SPECIAL_CASES,
) -> Optional[ResolvedLocation]:
    return table.get(normalize_name(normalized_key))

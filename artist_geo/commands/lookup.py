from __future__ import annotations

import json
from typing import Sequence

from ..resolver import ArtistLocationResolver
from .output import describe_location


def run(
    resolver: ArtistLocationResolver,
    names: Sequence[str],
    *,
    json_output: bool = False,
) -> int:
    """Print locations for ``names``; returns how many were found."""
    results = [(name, resolver.resolve_artist_location(name)) for name in names]
    if json_output:
        payload = [{"name": name, "location": location} for name, location in results]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        for name, location in results:
            print(describe_location(name, location))
    return sum(1 for _name, location in results if location)

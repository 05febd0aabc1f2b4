from __future__ import annotations

import logging
from typing import Sequence

from ..app import ArtistGeoApp

logger = logging.getLogger(__name__)


def run(app: ArtistGeoApp, names: Sequence[str]) -> tuple[int, int]:
    """Look each name up on MusicBrainz and store any area found.

    Returns ``(found, not_found)``.
    """
    found = 0
    not_found = 0
    total = len(names)
    for index, name in enumerate(names, 1):
        record = app.fetch_and_record(name)
        if record is None:
            not_found += 1
            print(f"[{index}/{total}] {name}: not found")
            continue
        found += 1
        location = app.resolver.get_location(name)
        if location:
            print(f"[{index}/{total}] {name}: {location.to_dict()}")
        else:
            print(f"[{index}/{total}] {name}: {record.area_query()} (no coordinates)")
    logger.info("Fetch complete: %d found, %d not found", found, not_found)
    return found, not_found

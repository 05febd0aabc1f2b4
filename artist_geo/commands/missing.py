from __future__ import annotations

from ..resolver import ArtistLocationResolver
from ..store import LocationStore


def run(store: LocationStore, resolver: ArtistLocationResolver, *, limit: int | None = None) -> list[tuple[str, str]]:
    """List artists whose area is known but coordinates are still pending."""
    keys = store.list_missing_coordinates()
    if limit is not None:
        keys = keys[: max(0, limit)]
    pending: list[tuple[str, str]] = []
    for key in keys:
        query = resolver.area_query_for(key)
        if query:
            pending.append((key, query))
    if not pending:
        print("No artists are waiting for geocoding.")
        return pending
    for key, query in pending:
        print(f"{key}\t{query}")
    print(f"\n{len(pending)} artist(s) need coordinates.")
    return pending

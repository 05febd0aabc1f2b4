from __future__ import annotations

import logging

import musicbrainzngs

from ..config import ProviderSettings
from .musicbrainz import APP_NAME, APP_VERSION

logger = logging.getLogger(__name__)


def useragent_problem(useragent: str) -> str | None:
    if not useragent or "example.com" in useragent:
        return "musicbrainz_useragent must include a real contact (e.g. email or URL)"
    return None


def validate_providers(settings: ProviderSettings) -> None:
    errors: list[str] = []
    try:
        _validate_musicbrainz(settings.musicbrainz_useragent)
    except Exception as exc:  # pragma: no cover - network failure depends on env
        errors.append(f"MusicBrainz validation failed: {exc}")
    if errors:
        message = "\n".join(errors)
        raise SystemExit(f"Provider validation failed:\n{message}")


def _validate_musicbrainz(useragent: str) -> None:
    problem = useragent_problem(useragent)
    if problem:
        raise RuntimeError(problem)
    musicbrainzngs.set_useragent(APP_NAME, APP_VERSION, contact=useragent)
    try:
        musicbrainzngs.search_artists(artist="M.I.A.", limit=1)
    except musicbrainzngs.WebServiceError as exc:
        raise RuntimeError(f"MusicBrainz API call failed: {exc}") from exc
    logger.debug("MusicBrainz preflight succeeded")

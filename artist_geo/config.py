from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class StoreSettings(BaseModel):
    path: Path = Path("./data/artists.sqlite3")

    @field_validator("path", mode="before")
    @classmethod
    def _expand_path(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()


class ProviderSettings(BaseModel):
    musicbrainz_useragent: str = "artist-geo/0.1 (unknown@example.com)"
    search_limit: int = Field(default=3, ge=1, le=25)
    request_delay_seconds: float = 1.1
    network_retries: int = 1
    network_retry_backoff_seconds: float = 0.5


class ExportSettings(BaseModel):
    path: Path = Path("./public/artist-locations.json")

    @field_validator("path", mode="before")
    @classmethod
    def _expand_path(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()


class Settings(BaseModel):
    store: StoreSettings = StoreSettings()
    providers: ProviderSettings = ProviderSettings()
    export: ExportSettings = ExportSettings()

    @classmethod
    def load(cls, path: Optional[Path]) -> "Settings":
        if path is None:
            return cls()
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        if not explicit_path.exists():
            raise FileNotFoundError(f"Config file not found: {explicit_path}")
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    return None

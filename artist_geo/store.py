from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Iterator, Optional

from .models import RawLocationRecord, StoreUnavailableError, coordinate_pair, normalize_name

logger = logging.getLogger(__name__)

_COLUMNS = (
    "name",
    "normalized_name",
    "external_id",
    "area_name",
    "begin_area_name",
    "country_code",
    "lat",
    "lng",
    "city",
    "country",
    "updated_at",
)
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM artists"


class LocationStore:
    """SQLite-backed store of raw artist location records.

    One row per normalized artist name. All access goes through a single
    connection guarded by a lock, so the store can be shared between threads.
    Any SQLite failure surfaces as ``StoreUnavailableError``.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = Lock()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.path, check_same_thread=False)
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS artists (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    normalized_name TEXT NOT NULL UNIQUE,
                    external_id TEXT,
                    area_name TEXT,
                    begin_area_name TEXT,
                    country_code TEXT,
                    lat REAL,
                    lng REAL,
                    city TEXT,
                    country TEXT,
                    updated_at TEXT NOT NULL
                )
                """
            )
            self._conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_artists_external_id ON artists(external_id)"
            )
            self._conn.commit()
        except (sqlite3.Error, OSError) as exc:
            raise StoreUnavailableError(f"cannot open location store at {self.path}: {exc}") from exc

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def get(self, normalized_key: str) -> Optional[RawLocationRecord]:
        key = normalize_name(normalized_key)
        row = self._fetchone(f"{_SELECT} WHERE normalized_name = ?", (key,))
        if not row:
            return None
        return self._row_to_record(row)

    def put(self, normalized_key: str, record: RawLocationRecord) -> None:
        key = normalize_name(normalized_key)
        if not key:
            raise ValueError("normalized key must not be empty")
        pair = coordinate_pair(record.lat, record.lng)
        if pair is None and (record.lat is not None or record.lng is not None):
            logger.warning(
                "Dropping partial coordinates for %s (lat=%r, lng=%r)",
                key,
                record.lat,
                record.lng,
            )
        lat, lng = pair if pair else (None, None)
        updated_at = record.updated_at or datetime.now(timezone.utc)
        self._execute(
            """
            INSERT INTO artists(name, normalized_name, external_id, area_name, begin_area_name,
                                country_code, lat, lng, city, country, updated_at)
            VALUES(?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(normalized_name) DO UPDATE SET
                name=excluded.name,
                external_id=excluded.external_id,
                area_name=excluded.area_name,
                begin_area_name=excluded.begin_area_name,
                country_code=excluded.country_code,
                lat=excluded.lat,
                lng=excluded.lng,
                city=excluded.city,
                country=excluded.country,
                updated_at=excluded.updated_at
            """,
            (
                record.name or key,
                key,
                record.external_id,
                record.area_name,
                record.begin_area_name,
                record.country_code,
                lat,
                lng,
                record.city,
                record.country,
                updated_at.isoformat(),
            ),
        )

    def list_all(self) -> list[str]:
        rows = self._fetchall("SELECT normalized_name FROM artists ORDER BY id")
        return [row[0] for row in rows]

    def list_missing_coordinates(self) -> list[str]:
        rows = self._fetchall(
            """
            SELECT normalized_name FROM artists
            WHERE (lat IS NULL OR lng IS NULL)
              AND (area_name IS NOT NULL OR begin_area_name IS NOT NULL)
            ORDER BY id
            """
        )
        return [row[0] for row in rows]

    def find_by_external_id(self, external_id: str) -> list[str]:
        rows = self._fetchall(
            "SELECT normalized_name FROM artists WHERE external_id = ? ORDER BY id",
            (external_id,),
        )
        return [row[0] for row in rows]

    def iter_records_with_coordinates(self) -> Iterator[RawLocationRecord]:
        rows = self._fetchall(
            f"{_SELECT} WHERE lat IS NOT NULL AND lng IS NOT NULL ORDER BY normalized_name"
        )
        for row in rows:
            yield self._row_to_record(row)

    def stats(self) -> dict[str, int]:
        row = self._fetchone(
            """
            SELECT
                COUNT(*),
                SUM(CASE WHEN lat IS NOT NULL AND lng IS NOT NULL THEN 1 ELSE 0 END),
                SUM(CASE WHEN (lat IS NULL OR lng IS NULL)
                          AND (area_name IS NOT NULL OR begin_area_name IS NOT NULL)
                         THEN 1 ELSE 0 END)
            FROM artists
            """
        )
        total, with_coordinates, missing = row if row else (0, 0, 0)
        return {
            "total": int(total or 0),
            "with_coordinates": int(with_coordinates or 0),
            "missing_coordinates": int(missing or 0),
        }

    def _execute(self, sql: str, params: tuple = ()) -> None:
        try:
            with self._lock:
                self._conn.execute(sql, params)
                self._conn.commit()
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"location store write failed: {exc}") from exc

    def _fetchone(self, sql: str, params: tuple = ()) -> Optional[tuple]:
        try:
            with self._lock:
                cursor = self._conn.execute(sql, params)
                return cursor.fetchone()
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"location store read failed: {exc}") from exc

    def _fetchall(self, sql: str, params: tuple = ()) -> list[tuple]:
        try:
            with self._lock:
                cursor = self._conn.execute(sql, params)
                return cursor.fetchall()
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"location store read failed: {exc}") from exc

    @staticmethod
    def _row_to_record(row: tuple) -> RawLocationRecord:
        (
            name,
            normalized,
            external_id,
            area_name,
            begin_area_name,
            country_code,
            lat,
            lng,
            city,
            country,
            updated_at,
        ) = row
        return RawLocationRecord(
            name=name,
            normalized_key=normalized,
            external_id=external_id,
            area_name=area_name,
            begin_area_name=begin_area_name,
            country_code=country_code,
            lat=float(lat) if lat is not None else None,
            lng=float(lng) if lng is not None else None,
            city=city,
            country=country,
            updated_at=_parse_timestamp(updated_at),
        )


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None

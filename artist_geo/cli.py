from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .app import ArtistGeoApp
from .commands import doctor as cmd_doctor
from .commands import export as cmd_export
from .commands import fetch as cmd_fetch
from .commands import ingest as cmd_ingest
from .commands import lookup as cmd_lookup
from .commands import missing as cmd_missing
from .config import Settings, find_config
from .models import StoreUnavailableError
from .providers.validation import validate_providers

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def configure_logging(level_name: str) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(ColorFormatter(LOG_FORMAT))
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(warn_buffer)

    logging.getLogger("musicbrainzngs").setLevel(logging.WARNING)
    logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)
    return warn_buffer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve artist names to map locations")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")
    parser.add_argument("--store", type=Path, help="Override store.path from the config")

    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup_parser = subparsers.add_parser("lookup", help="Resolve artist names from the local store")
    lookup_parser.add_argument("names", nargs="+", help="Artist names")
    lookup_parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON")

    ingest_parser = subparsers.add_parser("ingest", help="Store a raw location record for one artist")
    ingest_parser.add_argument("name", nargs="?", help="Artist name (defaults to the JSON artist name)")
    ingest_parser.add_argument("--from-json", type=Path, help="MusicBrainz artist JSON object to read")
    ingest_parser.add_argument("--external-id", help="MusicBrainz artist id")
    ingest_parser.add_argument("--area", dest="area_name", help="Area name (country, region or city)")
    ingest_parser.add_argument("--begin-area", dest="begin_area_name", help="Begin area name (usually a city)")
    ingest_parser.add_argument("--country-code", help="ISO 3166-1 alpha-2 code")
    ingest_parser.add_argument("--lat", type=float, help="Latitude")
    ingest_parser.add_argument("--lng", type=float, help="Longitude")
    ingest_parser.add_argument("--city", help="Previously resolved city")
    ingest_parser.add_argument("--country", help="Previously resolved country")

    fetch_parser = subparsers.add_parser("fetch", help="Look artists up on MusicBrainz and store their areas")
    fetch_parser.add_argument("names", nargs="+", help="Artist names")

    missing_parser = subparsers.add_parser("missing", help="List artists with an area but no coordinates")
    missing_parser.add_argument("--limit", type=int, default=None, help="Show at most this many")

    export_parser = subparsers.add_parser("export", help="Write resolved locations to a JSON map")
    export_parser.add_argument("--out", type=Path, default=None, help="Output path (defaults to export.path)")

    doctor_parser = subparsers.add_parser("doctor", help="Run basic config/store checks")
    doctor_parser.add_argument(
        "--providers",
        action="store_true",
        help="Also validate providers with network calls",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings.load(find_config(args.config))
    if args.store:
        settings.store.path = args.store.expanduser().resolve()
    warn_buffer = configure_logging(args.log_level)

    if args.command == "fetch":
        validate_providers(settings.providers)

    app: ArtistGeoApp | None = None
    try:
        if args.command != "doctor":
            app = ArtistGeoApp.create(settings)
        match args.command:
            case "lookup":
                cmd_lookup.run(app.resolver, args.names, json_output=args.json)
            case "ingest":
                try:
                    cmd_ingest.run(
                        app.resolver,
                        args.name,
                        from_json=args.from_json,
                        external_id=args.external_id,
                        area_name=args.area_name,
                        begin_area_name=args.begin_area_name,
                        country_code=args.country_code,
                        lat=args.lat,
                        lng=args.lng,
                        city=args.city,
                        country=args.country,
                    )
                except ValueError as exc:
                    parser.error(str(exc))
            case "fetch":
                cmd_fetch.run(app, args.names)
            case "missing":
                cmd_missing.run(app.store, app.resolver, limit=args.limit)
            case "export":
                cmd_export.run(app.store, app.resolver, out=args.out or settings.export.path)
            case "doctor":
                report = cmd_doctor.run(settings, validate_providers_online=args.providers)
                for line in report.lines():
                    print(line)
                if not report.ok:
                    raise SystemExit(1)
            case _:
                parser.error("Unknown command")
    except StoreUnavailableError as exc:
        logging.getLogger(__name__).error("%s", exc)
        raise SystemExit(2) from exc
    finally:
        if app:
            app.close()
        if warn_buffer.records:
            print("\n\033[33mWarnings/Errors summary:\033[0m")
            for line in warn_buffer.records:
                print(f" - {line}")


if __name__ == "__main__":  # pragma: no cover
    main()

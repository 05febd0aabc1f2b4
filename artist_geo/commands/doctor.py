from __future__ import annotations

from dataclasses import dataclass, field

from ..app import ArtistGeoApp
from ..config import Settings
from ..models import StoreUnavailableError
from ..providers.validation import useragent_problem, validate_providers
from .output import CheckLine, CheckStatus


@dataclass(slots=True)
class DoctorReport:
    checks: list[CheckLine] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not any(check.failed for check in self.checks)

    def add(self, label: str, status: CheckStatus, detail: str | None = None) -> None:
        self.checks.append(CheckLine(label, status, detail))

    def status_of(self, label: str) -> CheckStatus | None:
        for check in self.checks:
            if check.label == label:
                return check.status
        return None

    def lines(self) -> list[str]:
        return [check.render() for check in self.checks]


def run(
    settings: Settings,
    *,
    validate_providers_online: bool = False,
) -> DoctorReport:
    report = DoctorReport()

    try:
        app = ArtistGeoApp.create(settings)
    except StoreUnavailableError as exc:
        report.add("Store", CheckStatus.ERROR, str(exc))
        return report
    try:
        report.add("Store", CheckStatus.OK, str(settings.store.path))

        stats = app.store.stats()
        report.add("Artists", CheckStatus.OK, f"{stats['total']} stored")
        report.add("Coordinates", CheckStatus.OK, f"{stats['with_coordinates']} with coordinates")
        missing = stats["missing_coordinates"]
        if missing:
            report.add("Geocoding", CheckStatus.WARNING, f"{missing} pending (run `artist-geo missing`)")
        else:
            report.add("Geocoding", CheckStatus.OK, "0 pending")

        problem = useragent_problem(settings.providers.musicbrainz_useragent)
        report.add("MusicBrainz user agent", CheckStatus.WARNING if problem else CheckStatus.OK, problem)

        if validate_providers_online:
            validate_providers(settings.providers)
            report.add("Providers (network)", CheckStatus.OK)
        else:
            report.add("Providers (network)", CheckStatus.SKIPPED, "pass --providers")
    except StoreUnavailableError as exc:
        report.add("Store", CheckStatus.ERROR, str(exc))
    finally:
        app.close()

    return report

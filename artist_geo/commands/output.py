from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CheckStatus(str, Enum):
    OK = "ok"
    WARNING = "warn"
    ERROR = "error"
    SKIPPED = "skip"


@dataclass(frozen=True, slots=True)
class CheckLine:
    """One doctor finding, e.g. ``[warn] Geocoding: 3 pending``."""

    label: str
    status: CheckStatus
    detail: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status is CheckStatus.ERROR

    def render(self) -> str:
        text = f"[{self.status.value}] {self.label}"
        return f"{text}: {self.detail}" if self.detail else text


def describe_location(name: str, location: Optional[dict]) -> str:
    if not location:
        return f"{name}: unknown"
    place = ", ".join(part for part in (location.get("city"), location.get("country")) if part)
    coords = f"({location['lat']:.4f}, {location['lng']:.4f})"
    return f"{name}: {place} {coords}" if place else f"{name}: {coords}"

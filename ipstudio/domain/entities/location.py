"""Location entities.

Pure value objects with zero external dependencies.
"""

import math

from attrs import define, field

LOCATION_TAG_PREFIX = "🌍"


@define(frozen=True, slots=True)
class Location:
    """A named place, optionally with coordinates.

    ``trusted`` marks coordinates picked from autocomplete; those are never
    re-geocoded.
    """

    name: str
    lat: float | None = None
    lng: float | None = None
    trusted: bool = False

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None

    @property
    def tag(self) -> str:
        """Tag mirrored into the asset's tag list."""
        return f"{LOCATION_TAG_PREFIX} {self.name}"

    def to_payload(self) -> dict[str, str | float | None]:
        return {"name": self.name, "lat": self.lat, "lng": self.lng}


@define(frozen=True, slots=True)
class LocationSummary:
    """Locations merged for submission: the primary entry plus all entries."""

    primary: Location | None = None
    all: list[Location] = field(factory=list)
    raw_text: str | None = None


def is_valid_latitude(lat: float) -> bool:
    return not math.isnan(lat) and -90 <= lat <= 90


def is_valid_longitude(lng: float) -> bool:
    return not math.isnan(lng) and -180 <= lng <= 180

"""Location set management and tag mirroring.

Every location is mirrored into the asset's tags as ``🌍 <name>``. Locations
picked from autocomplete carry trusted coordinates; free-typed ones are
resolved once, at submission, and only when the set has no trusted entry.
"""

from typing import TYPE_CHECKING

from attrs import define, field

from ipstudio.config import get_logger
from ipstudio.domain.entities import LOCATION_TAG_PREFIX, Location, LocationSummary

from .gazetteer import split_location_text

if TYPE_CHECKING:
    from ipstudio.domain.repositories import GeocoderProtocol

logger = get_logger(__name__)


def _same_name(a: str, b: str) -> bool:
    return a.strip().casefold() == b.strip().casefold()


@define(slots=True)
class LocationTagResolver:
    """Ordered location set for one draft."""

    _locations: list[Location] = field(factory=list, alias="locations")
    _resolved_for: tuple[str, ...] | None = field(default=None, alias="resolved_for")

    @property
    def locations(self) -> list[Location]:
        return list(self._locations)

    @property
    def has_trusted_coordinates(self) -> bool:
        return any(loc.trusted and loc.has_coordinates for loc in self._locations)

    def _key(self) -> tuple[str, ...]:
        return tuple(loc.name.casefold() for loc in self._locations)

    def _index_of(self, name: str) -> int | None:
        for index, existing in enumerate(self._locations):
            if _same_name(existing.name, name):
                return index
        return None

    def add_from_autocomplete(self, name: str, lat: float, lng: float) -> Location:
        """Store an autocomplete pick verbatim. Adding the same name twice is a no-op."""
        index = self._index_of(name)
        if index is not None:
            return self._locations[index]

        location = Location(name=name.strip(), lat=lat, lng=lng, trusted=True)
        self._locations.append(location)
        return location

    def add_from_free_text(self, text: str) -> list[Location]:
        """Store typed locations with coordinates deferred until submission."""
        added = []
        for name in split_location_text(text):
            if self._index_of(name) is None:
                location = Location(name=name)
                self._locations.append(location)
                added.append(location)
        return added

    def remove(self, index: int, tags: list[str] | None = None) -> list[str]:
        """Remove a location and its mirrored tag.

        A mirrored tag is any ``🌍`` tag whose text contains the location name.
        Non-location tags are never touched.

        Returns:
            The tag list without the removed location's mirrored tag.
        """
        removed = self._locations.pop(index)
        needle = removed.name.casefold()
        return [
            tag
            for tag in (tags or [])
            if not (tag.startswith(LOCATION_TAG_PREFIX) and needle in tag.casefold())
        ]

    def clear(self) -> None:
        self._locations.clear()
        self._resolved_for = None

    def to_tags(self, existing: list[str]) -> list[str]:
        """Merge mirrored location tags into ``existing`` without duplicates."""
        merged = list(existing)
        seen = {tag.casefold() for tag in merged}
        for location in self._locations:
            tag = location.tag
            if tag.casefold() not in seen:
                seen.add(tag.casefold())
                merged.append(tag)
        return merged

    def summary(self) -> LocationSummary:
        if not self._locations:
            return LocationSummary()
        return LocationSummary(
            primary=self._locations[0],
            all=list(self._locations),
            raw_text=", ".join(loc.name for loc in self._locations),
        )

    async def resolve(self, geocoder: "GeocoderProtocol | None") -> LocationSummary:
        """Fill in coordinates for free-typed locations.

        Runs at most once per location set, and never for a set that already
        holds trusted coordinates. Locations that cannot be geocoded keep
        their text with no coordinates.
        """
        key = self._key()
        if geocoder is None or key == self._resolved_for or self.has_trusted_coordinates:
            return self.summary()

        with logger.contextualize(operation="resolve_locations", count=len(key)):
            resolved = []
            for location in self._locations:
                if location.has_coordinates:
                    resolved.append(location)
                    continue
                try:
                    match = await geocoder.geocode(location.name)
                except Exception as e:
                    logger.warning(f"Geocoding failed for '{location.name}': {e}")
                    match = None

                if match is not None and match.has_coordinates:
                    logger.debug(f"Geocoded '{location.name}' -> ({match.lat}, {match.lng})")
                    resolved.append(Location(name=location.name, lat=match.lat, lng=match.lng))
                else:
                    logger.info(f"Could not geocode '{location.name}', saving as text only")
                    resolved.append(location)

            self._locations = resolved
            self._resolved_for = key

        return self.summary()

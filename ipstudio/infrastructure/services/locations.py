"""Location autocomplete and geocoding over the built-in gazetteer.

Exact and prefix matches come from the gazetteer; when those find nothing,
rapidfuzz scores every alias so small typos still resolve.
"""

from attrs import define, field
from rapidfuzz import fuzz, process

from ipstudio.config import get_logger, settings
from ipstudio.domain.entities import Location
from ipstudio.domain.locations import lookup, search
from ipstudio.domain.locations.gazetteer import ALL_PLACES

logger = get_logger(__name__)


@define(slots=True)
class GazetteerLocationService:
    """Implements both the autocomplete and the geocoder collaborators."""

    fuzzy_threshold: float = field(factory=lambda: settings.locations.fuzzy_threshold)
    min_query_length: int = field(factory=lambda: settings.locations.min_query_length)

    def _fuzzy(self, text: str, limit: int) -> list[Location]:
        matches = process.extract(
            text.strip().lower(),
            list(ALL_PLACES),
            scorer=fuzz.WRatio,
            limit=limit * 2,
            score_cutoff=self.fuzzy_threshold,
        )
        results: list[Location] = []
        seen: set[str] = set()
        for alias, score, _ in matches:
            lat, lng, name = ALL_PLACES[alias]
            if name in seen:
                continue
            seen.add(name)
            logger.trace(f"Fuzzy location match '{text}' -> {name}", score=score)
            results.append(Location(name=name, lat=lat, lng=lng))
        return results[:limit]

    async def suggest(self, text: str, limit: int = 5) -> list[Location]:
        """Ranked suggestions, best first."""
        if len(text.strip()) < self.min_query_length:
            return []
        return search(text, limit, self.min_query_length) or self._fuzzy(text, limit)

    async def geocode(self, text: str) -> Location | None:
        """Coordinates for free text, keeping the text as the location name.

        "City, Country" tries the whole text, then each part in order.
        """
        candidates = [text, *(part for part in text.split(",") if part.strip())]
        for candidate in candidates:
            match = lookup(candidate)
            if match is not None:
                return Location(name=text.strip(), lat=match.lat, lng=match.lng)

        fuzzy = self._fuzzy(text, 1)
        if fuzzy:
            return Location(name=text.strip(), lat=fuzzy[0].lat, lng=fuzzy[0].lng)

        logger.debug(f"No gazetteer match for '{text}'")
        return None

"""Tests for location tag mirroring, resolution and the gazetteer."""

from unittest.mock import AsyncMock

from ipstudio.domain.entities import Location
from ipstudio.domain.locations import (
    LocationTagResolver,
    format_location_name,
    lookup,
    search,
    split_location_text,
)


class TestLocationTagResolver:
    """Location set management."""

    def test_autocomplete_pick_is_idempotent(self):
        resolver = LocationTagResolver()

        resolver.add_from_autocomplete("Berlin", 52.52, 13.405)
        resolver.add_from_autocomplete("berlin", 52.52, 13.405)
        tags = resolver.to_tags(resolver.to_tags(["techno"]))

        assert len(resolver.locations) == 1
        assert tags == ["techno", "🌍 Berlin"]
        assert resolver.has_trusted_coordinates

    def test_free_text_city_country_kept_whole(self):
        resolver = LocationTagResolver()

        resolver.add_from_free_text("Lagos, Nigeria")

        assert [loc.name for loc in resolver.locations] == ["Lagos, Nigeria"]
        assert resolver.locations[0].lat is None

    def test_remove_drops_only_mirrored_tag(self):
        resolver = LocationTagResolver()
        resolver.add_from_autocomplete("Berlin", 52.52, 13.405)
        resolver.add_from_autocomplete("Tokyo", 35.67, 139.65)
        tags = resolver.to_tags(["Berlin school"])

        remaining = resolver.remove(0, tags)

        assert remaining == ["Berlin school", "🌍 Tokyo"]
        assert [loc.name for loc in resolver.locations] == ["Tokyo"]

    def test_summary(self):
        resolver = LocationTagResolver()
        resolver.add_from_autocomplete("Berlin", 52.52, 13.405)
        resolver.add_from_free_text("Lagos")

        summary = resolver.summary()

        assert summary.primary.name == "Berlin"
        assert summary.raw_text == "Berlin, Lagos"
        assert len(summary.all) == 2

    async def test_resolve_geocodes_free_text_once(self):
        geocoder = AsyncMock()
        geocoder.geocode.return_value = Location("Lagos", 6.52, 3.38)
        resolver = LocationTagResolver()
        resolver.add_from_free_text("Lagos")

        first = await resolver.resolve(geocoder)
        await resolver.resolve(geocoder)

        assert first.primary.lat == 6.52
        assert first.primary.name == "Lagos"
        geocoder.geocode.assert_awaited_once_with("Lagos")

    async def test_resolve_skipped_with_trusted_coordinates(self):
        geocoder = AsyncMock()
        resolver = LocationTagResolver()
        resolver.add_from_autocomplete("Berlin", 52.52, 13.405)
        resolver.add_from_free_text("Somewhere")

        await resolver.resolve(geocoder)

        geocoder.geocode.assert_not_awaited()

    async def test_geocoder_failure_keeps_text(self):
        geocoder = AsyncMock()
        geocoder.geocode.side_effect = ConnectionError("geocoder down")
        resolver = LocationTagResolver()
        resolver.add_from_free_text("Atlantis")

        summary = await resolver.resolve(geocoder)

        assert summary.primary.name == "Atlantis"
        assert not summary.primary.has_coordinates

    async def test_without_geocoder_returns_summary(self):
        resolver = LocationTagResolver()
        resolver.add_from_free_text("Lagos")

        summary = await resolver.resolve(None)

        assert summary.raw_text == "Lagos"


class TestGazetteer:
    def test_lookup_alias(self):
        assert lookup("NYC").name == "New York"
        assert lookup("nowhere") is None

    def test_search_ranks_exact_then_prefix(self):
        results = search("ber")

        assert results[0].name == "Berlin"

    def test_search_requires_minimum_length(self):
        assert search("b") == []

    def test_split_location_text(self):
        assert split_location_text("Lagos, Nigeria") == ["Lagos, Nigeria"]
        assert split_location_text("Berlin, Tokyo, Lagos") == ["Berlin", "Tokyo", "Lagos"]
        assert split_location_text("  ") == []

    def test_format_location_name(self):
        places = [Location("A"), Location("B"), Location("C")]

        assert format_location_name([]) == ""
        assert format_location_name(places[:1]) == "A"
        assert format_location_name(places[:2]) == "A & B"
        assert format_location_name(places) == "A & 2 more"

"""Tests for price derivation."""

import pytest

from ipstudio.domain.entities import ContentType, LicensingSelection
from ipstudio.domain.policy import (
    default_download_price,
    license_label,
    license_type,
    price,
    price_fields,
    resolve_total,
)


def downloads(unit: float, **kwargs) -> LicensingSelection:
    return LicensingSelection(allow_downloads=True, download_price=unit, **kwargs)


class TestPrice:
    def test_loop_defaults_to_remix_fee_only(self):
        quote = price(ContentType.LOOP, LicensingSelection())

        assert quote.remix_fee == pytest.approx(0.10)
        assert quote.download_total is None
        assert quote.allow_streaming is None

    def test_song_downloads(self):
        quote = price(ContentType.FULL_SONG, downloads(1.0))

        assert quote.download_total == 1.0
        assert quote.allow_streaming is True

    def test_protected_song_has_no_remix_fee(self):
        quote = price(ContentType.FULL_SONG, LicensingSelection(remix_protected=True))

        assert quote.remix_fee is None
        assert not quote.has_active_price
        assert quote.price_line() is None

    def test_protection_ignored_where_remixing_is_mandatory(self):
        quote = price(ContentType.VIDEO_CLIP, LicensingSelection(remix_protected=True))

        assert quote.remix_fee is not None

    def test_bundle_total_is_unit_times_count(self):
        assert price(ContentType.EP, downloads(2.0), 3).download_total == 6.0
        assert price(ContentType.EP, downloads(2.0), 2).download_total == 4.0
        assert price(ContentType.LOOP_PACK, downloads(0.7), 3).download_total == 2.1

    def test_item_count_ignored_for_singles(self):
        quote = price(ContentType.LOOP, downloads(2.0), 4)

        assert quote.item_count == 1
        assert quote.download_total == 2.0

    def test_disabled_downloads_null_the_price(self):
        selection = downloads(2.0).with_downloads(False)

        assert selection.download_price is None
        assert price(ContentType.LOOP, selection).download_total is None

    def test_price_line_for_bundle(self):
        line = price(ContentType.LOOP_PACK, downloads(2.0), 3).price_line()

        assert "Download $6.00 USDC (3 × $2.00)" in line
        assert "per item per remix" in line


class TestLabels:
    @pytest.mark.parametrize(
        ("selection", "expected"),
        [
            (downloads(1.0), "Remix + Download"),
            (LicensingSelection(), "Remix Only"),
            (downloads(1.0, remix_protected=True), "Download Only"),
            (LicensingSelection(remix_protected=True), "Protected"),
        ],
    )
    def test_song_license_label(self, selection, expected):
        assert license_label(ContentType.FULL_SONG, selection) == expected

    def test_license_type(self):
        assert license_type(downloads(1.0)) == "remix_external"
        assert license_type(LicensingSelection()) == "remix_only"


class TestPriceFields:
    def test_loop_pack_per_loop_price(self):
        fields = price_fields(price(ContentType.LOOP_PACK, downloads(2.0), 3))

        assert fields["price_per_loop"] == 2.0
        assert fields["price_stx"] == 6.0
        assert "price_per_song" not in fields

    def test_ep_per_song_price(self):
        fields = price_fields(price(ContentType.EP, downloads(1.0), 2))

        assert fields["price_per_song"] == 1.0

    def test_protected_remix_price_is_zero(self):
        fields = price_fields(price(ContentType.FULL_SONG, LicensingSelection(remix_protected=True)))

        assert fields["remix_price"] == 0


def test_default_download_prices():
    assert default_download_price(ContentType.LOOP) == 2.0
    assert default_download_price(ContentType.EP) == 1.0
    assert default_download_price(ContentType.VIDEO_CLIP) == 2.0


def test_resolve_total_prefers_recomputed_value():
    quote = price(ContentType.EP, downloads(2.0), 3)

    assert resolve_total(quote, 99.0) == 6.0
    assert resolve_total(None, 99.0) == 99.0

"""Price derivation for assets.

Prices are always recomputed from content type, licensing selection and item
count. A persisted total is only a fallback when those inputs are missing.
"""

from typing import Any

from ipstudio.config import settings
from ipstudio.domain.entities import ContentType, LicensingSelection, PriceQuote

from .content_types import rules_for


def default_download_price(content_type: ContentType | str) -> float:
    """Platform default per-item download price for a content type."""
    pricing = settings.pricing
    match ContentType(content_type):
        case ContentType.FULL_SONG | ContentType.EP:
            return pricing.song_download_price
        case ContentType.VIDEO_CLIP:
            return pricing.video_download_price
        case _:
            return pricing.loop_download_price


def price(
    content_type: ContentType | str,
    selection: LicensingSelection,
    item_count: int = 1,
) -> PriceQuote:
    """Derive the price quote for an asset.

    Args:
        content_type: Kind of asset being priced.
        selection: Creator's licensing choices.
        item_count: Number of bundle items. Ignored for single assets.

    Returns:
        PriceQuote with remix fee and download totals, ``None`` where the
        corresponding capability is off.
    """
    rules = rules_for(content_type)
    count = max(item_count, 0) if rules.is_bundle else 1

    remix_allowed = not (rules.remix_toggleable and selection.remix_protected)
    remix_fee = settings.pricing.remix_fee if remix_allowed else None

    unit_price = selection.download_price if selection.allow_downloads else None
    download_total = None
    if unit_price is not None:
        download_total = round(unit_price * count, 2) if rules.is_bundle else unit_price

    return PriceQuote(
        content_type=rules.content_type,
        item_count=count,
        remix_fee=remix_fee,
        download_unit_price=unit_price,
        download_total=download_total,
        allow_streaming=selection.allow_streaming if rules.streaming_option else None,
        currency=settings.pricing.currency,
    )


def resolve_total(quote: PriceQuote | None, stored_price: float | None) -> float | None:
    """Display total: the recomputed download total, else the stored value."""
    if quote is not None:
        return quote.download_total
    return stored_price


def license_label(content_type: ContentType | str, selection: LicensingSelection) -> str:
    """Human-readable licensing summary shown on the review step."""
    quote = price(content_type, selection)
    remix = quote.remix_fee is not None
    download = selection.allow_downloads
    match (remix, download):
        case (True, True):
            return "Remix + Download"
        case (True, False):
            return "Remix Only"
        case (False, True):
            return "Download Only"
        case _:
            return "Protected"


def license_type(selection: LicensingSelection) -> str:
    """Persisted license type: external use is granted only with downloads."""
    return "remix_external" if selection.allow_downloads else "remix_only"


def license_selection(selection: LicensingSelection) -> str:
    return "platform_download" if selection.allow_downloads else "platform_remix"


def price_fields(quote: PriceQuote) -> dict[str, Any]:
    """Flatten a quote into the persisted price columns."""
    fields: dict[str, Any] = {
        "remix_price": quote.remix_fee or 0,
        "download_price": quote.download_unit_price,
        "price_stx": quote.download_total,
    }
    match quote.content_type:
        case ContentType.LOOP_PACK:
            fields["price_per_loop"] = quote.download_unit_price
        case ContentType.EP:
            fields["price_per_song"] = quote.download_unit_price
    return fields

"""Licensing selection and derived price quotes.

Pure value objects with zero external dependencies.
"""

import attrs
from attrs import define, field

from .content import ContentType


def _price_requires_downloads(instance, attribute, value) -> None:
    if value is not None and not instance.allow_downloads:
        raise ValueError("download_price must be None when downloads are disabled")
    if value is not None and value < 0:
        raise ValueError(f"download_price must not be negative, got {value}")


@define(frozen=True, slots=True)
class LicensingSelection:
    """Creator's licensing choices for an asset.

    Remix-in-mixer is on unless the asset is remix-protected. Downloads are
    off by default; disabling them nulls the download price.
    """

    remix_protected: bool = False
    allow_downloads: bool = False
    download_price: float | None = field(
        default=None, validator=_price_requires_downloads
    )
    allow_streaming: bool = True

    # Contact preferences
    open_to_commercial: bool = False
    commercial_contact: str = ""
    open_to_collaboration: bool = False
    collab_contact: str = ""

    @property
    def allow_remixing(self) -> bool:
        return not self.remix_protected

    def with_downloads(
        self, enabled: bool, price: float | None = None
    ) -> "LicensingSelection":
        """Enable or disable downloads. Disabling always nulls the price."""
        if not enabled:
            return attrs.evolve(self, allow_downloads=False, download_price=None)
        new_price = price if price is not None else self.download_price
        return attrs.evolve(self, allow_downloads=True, download_price=new_price)

    def with_download_price(self, price: float) -> "LicensingSelection":
        """Set the per-item download price. Downloads must be enabled."""
        return attrs.evolve(self, download_price=price)

    def with_remix_protected(self, protected: bool) -> "LicensingSelection":
        return attrs.evolve(self, remix_protected=protected)

    def with_streaming(self, allowed: bool) -> "LicensingSelection":
        return attrs.evolve(self, allow_streaming=allowed)


@define(frozen=True, slots=True)
class PriceQuote:
    """Derived price for an asset. Recomputed whenever its inputs change.

    ``remix_fee`` is charged per recorded remix (per item for bundles) and is
    ``None`` when remixing is not allowed. ``download_total`` is the flat price
    for singles and ``unit × item_count`` for bundles, ``None`` when downloads
    are disabled.
    """

    content_type: ContentType
    item_count: int = 1
    remix_fee: float | None = None
    download_unit_price: float | None = None
    download_total: float | None = None
    allow_streaming: bool | None = None
    currency: str = "USDC"

    @property
    def has_active_price(self) -> bool:
        """False when neither remixing nor downloads carry a price."""
        return self.remix_fee is not None or self.download_total is not None

    def price_line(self) -> str | None:
        """One-line price summary for the review step, or None if nothing is priced."""
        if not self.has_active_price:
            return None

        parts = []
        if self.download_total is not None:
            download = f"Download ${self.download_total:.2f} {self.currency}"
            if self.content_type.is_bundle:
                download += (
                    f" ({self.item_count} × ${self.download_unit_price:.2f})"
                )
            parts.append(download)
        if self.remix_fee is not None:
            unit = "per item per remix" if self.content_type.is_bundle else "per remix"
            parts.append(f"Remix ${self.remix_fee:.2f} {self.currency} {unit}")
        return " · ".join(parts)

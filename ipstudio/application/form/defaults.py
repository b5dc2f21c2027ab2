"""Quick-mode defaults as a pure function.

Switching to quick mode merges the result into the draft. Nothing here
touches form state directly.
"""

from typing import Any

from ipstudio.domain.entities import (
    ContentType,
    LicensingSelection,
    RightsCategory,
    SplitGroup,
)
from ipstudio.domain.policy import default_download_price


def default_licensing(content_type: ContentType | str) -> LicensingSelection:
    """Starting licensing for a content type.

    Songs and EPs start with downloads on at the song price, everything else
    starts remix-only.
    """
    content_type = ContentType(content_type)
    if content_type.is_song:
        return LicensingSelection(
            allow_downloads=True,
            download_price=default_download_price(content_type),
        )
    return LicensingSelection()


def apply_defaults(content_type: ContentType | str, identity: str | None) -> dict[str, Any]:
    """Fields to merge into a draft when switching to quick mode.

    Attributes 100% of both rights categories to ``identity`` and applies the
    content type's flat price.
    """
    wallet = identity or ""
    return {
        "composition": SplitGroup.solo(RightsCategory.COMPOSITION, wallet),
        "production": SplitGroup.solo(RightsCategory.PRODUCTION, wallet),
        "licensing": default_licensing(content_type),
    }

"""Location resolution and the built-in gazetteer."""

from .gazetteer import format_location_name, lookup, search, split_location_text
from .resolver import LocationTagResolver

__all__ = [
    "LocationTagResolver",
    "format_location_name",
    "lookup",
    "search",
    "split_location_text",
]

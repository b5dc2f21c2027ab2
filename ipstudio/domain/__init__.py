"""ipstudio domain layer - pure business rules for creator assets."""

# Export all domain components
from . import attribution, bundles, entities, locations, policy

# Re-export key types for convenience
from .attribution import SplitValidation, auto_balance, validate
from .bundles import BatchTrackOrdering
from .entities import (
    ContentType,
    LicensingSelection,
    PriceQuote,
    SplitGroup,
    TrackSubmission,
    UploadMode,
)
from .locations import LocationTagResolver
from .policy import price, required_fields

__all__ = [
    # Modules
    "attribution",
    "bundles",
    "entities",
    "locations",
    "policy",
    # Key domain types
    "ContentType",
    "LicensingSelection",
    "PriceQuote",
    "SplitGroup",
    "TrackSubmission",
    "UploadMode",
    # Rule engines
    "BatchTrackOrdering",
    "LocationTagResolver",
    "SplitValidation",
    "auto_balance",
    "price",
    "required_fields",
    "validate",
]

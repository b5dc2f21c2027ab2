"""Core domain entities representing creator assets and their rights."""

# Attribution entities
from .attribution import SLOTS_PER_GROUP, SplitGroup, SplitPreset, SplitSlot

# Content classification
from .content import (
    ContentType,
    LicensingCapability,
    LoopCategory,
    RightsCategory,
    UploadMode,
)

# Licensing and pricing
from .licensing import LicensingSelection, PriceQuote

# Locations
from .location import (
    LOCATION_TAG_PREFIX,
    Location,
    LocationSummary,
    is_valid_latitude,
    is_valid_longitude,
)

# Media
from .media import (
    AUDIO_EXTENSIONS,
    VIDEO_EXTENSIONS,
    BpmDetection,
    BundleItem,
    MediaFile,
    VideoCrop,
    round_bpm,
)
from .submission import TrackSubmission

__all__ = [
    # Attribution entities
    "SLOTS_PER_GROUP",
    "SplitGroup",
    "SplitPreset",
    "SplitSlot",
    # Content classification
    "ContentType",
    "LicensingCapability",
    "LoopCategory",
    "RightsCategory",
    "UploadMode",
    # Licensing and pricing
    "LicensingSelection",
    "PriceQuote",
    # Locations
    "LOCATION_TAG_PREFIX",
    "Location",
    "LocationSummary",
    "is_valid_latitude",
    "is_valid_longitude",
    # Media
    "AUDIO_EXTENSIONS",
    "VIDEO_EXTENSIONS",
    "BpmDetection",
    "BundleItem",
    "MediaFile",
    "VideoCrop",
    "round_bpm",
    # Aggregate
    "TrackSubmission",
]

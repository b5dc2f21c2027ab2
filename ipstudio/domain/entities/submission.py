"""The track submission aggregate.

Pure domain representation of a draft asset being authored.
"""

from typing import Any
from uuid import uuid4

import attrs
from attrs import define, field

from .attribution import SplitGroup
from .content import ContentType, LoopCategory, RightsCategory
from .licensing import LicensingSelection
from .location import LOCATION_TAG_PREFIX, Location
from .media import BundleItem, VideoCrop, round_bpm


@define(frozen=True, slots=True)
class TrackSubmission:
    """Everything collected by the authoring flow for one asset.

    Created fresh for a new asset, hydrated from a persisted record when
    editing. ``stored_price`` is the last persisted total and is only used
    when the price cannot be recomputed from current inputs.
    """

    id: str = field(factory=lambda: str(uuid4()))
    content_type: ContentType = field(default=ContentType.LOOP, converter=ContentType)

    # Basic information
    title: str = ""
    artist: str = ""
    description: str = ""
    notes: str = ""
    tags: list[str] = field(factory=list)
    loop_category: LoopCategory | None = LoopCategory.INSTRUMENTAL
    tell_us_more: str = ""
    bpm: int | None = field(default=None, converter=round_bpm)
    key: str = ""
    uploader_wallet: str = ""

    # Attribution
    composition: SplitGroup = field(
        factory=lambda: SplitGroup.empty(RightsCategory.COMPOSITION)
    )
    production: SplitGroup = field(
        factory=lambda: SplitGroup.empty(RightsCategory.PRODUCTION)
    )
    ai_assisted_idea: bool = False
    ai_assisted_implementation: bool = False

    # Licensing and pricing
    licensing: LicensingSelection = field(factory=LicensingSelection)
    stored_price: float | None = None

    # Location and bundle snapshot (live state is owned by the form controller)
    locations: list[Location] = field(factory=list)
    bundle_items: list[BundleItem] = field(factory=list)

    # Media references
    audio_url: str = ""
    video_url: str = ""
    cover_image_url: str = ""
    duration_seconds: float | None = None
    video_crop: VideoCrop | None = None

    # Set when hydrated from a persisted record
    persisted: bool = False

    def split_group(self, category: RightsCategory) -> SplitGroup:
        match category:
            case RightsCategory.COMPOSITION:
                return self.composition
            case RightsCategory.PRODUCTION:
                return self.production

    def with_split_group(self, group: SplitGroup) -> "TrackSubmission":
        """Create a new submission with the group for its category replaced."""
        match group.category:
            case RightsCategory.COMPOSITION:
                return attrs.evolve(self, composition=group)
            case RightsCategory.PRODUCTION:
                return attrs.evolve(self, production=group)

    def with_fields(self, **changes: Any) -> "TrackSubmission":
        return attrs.evolve(self, **changes)

    @property
    def non_location_tags(self) -> list[str]:
        return [tag for tag in self.tags if not tag.startswith(LOCATION_TAG_PREFIX)]

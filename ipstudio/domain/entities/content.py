"""Content classification enums.

Pure enumerations with zero external dependencies.
"""

from enum import StrEnum


class ContentType(StrEnum):
    """Kind of asset being registered. Drives required fields and pricing."""

    LOOP = "loop"
    LOOP_PACK = "loop_pack"
    FULL_SONG = "full_song"
    EP = "ep"
    VIDEO_CLIP = "video_clip"

    @property
    def is_bundle(self) -> bool:
        """Multi-item assets composed of ordered bundle items."""
        return self in (ContentType.LOOP_PACK, ContentType.EP)

    @property
    def is_song(self) -> bool:
        return self in (ContentType.FULL_SONG, ContentType.EP)

    @property
    def label(self) -> str:
        return _CONTENT_TYPE_LABELS[self]


_CONTENT_TYPE_LABELS = {
    ContentType.LOOP: "Loop",
    ContentType.LOOP_PACK: "Loop Pack",
    ContentType.FULL_SONG: "Song",
    ContentType.EP: "EP",
    ContentType.VIDEO_CLIP: "Video Clip",
}


class UploadMode(StrEnum):
    """Step-sequencing preset for the authoring flow."""

    QUICK = "quick"
    ADVANCED = "advanced"


class RightsCategory(StrEnum):
    """Attribution category a split group belongs to."""

    COMPOSITION = "composition"  # idea rights: melody, lyrics, structure
    PRODUCTION = "production"  # implementation rights: performance, engineering

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class LoopCategory(StrEnum):
    """Loop sub-category. Stems and "other" loops need a descriptor."""

    INSTRUMENTAL = "instrumental"
    VOCAL = "vocal"
    BEATS = "beats"
    STEM = "stem"
    OTHER = "other"

    @property
    def requires_descriptor(self) -> bool:
        return self in (LoopCategory.STEM, LoopCategory.OTHER)


class LicensingCapability(StrEnum):
    """Capabilities a creator can grant on an asset."""

    REMIX = "remix"
    DOWNLOAD = "download"
    STREAMING = "streaming"

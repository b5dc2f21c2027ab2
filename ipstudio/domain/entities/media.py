"""Media entities: file handles, bundle items, video crop and BPM detection.

Pure value objects with zero external dependencies.
"""

from pathlib import Path, PurePath

import attrs
from attrs import define, field

AUDIO_EXTENSIONS = frozenset({".mp3", ".wav", ".flac", ".m4a", ".ogg", ".aac"})
VIDEO_EXTENSIONS = frozenset({".mp4", ".mov", ".webm", ".m4v"})


@define(frozen=True, slots=True)
class MediaFile:
    """Handle to a local media file selected by the creator."""

    name: str
    size_bytes: int
    mime_type: str = ""
    duration_seconds: float | None = None
    path: Path | None = None

    @property
    def extension(self) -> str:
        return PurePath(self.name).suffix.lower()

    @property
    def size_mb(self) -> float:
        return self.size_bytes / (1024 * 1024)

    @property
    def is_audio(self) -> bool:
        return self.mime_type.startswith("audio/") or self.extension in AUDIO_EXTENSIONS

    @property
    def is_video(self) -> bool:
        return self.mime_type.startswith("video/") or self.extension in VIDEO_EXTENSIONS

    @property
    def default_title(self) -> str:
        """Filename with the extension stripped and underscores turned into spaces."""
        stem = self.name.rsplit(".", 1)[0] if "." in self.name else self.name
        return stem.replace("_", " ").strip()


def round_bpm(value: float | None) -> int | None:
    if value is None or value == "":
        return None
    bpm = round(float(value))
    return bpm if bpm > 0 else None


@define(frozen=True, slots=True)
class BundleItem:
    """One loop or song inside a loop pack or EP.

    ``source_file`` is None for items that were persisted earlier (the bytes
    are already stored); ``stable_id`` is None only for new items.
    ``position`` is informational while editing and recomputed on submission.
    """

    title: str
    bpm: int | None = field(default=None, converter=round_bpm)
    stable_id: str | None = None
    position: int = 0
    source_file: MediaFile | None = None
    media_url: str | None = None

    @property
    def is_persisted(self) -> bool:
        return self.stable_id is not None

    @property
    def is_uploaded(self) -> bool:
        """Bytes are in object storage, either from this session or earlier."""
        return self.media_url is not None or self.is_persisted

    def with_title(self, title: str) -> "BundleItem":
        return attrs.evolve(self, title=title)

    def with_bpm(self, bpm: float | None) -> "BundleItem":
        return attrs.evolve(self, bpm=bpm)

    def with_media_url(self, url: str) -> "BundleItem":
        return attrs.evolve(self, media_url=url)


@define(frozen=True, slots=True)
class VideoCrop:
    """Crop rectangle chosen for a video clip, in source pixel space."""

    x: float
    y: float
    width: float
    height: float
    zoom: float = 1.0
    natural_width: int | None = None
    natural_height: int | None = None

    def to_payload(self) -> dict[str, float | int | None]:
        return {
            "video_crop_x": self.x,
            "video_crop_y": self.y,
            "video_crop_width": self.width,
            "video_crop_height": self.height,
            "video_crop_zoom": self.zoom,
            "video_natural_width": self.natural_width,
            "video_natural_height": self.natural_height,
        }

    @classmethod
    def from_payload(cls, record: dict) -> "VideoCrop | None":
        if record.get("video_crop_width") is None:
            return None
        return cls(
            x=record.get("video_crop_x") or 0,
            y=record.get("video_crop_y") or 0,
            width=record["video_crop_width"],
            height=record.get("video_crop_height") or 0,
            zoom=record.get("video_crop_zoom") or 1.0,
            natural_width=record.get("video_natural_width"),
            natural_height=record.get("video_natural_height"),
        )


@define(frozen=True, slots=True)
class BpmDetection:
    """Result of audio BPM analysis."""

    bpm: float | None = None
    confidence: float = 0.0

    @property
    def detected(self) -> bool:
        return self.bpm is not None and self.bpm > 0

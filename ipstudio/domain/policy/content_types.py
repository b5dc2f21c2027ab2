"""Content type policy: what each kind of asset requires and permits.

A single lookup drives required fields, file constraints and the licensing
capabilities offered for a content type. File ceilings come from
``settings.uploads`` so deployments can tune them without code changes.
"""

from collections.abc import Sequence

from attrs import define

from ipstudio.config import settings
from ipstudio.domain.entities import (
    ContentType,
    LicensingCapability,
    LicensingSelection,
    LoopCategory,
    MediaFile,
    TrackSubmission,
    UploadMode,
    is_valid_latitude,
    is_valid_longitude,
)


@define(frozen=True, slots=True)
class ContentTypeRules:
    """Policy row for one content type."""

    content_type: ContentType
    title_field: str
    title_error: str
    media_field: str
    media_error: str
    media_kind: str  # "audio" or "video"
    min_files: int
    max_files: int
    file_ceiling_mb: int
    max_duration_seconds: float | None = None
    bpm_required_in_advanced: bool = False
    bpm_in_basic_info: bool = True
    remix_toggleable: bool = False
    streaming_option: bool = False
    unit_noun: str = "file"
    bundle_name: str = ""
    bundle_article: str = ""

    @property
    def is_bundle(self) -> bool:
        return self.content_type.is_bundle


def rules_for(content_type: ContentType | str) -> ContentTypeRules:
    """Look up the policy row for a content type."""
    content_type = ContentType(content_type)
    limits = settings.uploads

    match content_type:
        case ContentType.LOOP:
            return ContentTypeRules(
                content_type=content_type,
                title_field="title",
                title_error="Track title is required",
                media_field="audio_url",
                media_error="Audio file is required",
                media_kind="audio",
                min_files=1,
                max_files=1,
                file_ceiling_mb=limits.audio_max_mb,
                bpm_required_in_advanced=True,
            )
        case ContentType.LOOP_PACK:
            return ContentTypeRules(
                content_type=content_type,
                title_field="pack_title",
                title_error="Pack title is required",
                media_field="loop_files",
                media_error=f"At least {limits.bundle_min_files} audio files are required for loop packs",
                media_kind="audio",
                min_files=limits.bundle_min_files,
                max_files=limits.bundle_max_files,
                file_ceiling_mb=limits.loop_pack_item_max_mb,
                unit_noun="audio",
                bundle_name="loop pack",
                bundle_article="a",
            )
        case ContentType.FULL_SONG:
            return ContentTypeRules(
                content_type=content_type,
                title_field="title",
                title_error="Track title is required",
                media_field="audio_url",
                media_error="Audio file is required",
                media_kind="audio",
                min_files=1,
                max_files=1,
                file_ceiling_mb=limits.audio_max_mb,
                remix_toggleable=True,
                streaming_option=True,
            )
        case ContentType.EP:
            return ContentTypeRules(
                content_type=content_type,
                title_field="ep_title",
                title_error="EP title is required",
                media_field="ep_files",
                media_error=f"At least {limits.bundle_min_files} song files are required for EPs",
                media_kind="audio",
                min_files=limits.bundle_min_files,
                max_files=limits.bundle_max_files,
                file_ceiling_mb=limits.ep_item_max_mb,
                bpm_in_basic_info=False,
                remix_toggleable=True,
                streaming_option=True,
                unit_noun="song",
                bundle_name="EP",
                bundle_article="an",
            )
        case ContentType.VIDEO_CLIP:
            return ContentTypeRules(
                content_type=content_type,
                title_field="title",
                title_error="Title is required",
                media_field="video_url",
                media_error="Video file is required",
                media_kind="video",
                min_files=1,
                max_files=1,
                file_ceiling_mb=limits.video_max_mb,
                max_duration_seconds=limits.video_max_seconds,
                bpm_in_basic_info=False,
            )


def required_fields(
    content_type: ContentType | str,
    mode: UploadMode | str,
    loop_category: LoopCategory | str | None = None,
) -> list[str]:
    """Names of the fields that must be filled before submission."""
    rules = rules_for(content_type)
    fields = [rules.title_field, "artist"]

    if rules.bpm_required_in_advanced and UploadMode(mode) is UploadMode.ADVANCED:
        fields.append("bpm")
    if (
        rules.content_type is ContentType.LOOP
        and loop_category is not None
        and LoopCategory(loop_category).requires_descriptor
    ):
        fields.append("tell_us_more")

    fields.append(rules.media_field)
    return fields


def allowed_licensing(content_type: ContentType | str) -> frozenset[LicensingCapability]:
    """Capabilities a creator may grant for this content type."""
    rules = rules_for(content_type)
    capabilities = {LicensingCapability.REMIX, LicensingCapability.DOWNLOAD}
    if rules.streaming_option:
        capabilities.add(LicensingCapability.STREAMING)
    return frozenset(capabilities)


def normalize_licensing(
    content_type: ContentType | str, selection: LicensingSelection
) -> LicensingSelection:
    """Clamp a selection to what the content type allows.

    Remixing cannot be disabled where it is mandatory, and streaming is only
    configurable for songs.
    """
    rules = rules_for(content_type)
    if not rules.remix_toggleable and selection.remix_protected:
        selection = selection.with_remix_protected(False)
    if not rules.streaming_option and not selection.allow_streaming:
        selection = selection.with_streaming(True)
    return selection


def _too_many_files(rules: ContentTypeRules) -> str:
    return f"Maximum {rules.max_files} {rules.unit_noun} files allowed per {rules.bundle_name}"


def _is_supported_media(rules: ContentTypeRules, file: MediaFile) -> bool:
    return file.is_video if rules.media_kind == "video" else file.is_audio


def validate_files(
    content_type: ContentType | str, files: Sequence[MediaFile]
) -> list[str]:
    """Check a file selection against the content type's constraints.

    Returns a list of user-facing errors, empty when the selection is valid.
    """
    rules = rules_for(content_type)
    ceiling_bytes = rules.file_ceiling_mb * 1024 * 1024

    if rules.is_bundle:
        if len(files) < rules.min_files:
            return [
                f"Please select at least {rules.min_files} {rules.unit_noun} files "
                f"for {rules.bundle_article} {rules.bundle_name}"
            ]
        if len(files) > rules.max_files:
            return [_too_many_files(rules)]

        invalid = [
            f.name
            for f in files
            if not _is_supported_media(rules, f) or f.size_bytes > ceiling_bytes
        ]
        if invalid:
            return [
                f"Invalid files: {', '.join(invalid)}. "
                f"Check file type and size (max {rules.file_ceiling_mb}MB each)."
            ]
        return []

    if len(files) != 1:
        noun = "video" if rules.media_kind == "video" else "audio"
        return [f"Please select exactly one {noun} file"]

    file = files[0]
    errors: list[str] = []
    if not _is_supported_media(rules, file):
        errors.append(f"Unsupported {rules.media_kind} file: {file.name}")

    if rules.media_kind == "video":
        if file.size_bytes > ceiling_bytes:
            errors.append(f"Video file must be under {rules.file_ceiling_mb}MB")
        if (
            file.duration_seconds is not None
            and rules.max_duration_seconds is not None
            and file.duration_seconds > rules.max_duration_seconds
        ):
            nominal = settings.uploads.video_nominal_seconds
            errors.append(
                f"Video must be {nominal:g} seconds or less "
                f"(yours is {file.duration_seconds:.1f}s)"
            )
    elif file.size_bytes > ceiling_bytes:
        errors.append(f"Audio file must be smaller than {rules.file_ceiling_mb}MB")

    return errors


def check_required_fields(
    submission: TrackSubmission, mode: UploadMode | str, item_count: int = 0
) -> list[str]:
    """Required-field errors for a submission, in display order.

    Bundles validate their item collection through ``item_count``, video clips
    validate ``video_url`` and singles validate ``audio_url``.
    """
    rules = rules_for(submission.content_type)
    mode = UploadMode(mode)
    errors: list[str] = []

    if not submission.title.strip():
        errors.append(rules.title_error)
    if not submission.artist.strip():
        errors.append("Artist name is required")

    if (
        rules.bpm_required_in_advanced
        and mode is UploadMode.ADVANCED
        and (submission.bpm is None or submission.bpm <= 0)
    ):
        errors.append("BPM is required for loops and must be a valid number greater than 0")

    category = submission.loop_category
    if (
        submission.content_type is ContentType.LOOP
        and category is not None
        and category.requires_descriptor
        and not submission.tell_us_more.strip()
    ):
        errors.append(
            "Stem type is required"
            if category is LoopCategory.STEM
            else 'Category description is required for "Other" loops'
        )

    if rules.is_bundle:
        if item_count < rules.min_files:
            errors.append(rules.media_error)
        elif item_count > rules.max_files:
            errors.append(_too_many_files(rules))
    elif rules.media_kind == "video":
        if not submission.video_url.strip():
            errors.append(rules.media_error)
    elif not submission.audio_url.strip():
        errors.append(rules.media_error)

    return errors


def check_coordinates(
    lat: float | None, lng: float | None, label: str | None = None
) -> list[str]:
    """Range errors for a coordinate pair. Missing values are not errors.

    ``label`` names the location in each message when given.
    """
    prefix = f"{label}: " if label else ""
    errors: list[str] = []
    if lat is not None and not is_valid_latitude(lat):
        errors.append(f"{prefix}Invalid latitude. Must be between -90 and 90 degrees.")
    if lng is not None and not is_valid_longitude(lng):
        errors.append(f"{prefix}Invalid longitude. Must be between -180 and 180 degrees.")
    return errors

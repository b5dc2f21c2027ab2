"""Authoring flow states and step tables.

Quick and advanced mode share step names; quick mode simply omits the
attribution and release steps. Content types change which sections a step
shows, never the step list itself.
"""

from enum import StrEnum

from ipstudio.domain.entities import ContentType, LoopCategory, UploadMode
from ipstudio.domain.policy import rules_for


class FlowState(StrEnum):
    """Every state the authoring flow can be in."""

    AUTHENTICATING = "authenticating"
    BASIC_INFO = "basic_info"
    COMPOSITION_SPLITS = "composition_splits"
    PRODUCTION_SPLITS = "production_splits"
    CONNECT_RELEASE = "connect_release"
    FILE_UPLOADS = "file_uploads"
    LICENSING = "licensing"
    REVIEW = "review"
    SUBMITTING = "submitting"
    COMPLETE = "complete"


ADVANCED_STEPS: tuple[FlowState, ...] = (
    FlowState.BASIC_INFO,
    FlowState.COMPOSITION_SPLITS,
    FlowState.PRODUCTION_SPLITS,
    FlowState.CONNECT_RELEASE,
    FlowState.FILE_UPLOADS,
    FlowState.LICENSING,
    FlowState.REVIEW,
)

QUICK_STEPS: tuple[FlowState, ...] = (
    FlowState.BASIC_INFO,
    FlowState.FILE_UPLOADS,
    FlowState.LICENSING,
    FlowState.REVIEW,
)

STEP_TITLES: dict[FlowState, str] = {
    FlowState.BASIC_INFO: "Basic Information",
    FlowState.COMPOSITION_SPLITS: "Who wrote it?",
    FlowState.PRODUCTION_SPLITS: "Who made it?",
    FlowState.CONNECT_RELEASE: "Connect to Release (Optional)",
    FlowState.FILE_UPLOADS: "File Uploads",
    FlowState.LICENSING: "Licensing & Pricing",
    FlowState.REVIEW: "Review & Submit",
}


def steps_for(mode: UploadMode | str) -> tuple[FlowState, ...]:
    return QUICK_STEPS if UploadMode(mode) is UploadMode.QUICK else ADVANCED_STEPS


def step_titles(mode: UploadMode | str) -> list[str]:
    return [STEP_TITLES[step] for step in steps_for(mode)]


def skipped_steps(mode: UploadMode | str, content_type: ContentType | str) -> frozenset[FlowState]:
    """Steps that next/prev hop over. Video clips have no release to connect."""
    if UploadMode(mode) is UploadMode.ADVANCED and ContentType(content_type) is ContentType.VIDEO_CLIP:
        return frozenset({FlowState.CONNECT_RELEASE})
    return frozenset()


def sections_for(step: FlowState, content_type: ContentType | str) -> list[str]:
    """Sub-form sections rendered for a step and content type."""
    content_type = ContentType(content_type)
    rules = rules_for(content_type)

    match step:
        case FlowState.BASIC_INFO:
            sections = ["title", "artist", "description", "tags", "location"]
            if content_type is ContentType.LOOP:
                sections.append("loop_category")
            if rules.bpm_in_basic_info:
                sections.append("bpm")
            if content_type is not ContentType.VIDEO_CLIP:
                sections.append("key")
            return sections
        case FlowState.COMPOSITION_SPLITS:
            return ["composition_splits", "ai_assisted_idea"]
        case FlowState.PRODUCTION_SPLITS:
            return ["production_splits", "ai_assisted_implementation"]
        case FlowState.CONNECT_RELEASE:
            return ["release"]
        case FlowState.FILE_UPLOADS:
            if rules.is_bundle:
                return [rules.media_field, "track_metadata", "cover_image"]
            if content_type is ContentType.VIDEO_CLIP:
                return ["video", "video_crop"]
            return ["audio", "cover_image"]
        case FlowState.LICENSING:
            sections = ["remix", "downloads", "contact"]
            if rules.streaming_option:
                sections.insert(2, "streaming")
            return sections
        case FlowState.REVIEW:
            return ["summary", "price"]
        case _:
            return []


def step_requirements(
    step: FlowState,
    content_type: ContentType | str,
    mode: UploadMode | str,
    loop_category: LoopCategory | None = None,
) -> list[str]:
    """Fields a step asks for that are required at submission."""
    rules = rules_for(content_type)
    match step:
        case FlowState.BASIC_INFO:
            fields = [rules.title_field, "artist"]
            if rules.bpm_required_in_advanced and UploadMode(mode) is UploadMode.ADVANCED:
                fields.append("bpm")
            if (
                rules.content_type is ContentType.LOOP
                and loop_category is not None
                and loop_category.requires_descriptor
            ):
                fields.append("tell_us_more")
            return fields
        case FlowState.FILE_UPLOADS:
            return [rules.media_field]
        case _:
            return []

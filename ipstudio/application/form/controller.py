"""The authoring flow state machine.

UploadFormController owns one draft for one authoring session: the mode,
content type and step position, the live bundle ordering and location set,
and the submission pipeline. Derived values (price, step requirements, split
totals) are recomputed on every read.
"""

import asyncio
from collections import Counter
from collections.abc import Callable, Sequence
from typing import Any

import attrs
from attrs import define, field

from ipstudio.application.form.defaults import apply_defaults, default_licensing
from ipstudio.application.form.steps import (
    STEP_TITLES,
    FlowState,
    sections_for,
    skipped_steps,
    step_requirements,
    steps_for,
)
from ipstudio.application.services import MediaUploadService, apply_preset
from ipstudio.application.use_cases import (
    LoadTrackForEditCommand,
    LoadTrackForEditUseCase,
    SubmitTrackCommand,
    SubmitTrackResult,
    SubmitTrackUseCase,
)
from ipstudio.config import get_logger, settings
from ipstudio.domain.attribution import auto_balance
from ipstudio.domain.bundles import BatchTrackOrdering
from ipstudio.domain.entities import (
    LOCATION_TAG_PREFIX,
    BpmDetection,
    ContentType,
    LicensingSelection,
    Location,
    LocationSummary,
    LoopCategory,
    MediaFile,
    PriceQuote,
    RightsCategory,
    SplitPreset,
    TrackSubmission,
    UploadMode,
    VideoCrop,
)
from ipstudio.domain.exceptions import (
    AuthenticationError,
    StudioError,
    SubmissionInProgressError,
    UploadError,
    ValidationError,
)
from ipstudio.domain.locations import LocationTagResolver, format_location_name
from ipstudio.domain.policy import (
    default_download_price,
    license_label,
    normalize_licensing,
    price,
    rules_for,
    validate_files,
)
from ipstudio.domain.repositories import (
    BpmDetectorProtocol,
    GeocoderProtocol,
    IdentityResolverProtocol,
    LocationAutocompleteProtocol,
    UnitOfWorkProtocol,
)

logger = get_logger(__name__)

# Draft fields that can be set directly through update()
EDITABLE_FIELDS = frozenset({
    "title",
    "artist",
    "description",
    "notes",
    "key",
    "bpm",
    "loop_category",
    "tell_us_more",
    "cover_image_url",
    "duration_seconds",
    "ai_assisted_idea",
    "ai_assisted_implementation",
})


@define(slots=True)
class StudioCollaborators:
    """External collaborators the authoring flow talks to. All optional."""

    identity_resolver: IdentityResolverProtocol | None = None
    uploads: MediaUploadService | None = None
    geocoder: GeocoderProtocol | None = None
    autocomplete: LocationAutocompleteProtocol | None = None
    bpm_detector: BpmDetectorProtocol | None = None
    uow_factory: Callable[[], UnitOfWorkProtocol] | None = None


@define(frozen=True, slots=True)
class CloseResult:
    """Outcome of trying to close the authoring session."""

    closed: bool
    warning: str | None = None


@define(frozen=True, slots=True)
class ReviewSummary:
    """Everything the review step displays."""

    content_type: str
    mode: str
    title: str
    artist: str
    tags: list[str]
    location: str
    composition: list[tuple[str, float]]
    production: list[tuple[str, float]]
    license: str
    price_line: str | None
    items: list[dict[str, Any]] = field(factory=list)


async def resolve_identity(
    collaborators: StudioCollaborators, identity: str | None
) -> str:
    """Canonical address for the authenticated identity.

    Raises:
        AuthenticationError: When no verified identity is available.
    """
    resolved = identity.strip() if identity else None
    if collaborators.identity_resolver is not None:
        resolved = await collaborators.identity_resolver.resolve(identity)
    if not resolved:
        raise AuthenticationError("Please sign in to register your content")
    return resolved


class UploadFormController:
    """Mode × content type × step state machine for one draft."""

    def __init__(
        self,
        collaborators: StudioCollaborators,
        identity: str,
        submission: TrackSubmission | None = None,
        mode: UploadMode | None = None,
        ordering: BatchTrackOrdering | None = None,
    ) -> None:
        self._collaborators = collaborators
        self._identity = identity
        self._submit_use_case = SubmitTrackUseCase()

        self._submission = submission or self._fresh_submission()
        default_mode = UploadMode.ADVANCED if self._submission.persisted else UploadMode.QUICK
        self._mode = UploadMode(mode or default_mode)
        self._step_index = 0
        self._state: FlowState | None = None

        self._ordering = ordering or BatchTrackOrdering()
        self._locations = LocationTagResolver(locations=list(self._submission.locations))

        self._errors: list[str] = []
        self._upload_errors: dict[int, tuple[MediaFile, str]] = {}
        self._running_uploads: dict[int, asyncio.Task[None]] = {}
        self._submitting = False
        self._last_result: SubmitTrackResult | None = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    async def open(
        cls,
        collaborators: StudioCollaborators,
        identity: str | None,
        content_type: ContentType | str = ContentType.LOOP,
    ) -> "UploadFormController":
        """Open the flow for a new asset.

        Raises:
            AuthenticationError: When no verified identity is available.
        """
        wallet = await resolve_identity(collaborators, identity)
        controller = cls(collaborators, wallet)
        controller.set_content_type(content_type)
        logger.info("Opened authoring flow", mode=controller.mode.value)
        return controller

    @classmethod
    async def for_edit(
        cls,
        collaborators: StudioCollaborators,
        identity: str | None,
        record_id: str,
    ) -> "UploadFormController":
        """Open the flow hydrated from a persisted record and its bundle items."""
        wallet = await resolve_identity(collaborators, identity)
        if collaborators.uow_factory is None:
            raise StudioError("No submission store configured")

        result = await LoadTrackForEditUseCase().execute(
            LoadTrackForEditCommand(record_id=record_id), collaborators.uow_factory()
        )
        ordering = (
            BatchTrackOrdering.from_persisted(result.bundle_rows)
            if result.submission.content_type.is_bundle
            else None
        )
        logger.info(f"Opened authoring flow for record {record_id}")
        return cls(
            collaborators,
            wallet,
            submission=result.submission,
            mode=UploadMode.ADVANCED,
            ordering=ordering,
        )

    def _fresh_submission(self) -> TrackSubmission:
        defaults = apply_defaults(ContentType.LOOP, self._identity)
        return TrackSubmission(uploader_wallet=self._identity, **defaults)

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def mode(self) -> UploadMode:
        return self._mode

    @property
    def content_type(self) -> ContentType:
        return self._submission.content_type

    @property
    def steps(self) -> tuple[FlowState, ...]:
        return steps_for(self._mode)

    @property
    def step_index(self) -> int:
        return self._step_index

    @property
    def current_step(self) -> FlowState:
        return self.steps[self._step_index]

    @property
    def step_title(self) -> str:
        return STEP_TITLES[self.current_step]

    @property
    def state(self) -> FlowState:
        return self._state or self.current_step

    @property
    def sections(self) -> list[str]:
        return sections_for(self.current_step, self.content_type)

    @property
    def is_first_step(self) -> bool:
        return self._step_index == 0

    @property
    def is_last_step(self) -> bool:
        return self._step_index == len(self.steps) - 1

    @property
    def bundle(self) -> BatchTrackOrdering:
        return self._ordering

    @property
    def locations(self) -> list[Location]:
        return self._locations.locations

    @property
    def tags(self) -> list[str]:
        return list(self._submission.tags)

    @property
    def tags_text(self) -> str:
        """Editable tag text. Location tags are managed separately."""
        return ", ".join(self._submission.non_location_tags)

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    @property
    def upload_errors(self) -> dict[str, str]:
        """Upload failures by file name. Repeated names carry their item number."""
        failures = list(self._upload_errors.values())
        names = Counter(file.name for file, _ in failures)
        errors: dict[str, str] = {}
        for file, reason in failures:
            label = file.name
            index = self._ordering.index_of(file)
            if names[file.name] > 1 and index is not None:
                label = f"{file.name} (#{index + 1})"
            errors[label] = reason
        return errors

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def last_result(self) -> SubmitTrackResult | None:
        return self._last_result

    @property
    def item_count(self) -> int:
        return len(self._ordering) if self.content_type.is_bundle else 1

    @property
    def quote(self) -> PriceQuote:
        return price(self.content_type, self._submission.licensing, self.item_count)

    @property
    def display_price(self) -> float | None:
        """Recomputed download total, or the stored total when it cannot be derived."""
        if self.content_type.is_bundle and len(self._ordering) == 0:
            return self._submission.stored_price
        return self.quote.download_total

    @property
    def submission(self) -> TrackSubmission:
        """Snapshot of the draft with the live location set and bundle items."""
        return self._submission.with_fields(
            locations=self._locations.locations,
            bundle_items=list(self._ordering.items),
        )

    def _field_filled(self, name: str) -> bool:
        rules = rules_for(self.content_type)
        draft = self._submission
        match name:
            case "title" | "pack_title" | "ep_title":
                return bool(draft.title.strip())
            case "artist":
                return bool(draft.artist.strip())
            case "bpm":
                return draft.bpm is not None and draft.bpm > 0
            case "tell_us_more":
                return bool(draft.tell_us_more.strip())
            case "audio_url":
                return bool(draft.audio_url)
            case "video_url":
                return bool(draft.video_url)
            case "loop_files" | "ep_files":
                return rules.min_files <= len(self._ordering) <= rules.max_files
            case _:
                return True

    def blocking_fields(self) -> list[str]:
        """Required fields on the current step that are still empty."""
        required = step_requirements(
            self.current_step, self.content_type, self._mode, self._submission.loop_category
        )
        return [name for name in required if not self._field_filled(name)]

    @property
    def can_advance(self) -> bool:
        return not self.blocking_fields()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def next(self) -> FlowState:
        """Advance one step. No-op on the last step."""
        skipped = skipped_steps(self._mode, self.content_type)
        index = self._step_index
        while index < len(self.steps) - 1:
            index += 1
            if self.steps[index] not in skipped:
                self._step_index = index
                break
        return self.current_step

    def prev(self) -> FlowState:
        """Go back one step. No-op on the first step."""
        skipped = skipped_steps(self._mode, self.content_type)
        index = self._step_index
        while index > 0:
            index -= 1
            if self.steps[index] not in skipped:
                self._step_index = index
                break
        return self.current_step

    def go_to_step(self, index: int) -> FlowState:
        """Jump to a step. Out-of-range indices and skipped steps are ignored."""
        skipped = skipped_steps(self._mode, self.content_type)
        if 0 <= index < len(self.steps) and self.steps[index] not in skipped:
            self._step_index = index
        return self.current_step

    def set_mode(self, mode: UploadMode | str) -> None:
        """Switch mode and return to the first step.

        Switching to quick mode merges the quick-mode defaults into the draft.
        """
        self._mode = UploadMode(mode)
        self._step_index = 0
        if self._mode is UploadMode.QUICK:
            defaults = apply_defaults(self.content_type, self._identity)
            self._submission = self._submission.with_fields(**defaults)
        self._touch()

    # ------------------------------------------------------------------
    # Draft edits
    # ------------------------------------------------------------------

    def _touch(self) -> None:
        self._errors = []

    def set_content_type(self, content_type: ContentType | str) -> None:
        """Switch content type, clearing fields that no longer apply."""
        new_type = ContentType(content_type)
        old_type = self.content_type
        draft = self._submission
        rules = rules_for(new_type)

        changes: dict[str, Any] = {"content_type": new_type}
        if new_type is ContentType.LOOP:
            changes["loop_category"] = draft.loop_category or LoopCategory.INSTRUMENTAL
        else:
            changes["loop_category"] = None
            changes["tell_us_more"] = ""
        if not rules.bpm_in_basic_info:
            changes["bpm"] = None
        if new_type is not ContentType.VIDEO_CLIP:
            changes["video_url"] = ""
            changes["video_crop"] = None
        if rules.is_bundle or new_type is ContentType.VIDEO_CLIP:
            changes["audio_url"] = ""

        if new_type != old_type:
            changes["licensing"] = default_licensing(new_type)
            self._ordering.clear()
            self._upload_errors = {}

        self._submission = draft.with_fields(**changes)
        self._touch()

    def update(self, **fields: Any) -> None:
        """Set draft fields by name."""
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown draft fields: {', '.join(sorted(unknown))}")
        if fields.get("loop_category") is not None:
            fields["loop_category"] = LoopCategory(fields["loop_category"])
        self._submission = self._submission.with_fields(**fields)
        self._touch()

    def set_tags_text(self, text: str) -> None:
        """Parse comma-separated tags. Location tags are kept as they are."""
        typed = [tag.strip() for tag in text.split(",") if tag.strip()]
        location_tags = [t for t in self._submission.tags if t.startswith(LOCATION_TAG_PREFIX)]
        self._submission = self._submission.with_fields(tags=typed + location_tags)
        self._touch()

    def set_split_wallet(self, category: RightsCategory | str, index: int, wallet: str) -> None:
        """Set a contributor. Rebalances when the slot gains or loses a contributor."""
        group = self._submission.split_group(RightsCategory(category))
        was_active = group.slots[index].is_active
        group = group.with_wallet(index, wallet)
        if group.slots[index].is_active != was_active:
            group = auto_balance(group)
        self._submission = self._submission.with_split_group(group)
        self._touch()

    def set_split_percentage(
        self, category: RightsCategory | str, index: int, percentage: float
    ) -> None:
        """Manual percentage edit. Never rebalances."""
        group = self._submission.split_group(RightsCategory(category))
        self._submission = self._submission.with_split_group(
            group.with_percentage(index, percentage)
        )
        self._touch()

    def split_total(self, category: RightsCategory | str) -> float:
        return self._submission.split_group(RightsCategory(category)).total

    def apply_preset(self, preset: SplitPreset) -> None:
        if preset.default_content_type and preset.default_content_type != self.content_type:
            self.set_content_type(preset.default_content_type)
        self._submission = apply_preset(self._submission, preset)
        if self.content_type is not ContentType.LOOP:
            self._submission = self._submission.with_fields(loop_category=None)
        self._touch()

    # ------------------------------------------------------------------
    # Licensing
    # ------------------------------------------------------------------

    def _set_licensing(self, selection: LicensingSelection) -> None:
        normalized = normalize_licensing(self.content_type, selection)
        if normalized != selection:
            logger.debug(f"Licensing clamped for {self.content_type.value}")
        self._submission = self._submission.with_fields(licensing=normalized)
        self._touch()

    @property
    def licensing(self) -> LicensingSelection:
        return self._submission.licensing

    def set_remix_protected(self, protected: bool) -> None:
        self._set_licensing(self.licensing.with_remix_protected(protected))

    def set_downloads(self, enabled: bool, unit_price: float | None = None) -> None:
        """Toggle downloads. Enabling without a price uses the platform default."""
        if enabled and unit_price is None and self.licensing.download_price is None:
            unit_price = default_download_price(self.content_type)
        self._set_licensing(self.licensing.with_downloads(enabled, unit_price))

    def set_download_price(self, unit_price: float) -> None:
        if not self.licensing.allow_downloads:
            raise ValidationError(["Enable downloads before setting a download price"])
        if unit_price < 0:
            raise ValidationError(["Download price cannot be negative"])
        self._set_licensing(self.licensing.with_download_price(unit_price))

    def set_streaming(self, allowed: bool) -> None:
        self._set_licensing(self.licensing.with_streaming(allowed))

    def set_contact(
        self,
        *,
        open_to_commercial: bool | None = None,
        commercial_contact: str | None = None,
        open_to_collaboration: bool | None = None,
        collab_contact: str | None = None,
    ) -> None:
        changes = {
            key: value
            for key, value in {
                "open_to_commercial": open_to_commercial,
                "commercial_contact": commercial_contact,
                "open_to_collaboration": open_to_collaboration,
                "collab_contact": collab_contact,
            }.items()
            if value is not None
        }
        self._set_licensing(attrs.evolve(self.licensing, **changes))

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------

    def _sync_location_tags(self) -> None:
        self._submission = self._submission.with_fields(
            tags=self._locations.to_tags(self._submission.tags)
        )

    def add_location_from_autocomplete(self, name: str, lat: float, lng: float) -> None:
        self._locations.add_from_autocomplete(name, lat, lng)
        self._sync_location_tags()
        self._touch()

    def add_location_text(self, text: str) -> None:
        self._locations.add_from_free_text(text)
        self._sync_location_tags()
        self._touch()

    def remove_location(self, index: int) -> None:
        tags = self._locations.remove(index, self._submission.tags)
        self._submission = self._submission.with_fields(tags=tags)
        self._touch()

    async def suggest_locations(self, text: str) -> list[Location]:
        if self._collaborators.autocomplete is None:
            return []
        if len(text.strip()) < settings.locations.min_query_length:
            return []
        return await self._collaborators.autocomplete.suggest(
            text, settings.locations.autocomplete_limit
        )

    # ------------------------------------------------------------------
    # Media
    # ------------------------------------------------------------------

    def _require_uploads(self) -> MediaUploadService:
        if self._collaborators.uploads is None:
            raise StudioError("No media storage configured")
        return self._collaborators.uploads

    async def attach_audio(self, file: MediaFile) -> str:
        """Validate and upload the single audio file for a loop or song."""
        if self.content_type.is_bundle or self.content_type is ContentType.VIDEO_CLIP:
            raise ValidationError([f"{self.content_type.label} does not take a single audio file"])
        errors = validate_files(self.content_type, [file])
        if errors:
            raise ValidationError(errors)

        url = await self._upload_single(file, "audio")
        self._submission = self._submission.with_fields(
            audio_url=url, duration_seconds=file.duration_seconds
        )
        if self.content_type is ContentType.LOOP and self._collaborators.bpm_detector:
            await self.detect_bpm(file)
        return url

    async def attach_video(self, file: MediaFile, crop: VideoCrop | None = None) -> str:
        """Validate and upload the clip for a video asset."""
        if self.content_type is not ContentType.VIDEO_CLIP:
            raise ValidationError([f"{self.content_type.label} does not take a video file"])
        errors = validate_files(self.content_type, [file])
        if errors:
            raise ValidationError(errors)

        url = await self._upload_single(file, "video")
        self._submission = self._submission.with_fields(
            video_url=url, video_crop=crop, duration_seconds=file.duration_seconds
        )
        return url

    def set_video_crop(self, crop: VideoCrop | None) -> None:
        self._submission = self._submission.with_fields(video_crop=crop)

    async def _upload_single(self, file: MediaFile, folder: str) -> str:
        uploads = self._require_uploads()
        self._upload_errors.pop(id(file), None)
        try:
            return await uploads.upload(file, folder)
        except UploadError as e:
            self._upload_errors[id(file)] = (file, e.reason)
            raise

    async def attach_bundle_files(self, files: Sequence[MediaFile]) -> dict[str, str]:
        """Validate a bundle selection, replace the items and upload every file.

        Returns:
            Per-file upload errors, empty when every upload succeeded.
        """
        if not self.content_type.is_bundle:
            raise ValidationError([f"{self.content_type.label} does not take multiple files"])
        errors = validate_files(self.content_type, files)
        if errors:
            raise ValidationError(errors)

        self._ordering.init_from_files(files)
        return await self.upload_pending()

    async def upload_pending(self) -> dict[str, str]:
        """Upload bundle items whose bytes are not stored yet.

        Items are matched by file handle, so reordering while uploads run is
        safe. Items already uploading are awaited instead of sent again.
        Failed files stay pending for a retry.
        """
        pending = [item.source_file for _, item in self._ordering.pending_uploads()]
        if not pending:
            return {}

        uploads = self._require_uploads()
        fresh = [file for file in pending if id(file) not in self._running_uploads]
        if fresh:
            task = asyncio.create_task(
                self._upload_bundle_files(uploads, fresh, self.content_type.value)
            )
            for file in fresh:
                self._running_uploads[id(file)] = task

        running = {
            self._running_uploads[id(file)]
            for file in pending
            if id(file) in self._running_uploads
        }
        await asyncio.gather(*running)
        return self.upload_errors

    async def _upload_bundle_files(
        self, uploads: MediaUploadService, files: list[MediaFile], folder: str
    ) -> None:
        for file in files:
            self._upload_errors.pop(id(file), None)
        try:
            outcomes = await uploads.upload_many(files, folder=folder)
        finally:
            for file in files:
                self._running_uploads.pop(id(file), None)

        # Items removed while uploading are dropped
        for file, outcome in zip(files, outcomes, strict=True):
            match outcome:
                case str() as url:
                    self._ordering.mark_uploaded(file, url)
                case UploadError() as error if self._ordering.index_of(file) is not None:
                    self._upload_errors[id(file)] = (file, error.reason)

    def remove_bundle_item(self, index: int) -> None:
        removed = self._ordering.remove(index)
        if removed.source_file is not None:
            self._upload_errors.pop(id(removed.source_file), None)
        self._touch()

    def apply_bpm_detection(self, detection: BpmDetection) -> bool:
        """Use a detected tempo when it is confident enough."""
        if not detection.detected or detection.confidence < settings.bpm.min_confidence:
            logger.debug("BPM detection ignored", bpm=detection.bpm, confidence=detection.confidence)
            return False
        self._submission = self._submission.with_fields(bpm=detection.bpm)
        return True

    async def detect_bpm(self, file: MediaFile) -> bool:
        if self._collaborators.bpm_detector is None:
            return False
        detection = await self._collaborators.bpm_detector.detect(file)
        return self.apply_bpm_detection(detection)

    # ------------------------------------------------------------------
    # Review and submission
    # ------------------------------------------------------------------

    def review_summary(self) -> ReviewSummary:
        draft = self._submission
        return ReviewSummary(
            content_type=self.content_type.label,
            mode=self._mode.value,
            title=draft.title,
            artist=draft.artist,
            tags=list(draft.tags),
            location=format_location_name(self._locations.locations),
            composition=[(s.wallet, s.percentage) for s in draft.composition.slots if s.is_active],
            production=[(s.wallet, s.percentage) for s in draft.production.slots if s.is_active],
            license=license_label(self.content_type, draft.licensing),
            price_line=self.quote.price_line(),
            items=self._ordering.to_submission_metadata() if self.content_type.is_bundle else [],
        )

    def _build_command(self, summary: LocationSummary) -> SubmitTrackCommand:
        is_bundle = self.content_type.is_bundle
        return SubmitTrackCommand(
            submission=self._submission,
            mode=self._mode,
            locations=summary,
            track_metadata=self._ordering.to_submission_metadata() if is_bundle else [],
            bundle_media_urls=self._ordering.media_urls() if is_bundle else [],
            identity=self._identity,
        )

    async def submit(self) -> SubmitTrackResult:
        """Validate the draft and persist it.

        Raises:
            SubmissionInProgressError: When a submission is already in flight.
            ValidationError: With every problem found. Nothing is written.
            PersistenceError: When the write fails. The draft is kept.
        """
        if self._submitting:
            raise SubmissionInProgressError("A submission is already in progress")
        if self._collaborators.uow_factory is None:
            raise StudioError("No submission store configured")

        self._submitting = True
        self._state = FlowState.SUBMITTING
        self._errors = []
        try:
            with logger.contextualize(operation="submit_form", submission_id=self._submission.id):
                summary = await self._locations.resolve(self._collaborators.geocoder)
                self._submission = self._submission.with_fields(
                    tags=self._locations.to_tags(self._submission.tags),
                    locations=summary.all,
                )

                errors = self._submit_use_case.validate(self._build_command(summary))
                if errors:
                    raise ValidationError(errors)

                if self.content_type.is_bundle and self._ordering.pending_uploads():
                    failed = await self.upload_pending()
                    if failed:
                        raise ValidationError(
                            [f"Failed to upload {name}: {reason}" for name, reason in failed.items()]
                        )

                result = await self._submit_use_case.execute(
                    self._build_command(summary), self._collaborators.uow_factory()
                )
        except ValidationError as e:
            self._errors = list(e.errors)
            self._state = None
            raise
        except StudioError as e:
            self._errors = [e.user_message]
            self._state = None
            raise
        finally:
            self._submitting = False

        self._last_result = result
        self._reset_draft()
        self._state = FlowState.COMPLETE
        return result

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _reset_draft(self) -> None:
        self._submission = self._fresh_submission()
        self._ordering = BatchTrackOrdering()
        self._locations = LocationTagResolver()
        self._upload_errors = {}
        self._errors = []
        self._step_index = 0

    def reset(self) -> None:
        """Discard the draft and start over with a fresh one."""
        self._reset_draft()
        self._mode = UploadMode.QUICK
        self._state = None

    def close(self, force: bool = False) -> CloseResult:
        """Close the session. Refuses while uploads are running unless forced."""
        uploads = self._collaborators.uploads
        if uploads is not None and uploads.is_uploading and not force:
            return CloseResult(
                closed=False,
                warning=f"{uploads.in_flight} upload(s) still in progress. Close anyway?",
            )
        self.reset()
        self._state = FlowState.AUTHENTICATING
        return CloseResult(closed=True)

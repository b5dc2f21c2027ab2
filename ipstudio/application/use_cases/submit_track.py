"""Track submission use case implementing Clean Architecture patterns.

Validation runs completely before anything touches the network. A draft
either passes every check and is written in one logical upsert, or nothing
is written and the full error list is raised.
"""

import time
from typing import Any

from attrs import define, field

from ipstudio.application.form.payload import build_payload, location_fields
from ipstudio.config import get_logger
from ipstudio.domain.attribution import check_slots, fill_primary_contributor, validate
from ipstudio.domain.entities import LocationSummary, TrackSubmission, UploadMode
from ipstudio.domain.exceptions import PersistenceError, ValidationError, describe_error
from ipstudio.domain.policy import check_coordinates, check_required_fields, rules_for
from ipstudio.domain.repositories import UnitOfWorkProtocol

logger = get_logger(__name__)


@define(frozen=True, slots=True)
class SubmitTrackCommand:
    """Command for submitting a draft.

    Locations must already be resolved; ``track_metadata`` and
    ``bundle_media_urls`` are only used for bundles and share the same order.
    """

    submission: TrackSubmission
    mode: UploadMode = field(default=UploadMode.ADVANCED, converter=UploadMode)
    locations: LocationSummary = field(factory=LocationSummary)
    track_metadata: list[dict[str, Any]] = field(factory=list)
    bundle_media_urls: list[str | None] = field(factory=list)
    identity: str | None = None

    def __attrs_post_init__(self) -> None:
        """Validate command parameters."""
        if self.bundle_media_urls and len(self.bundle_media_urls) != len(self.track_metadata):
            raise ValueError("Bundle media URLs must align with track metadata")


@define(frozen=True, slots=True)
class SubmitTrackResult:
    """Result of a successful submission."""

    record_id: str
    payload: dict[str, Any]
    execution_time_ms: int = 0


@define(slots=True)
class SubmitTrackUseCase:
    """Validate a draft and hand it to the submission repository."""

    def prepare(self, command: SubmitTrackCommand) -> TrackSubmission:
        """Apply submission-time fixups that never fail.

        An unnamed first contributor holding a share is credited to the
        uploader when an identity is known.
        """
        submission = command.submission
        for category_group in (submission.composition, submission.production):
            filled = fill_primary_contributor(category_group, command.identity)
            if filled is not category_group:
                submission = submission.with_split_group(filled)
        return submission

    def validate(self, command: SubmitTrackCommand) -> list[str]:
        """Every validation error for the command, in display order."""
        submission = self.prepare(command)
        rules = rules_for(submission.content_type)

        errors: list[str] = []
        for group in (submission.composition, submission.production):
            errors.extend(validate(group).errors)
            errors.extend(check_slots(group))

        item_count = len(command.track_metadata) if rules.is_bundle else 1
        errors.extend(check_required_fields(submission, command.mode, item_count))

        coords = location_fields(command.locations)
        errors.extend(check_coordinates(coords["location_lat"], coords["location_lng"]))
        primary = command.locations.primary
        for location in command.locations.all:
            if location != primary:
                errors.extend(check_coordinates(location.lat, location.lng, label=location.name))
        return errors

    async def execute(
        self, command: SubmitTrackCommand, uow: UnitOfWorkProtocol
    ) -> SubmitTrackResult:
        """Execute the submission.

        Args:
            command: Draft plus resolved locations and bundle metadata.
            uow: UnitOfWork for transaction management and repository access.

        Returns:
            Result with the stored record id and the payload written.

        Raises:
            ValidationError: When any check fails. Nothing is written.
            PersistenceError: When the write fails.
        """
        start_time = time.time()

        with logger.contextualize(
            operation="submit_track",
            submission_id=command.submission.id,
            content_type=command.submission.content_type.value,
        ):
            errors = self.validate(command)
            if errors:
                logger.info(f"Submission rejected with {len(errors)} validation errors")
                raise ValidationError(errors)

            submission = self.prepare(command)
            payload = build_payload(
                submission,
                command.locations,
                track_metadata=command.track_metadata,
                bundle_media_urls=command.bundle_media_urls,
            )

            try:
                async with uow:
                    record_id = await uow.get_submission_repository().upsert_submission(payload)
            except Exception as e:
                logger.exception("Submission write failed")
                raise PersistenceError(
                    f"Failed to save track: {describe_error(e)}"
                ) from e

            execution_time_ms = int((time.time() - start_time) * 1000)
            logger.info(f"Stored submission {record_id}", execution_time_ms=execution_time_ms)
            return SubmitTrackResult(
                record_id=record_id,
                payload=payload,
                execution_time_ms=execution_time_ms,
            )

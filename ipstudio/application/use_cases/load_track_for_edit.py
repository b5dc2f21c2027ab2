"""Load a persisted asset for editing.

Price is recomputed from the hydrated licensing and item count; the stored
total is only used when the current inputs cannot produce one.
"""

from typing import Any

from attrs import define, field

from ipstudio.application.form.payload import submission_from_record
from ipstudio.config import get_logger
from ipstudio.domain.entities import PriceQuote, TrackSubmission
from ipstudio.domain.exceptions import PersistenceError, describe_error
from ipstudio.domain.policy import price
from ipstudio.domain.repositories import UnitOfWorkProtocol

logger = get_logger(__name__)


@define(frozen=True, slots=True)
class LoadTrackForEditCommand:
    """Command for loading a persisted record."""

    record_id: str

    def __attrs_post_init__(self) -> None:
        """Validate command parameters."""
        if not self.record_id:
            raise ValueError("Record id must be specified")


@define(frozen=True, slots=True)
class LoadTrackForEditResult:
    """Hydrated draft plus its bundle rows and recomputed price."""

    submission: TrackSubmission
    bundle_rows: list[dict[str, Any]] = field(factory=list)
    quote: PriceQuote | None = None

    @property
    def display_price(self) -> float | None:
        """Recomputed download total, falling back to the stored price."""
        if self.quote is not None and self.quote.download_total is not None:
            return self.quote.download_total
        if self.submission.licensing.allow_downloads:
            return self.submission.stored_price
        return None


@define(slots=True)
class LoadTrackForEditUseCase:
    """Fetch a record and its bundle items from the submission repository."""

    async def execute(
        self, command: LoadTrackForEditCommand, uow: UnitOfWorkProtocol
    ) -> LoadTrackForEditResult:
        with logger.contextualize(operation="load_track_for_edit", record_id=command.record_id):
            try:
                async with uow:
                    repo = uow.get_submission_repository()
                    record = await repo.get_submission(command.record_id)
                    rows = await repo.get_bundle_items(command.record_id) if record else []
            except Exception as e:
                logger.exception("Failed to load submission")
                raise PersistenceError(f"Failed to load track: {describe_error(e)}") from e

            if record is None:
                raise PersistenceError(f"Track {command.record_id} not found")

            submission = submission_from_record(record)
            item_count = len(rows) if submission.content_type.is_bundle else 1

            quote = None
            if not submission.content_type.is_bundle or item_count > 0:
                quote = price(submission.content_type, submission.licensing, item_count)
            else:
                logger.warning("Bundle has no stored items, using stored price")

            logger.info(f"Loaded {submission.content_type.label} '{submission.title}' for editing")
            return LoadTrackForEditResult(submission=submission, bundle_rows=rows, quote=quote)

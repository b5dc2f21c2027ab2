"""Domain collaborator interfaces following Clean Architecture principles.

These interfaces define the contracts for storage, persistence and lookup
services without depending on infrastructure implementations, following the
dependency inversion principle.
"""

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any, Protocol, Self

if TYPE_CHECKING:
    from ipstudio.domain.entities import (
        BpmDetection,
        Location,
        MediaFile,
        SplitPreset,
    )


class IdentityResolverProtocol(Protocol):
    """Maps an authenticated identity to its canonical wallet address."""

    def resolve(self, identity: str | None) -> Awaitable[str | None]:
        """Resolve identity to a canonical address, None when unverified."""
        ...


class ObjectStorageProtocol(Protocol):
    """Object storage for uploaded media."""

    def upload(self, file: "MediaFile", key: str) -> Awaitable[str]:
        """Store file bytes under key.

        Returns:
            Public URL of the stored object
        """
        ...


class SubmissionRepositoryProtocol(Protocol):
    """Repository interface for submission persistence operations."""

    def upsert_submission(self, payload: dict[str, Any]) -> Awaitable[str]:
        """Insert or replace a submission in one logical write.

        Args:
            payload: Flat submission payload, ``id`` identifies the record

        Returns:
            Record id of the stored submission
        """
        ...

    def get_submission(self, record_id: str) -> Awaitable[dict[str, Any] | None]:
        """Get the stored payload for a record, None if it does not exist."""
        ...

    def get_bundle_items(self, record_id: str) -> Awaitable[list[dict[str, Any]]]:
        """Get bundle item rows for a record ordered by stored position."""
        ...


class LocationAutocompleteProtocol(Protocol):
    """Ranked location suggestions for partially typed text."""

    def suggest(self, text: str, limit: int = 5) -> Awaitable[list["Location"]]:
        """Suggest locations matching text, best first."""
        ...


class GeocoderProtocol(Protocol):
    """Free-text location to coordinates."""

    def geocode(self, text: str) -> Awaitable["Location | None"]:
        """Geocode text, None when the place is unknown."""
        ...


class BpmDetectorProtocol(Protocol):
    """Tempo analysis for audio files."""

    def detect(self, file: "MediaFile") -> Awaitable["BpmDetection"]:
        """Detect tempo. An undetected result has ``bpm`` None."""
        ...


class SplitPresetStoreProtocol(Protocol):
    """Per-identity storage for saved split presets."""

    def load(self, identity: str) -> Awaitable[list["SplitPreset"]]:
        """Load presets for identity, newest first."""
        ...

    def save(self, identity: str, presets: list["SplitPreset"]) -> Awaitable[None]:
        """Replace the stored presets for identity."""
        ...


class UnitOfWorkProtocol(Protocol):
    """Unit of Work interface for transaction boundary management.

    Each UnitOfWork instance manages a single database transaction and
    provides access to the repositories sharing that transaction.
    """

    async def __aenter__(self) -> Self:
        """Enter async context manager."""
        ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit async context manager with automatic commit/rollback."""
        ...

    async def commit(self) -> None:
        """Explicitly commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Explicitly rollback the current transaction."""
        ...

    def get_submission_repository(self) -> SubmissionRepositoryProtocol:
        """Get submission repository using this unit of work's transaction."""
        ...

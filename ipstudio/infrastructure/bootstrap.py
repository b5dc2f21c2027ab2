"""Wire the reference adapters into the authoring flow's collaborators."""

from sqlalchemy.ext.asyncio import async_sessionmaker

from ipstudio.application.form.controller import StudioCollaborators
from ipstudio.application.services import MediaUploadService
from ipstudio.infrastructure.persistence.unit_of_work import unit_of_work_factory
from ipstudio.infrastructure.services import (
    FilenameBpmDetector,
    GazetteerLocationService,
    WalletIdentityResolver,
)
from ipstudio.infrastructure.storage import LocalObjectStorage


def build_collaborators(
    session_factory: async_sessionmaker | None = None,
    storage: LocalObjectStorage | None = None,
) -> StudioCollaborators:
    """Collaborators backed by the database, local storage and the gazetteer."""
    locations = GazetteerLocationService()
    return StudioCollaborators(
        identity_resolver=WalletIdentityResolver(),
        uploads=MediaUploadService(storage or LocalObjectStorage()),
        geocoder=locations,
        autocomplete=locations,
        bpm_detector=FilenameBpmDetector(),
        uow_factory=unit_of_work_factory(session_factory),
    )

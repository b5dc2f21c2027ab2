"""Domain collaborator interfaces following Clean Architecture principles.

These interfaces define the contracts for external collaborators without
depending on infrastructure implementations.
"""

from .interfaces import (
    BpmDetectorProtocol,
    GeocoderProtocol,
    IdentityResolverProtocol,
    LocationAutocompleteProtocol,
    ObjectStorageProtocol,
    SplitPresetStoreProtocol,
    SubmissionRepositoryProtocol,
    UnitOfWorkProtocol,
)

__all__ = [
    "BpmDetectorProtocol",
    "GeocoderProtocol",
    "IdentityResolverProtocol",
    "LocationAutocompleteProtocol",
    "ObjectStorageProtocol",
    "SplitPresetStoreProtocol",
    "SubmissionRepositoryProtocol",
    "UnitOfWorkProtocol",
]

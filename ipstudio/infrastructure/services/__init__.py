"""Reference adapters for the authoring flow's lookup collaborators."""

from .bpm import FilenameBpmDetector
from .identity import WalletIdentityResolver
from .locations import GazetteerLocationService
from .presets import JsonSplitPresetStore

__all__ = [
    "FilenameBpmDetector",
    "GazetteerLocationService",
    "JsonSplitPresetStore",
    "WalletIdentityResolver",
]

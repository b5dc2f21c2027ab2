"""Application services supporting the authoring flow."""

from .media_uploads import MediaUploadService, storage_key
from .split_presets import SplitPresetService, apply_preset

__all__ = [
    "MediaUploadService",
    "SplitPresetService",
    "apply_preset",
    "storage_key",
]

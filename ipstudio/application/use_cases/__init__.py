"""Application use cases - orchestrate business operations."""

from .load_track_for_edit import (
    LoadTrackForEditCommand,
    LoadTrackForEditResult,
    LoadTrackForEditUseCase,
)
from .submit_track import SubmitTrackCommand, SubmitTrackResult, SubmitTrackUseCase

__all__ = [
    "LoadTrackForEditCommand",
    "LoadTrackForEditResult",
    "LoadTrackForEditUseCase",
    "SubmitTrackCommand",
    "SubmitTrackResult",
    "SubmitTrackUseCase",
]

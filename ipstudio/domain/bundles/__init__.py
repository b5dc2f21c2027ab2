"""Bundle item ordering for multi-item assets."""

from .ordering import BatchTrackOrdering

__all__ = ["BatchTrackOrdering"]

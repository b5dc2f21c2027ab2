"""Object storage adapters."""

from .local_storage import LocalObjectStorage

__all__ = ["LocalObjectStorage"]

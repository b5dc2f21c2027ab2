"""Repository implementations backed by SQLAlchemy."""

from .repo_decorator import db_operation
from .submission import SubmissionRepository

__all__ = ["SubmissionRepository", "db_operation"]

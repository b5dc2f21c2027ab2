"""Database engine, session management and ORM models."""

from .db_connection import (
    Base,
    create_db_engine,
    create_session_factory,
    dispose_engine,
    get_engine,
    get_session_factory,
    init_db,
)
from .db_models import DBBundleItem, DBTrackSubmission

__all__ = [
    "Base",
    "DBBundleItem",
    "DBTrackSubmission",
    "create_db_engine",
    "create_session_factory",
    "dispose_engine",
    "get_engine",
    "get_session_factory",
    "init_db",
]

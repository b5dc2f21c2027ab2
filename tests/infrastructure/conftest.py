"""Infrastructure fixtures: a throwaway SQLite submission store per test."""

import pytest

from ipstudio.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    init_db,
)


@pytest.fixture
async def db_engine(tmp_path):
    """File-backed SQLite engine with the schema created."""
    engine = create_db_engine(f"sqlite+aiosqlite:///{tmp_path / 'studio.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)

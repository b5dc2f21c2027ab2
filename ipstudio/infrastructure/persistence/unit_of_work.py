"""Database Unit of Work implementation for transaction boundary management.

This module provides the concrete implementation of the UnitOfWork pattern,
handling transaction management and repository creation using a shared database session.
"""

from collections.abc import Callable
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ipstudio.domain.repositories import SubmissionRepositoryProtocol
from ipstudio.infrastructure.persistence.database import get_session_factory
from ipstudio.infrastructure.persistence.repositories import SubmissionRepository


class DatabaseUnitOfWork:
    """Database implementation of the Unit of Work pattern.

    The unit of work automatically commits on successful exit or rolls back on
    exceptions, and closes its session either way.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with database session.

        Args:
            session: SQLAlchemy async session for database operations
        """
        self._session = session
        self._committed = False

    async def __aenter__(self) -> Self:
        """Enter async context manager."""
        self._committed = False
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit async context manager with automatic commit/rollback."""
        try:
            if exc_type is not None:
                await self.rollback()
            elif not self._committed:
                await self.commit()
        finally:
            await self._session.close()

    async def commit(self) -> None:
        """Explicitly commit the current transaction."""
        await self._session.commit()
        self._committed = True

    async def rollback(self) -> None:
        """Explicitly rollback the current transaction."""
        await self._session.rollback()

    def get_submission_repository(self) -> SubmissionRepositoryProtocol:
        """Get submission repository using this unit of work's transaction."""
        return SubmissionRepository(self._session)


def unit_of_work_factory(
    session_factory: async_sessionmaker | None = None,
) -> Callable[[], DatabaseUnitOfWork]:
    """Callable producing a fresh unit of work, each with its own session."""
    factory = session_factory or get_session_factory()

    def create() -> DatabaseUnitOfWork:
        return DatabaseUnitOfWork(factory())

    return create

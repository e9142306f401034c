"""
Unit of Work Pattern - owns the database session and transaction boundary

Architecture:
- UoW owns the session lifecycle and the transaction isolation level
- UoW is responsible for commit/rollback; leaving the block without commit rolls back
- Command repositories receive the shared session from the UoW
- Use cases coordinate repositories through the UoW
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Callable, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reservation_engine.platform.database.orm_db_setting import get_async_session


if TYPE_CHECKING:
    from reservation_engine.service.reservation.app.interface.i_reservation_command_repo import (
        IReservationCommandRepo,
    )
    from reservation_engine.service.reservation.app.interface.i_show_catalog_query_repo import (
        IShowCatalogQueryRepo,
    )


SERIALIZABLE = 'SERIALIZABLE'


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the reservation service

    Usage:
        async with uow:
            await uow.reservation_command_repo.create(reservation=...)
            await uow.commit()
    """

    reservation_command_repo: IReservationCommandRepo
    show_catalog_query_repo: IShowCatalogQueryRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        """Commit the transaction"""
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    Either borrows a request-scoped session (FastAPI dependency) or opens its own
    session from `session_factory` on every `async with` (background jobs).
    `isolation_level` applies to each transaction the UoW starts.
    """

    def __init__(
        self,
        session: Optional[AsyncSession] = None,
        *,
        session_factory: Optional[Callable[[], AsyncSession]] = None,
        isolation_level: Optional[str] = None,
    ):
        if session is None and session_factory is None:
            raise ValueError('SqlAlchemyUnitOfWork needs a session or a session_factory')
        self.session = session
        self.session_factory = session_factory
        self.isolation_level = isolation_level
        self._owns_session = session is None

    async def __aenter__(self):
        from reservation_engine.service.reservation.driven_adapter.repo.reservation_command_repo_impl import (
            ReservationCommandRepoImpl,
        )
        from reservation_engine.service.reservation.driven_adapter.repo.show_catalog_query_repo_impl import (
            ShowCatalogQueryRepoImpl,
        )

        if self._owns_session:
            assert self.session_factory is not None
            self.session = self.session_factory()

        assert self.session is not None
        if self.isolation_level:
            # Must be the first statement of the transaction to take effect
            await self.session.connection(
                execution_options={'isolation_level': self.isolation_level}
            )

        # Create repositories with shared session
        self.reservation_command_repo = ReservationCommandRepoImpl()
        self.reservation_command_repo.session = self.session
        self.show_catalog_query_repo = ShowCatalogQueryRepoImpl(session_factory=None)
        self.show_catalog_query_repo.session = self.session

        return await super().__aenter__()

    async def __aexit__(self, *args):
        try:
            await super().__aexit__(*args)
        finally:
            if self._owns_session and self.session is not None:
                await self.session.close()
                self.session = None

    async def _commit(self):
        assert self.session is not None
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()


def get_unit_of_work(
    session: AsyncSession = Depends(get_async_session),
) -> AbstractUnitOfWork:
    """FastAPI dependency for a READ COMMITTED Unit of Work"""
    return SqlAlchemyUnitOfWork(session)


def get_serializable_unit_of_work(
    session: AsyncSession = Depends(get_async_session),
) -> AbstractUnitOfWork:
    """FastAPI dependency for a SERIALIZABLE Unit of Work (write-skew prevention)"""
    return SqlAlchemyUnitOfWork(session, isolation_level=SERIALIZABLE)

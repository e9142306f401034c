from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, Collection, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reservation_engine.platform.logging.loguru_io import Logger
from reservation_engine.service.reservation.app.interface.i_show_catalog_query_repo import (
    IShowCatalogQueryRepo,
)
from reservation_engine.service.reservation.domain.entity.show_entity import Seat, Show
from reservation_engine.service.reservation.driven_adapter.model.catalog_model import (
    SeatModel,
    ShowModel,
)
from reservation_engine.service.reservation.driven_adapter.repo.reservation_repo_helper import (
    to_seat_entity,
    to_show_entity,
)


class ShowCatalogQueryRepoImpl(IShowCatalogQueryRepo):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ):
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        """
        Get session for query execution.

        Inside a unit of work the injected session is used so the reads take part in
        its transaction; otherwise a short-lived session comes from session_factory.
        """
        if self.session is not None:
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')

    @Logger.io
    async def get_show(self, *, show_id: UUID) -> Optional[Show]:
        async with self._get_session() as session:
            result = await session.execute(select(ShowModel).where(ShowModel.id == show_id))
            db_show = result.scalar_one_or_none()
            return to_show_entity(db_show) if db_show else None

    @Logger.io
    async def get_seats_of_screen(
        self, *, screen_id: UUID, seat_ids: Collection[UUID]
    ) -> List[Seat]:
        async with self._get_session() as session:
            result = await session.execute(
                select(SeatModel).where(
                    SeatModel.screen_id == screen_id, SeatModel.id.in_(list(seat_ids))
                )
            )
            return [to_seat_entity(db_seat) for db_seat in result.scalars().all()]

    @Logger.io
    async def list_seats_of_screen(self, *, screen_id: UUID) -> List[Seat]:
        async with self._get_session() as session:
            result = await session.execute(
                select(SeatModel)
                .where(SeatModel.screen_id == screen_id)
                .order_by(SeatModel.row, SeatModel.number)
            )
            return [to_seat_entity(db_seat) for db_seat in result.scalars().all()]

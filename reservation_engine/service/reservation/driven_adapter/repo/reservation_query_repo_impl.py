from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncContextManager, AsyncIterator, Callable, Optional, Set
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reservation_engine.platform.logging.loguru_io import Logger
from reservation_engine.service.reservation.app.interface.i_reservation_query_repo import (
    IReservationQueryRepo,
)
from reservation_engine.service.reservation.domain.entity.reservation_entity import Reservation
from reservation_engine.service.reservation.driven_adapter.model.reservation_model import (
    ReservationModel,
    ReservedSeatModel,
)
from reservation_engine.service.reservation.driven_adapter.repo.reservation_repo_helper import (
    RESERVATION_DETAIL_OPTIONS,
    live_reservation_clause,
    to_reservation_entity,
)


class ReservationQueryRepoImpl(IReservationQueryRepo):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ):
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session is not None:
            # Session injected by UoW - use directly (no context manager needed)
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')

    @Logger.io
    async def get_by_id(self, *, reservation_id: UUID, user_id: str) -> Optional[Reservation]:
        async with self._get_session() as session:
            result = await session.execute(
                select(ReservationModel)
                .options(*RESERVATION_DETAIL_OPTIONS)
                .where(
                    ReservationModel.id == reservation_id,
                    ReservationModel.user_id == user_id,
                )
            )
            db_reservation = result.scalar_one_or_none()
            return to_reservation_entity(db_reservation) if db_reservation else None

    @Logger.io
    async def get_live_seat_ids(self, *, show_id: UUID, now: datetime) -> Set[UUID]:
        async with self._get_session() as session:
            result = await session.execute(
                select(ReservedSeatModel.seat_id)
                .join(ReservationModel, ReservedSeatModel.reservation_id == ReservationModel.id)
                .where(ReservationModel.show_id == show_id, live_reservation_clause(now))
            )
            return set(result.scalars().all())

from datetime import datetime
from typing import Collection, Optional
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from reservation_engine.platform.logging.loguru_io import Logger
from reservation_engine.service.reservation.app.interface.i_reservation_command_repo import (
    IReservationCommandRepo,
)
from reservation_engine.service.reservation.domain.entity.reservation_entity import (
    Reservation,
    ReservationStatus,
)
from reservation_engine.service.reservation.driven_adapter.model.reservation_model import (
    ReservationModel,
    ReservedSeatModel,
)
from reservation_engine.service.reservation.driven_adapter.repo.reservation_repo_helper import (
    RESERVATION_DETAIL_OPTIONS,
    live_reservation_clause,
    to_reservation_entity,
)


class ReservationCommandRepoImpl(IReservationCommandRepo):
    """Write side of the reservation store; the session is injected by the unit of work"""

    def __init__(self) -> None:
        self.session: AsyncSession | None = None

    @property
    def _session(self) -> AsyncSession:
        if self.session is None:
            raise RuntimeError('ReservationCommandRepoImpl must be used inside a unit of work')
        return self.session

    @Logger.io
    async def exists_live_claim(
        self, *, show_id: UUID, seat_ids: Collection[UUID], now: datetime
    ) -> bool:
        stmt = (
            select(ReservedSeatModel.id)
            .join(ReservationModel, ReservedSeatModel.reservation_id == ReservationModel.id)
            .where(
                ReservationModel.show_id == show_id,
                ReservedSeatModel.seat_id.in_(list(seat_ids)),
                live_reservation_clause(now),
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.first() is not None

    @Logger.io
    async def create(self, *, reservation: Reservation) -> Reservation:
        db_reservation = ReservationModel(
            id=reservation.id,
            user_id=reservation.user_id,
            show_id=reservation.show_id,
            status=reservation.status.value,
            total_amount=reservation.total_amount,
            expires_at=reservation.expires_at,
            created_at=reservation.created_at,
            reserved_seats=[
                ReservedSeatModel(id=item.id, seat_id=item.seat_id, price=item.price)
                for item in reservation.reserved_seats
            ],
        )
        self._session.add(db_reservation)
        await self._session.flush()
        return reservation

    @Logger.io
    async def get_for_update(
        self, *, reservation_id: UUID, user_id: Optional[str] = None
    ) -> Optional[Reservation]:
        stmt = (
            select(ReservationModel)
            .options(*RESERVATION_DETAIL_OPTIONS)
            .where(ReservationModel.id == reservation_id)
            .with_for_update(of=ReservationModel)
        )
        if user_id is not None:
            stmt = stmt.where(ReservationModel.user_id == user_id)
        result = await self._session.execute(stmt)
        db_reservation = result.scalar_one_or_none()
        return to_reservation_entity(db_reservation) if db_reservation else None

    @Logger.io
    async def update_status(self, *, reservation: Reservation) -> Reservation:
        await self._session.execute(
            update(ReservationModel)
            .where(ReservationModel.id == reservation.id)
            .values(status=reservation.status.value, expires_at=reservation.expires_at)
        )
        return reservation

    @Logger.io
    async def delete(self, *, reservation_id: UUID) -> None:
        await self._session.execute(
            delete(ReservedSeatModel)
            .where(ReservedSeatModel.reservation_id == reservation_id)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(
            delete(ReservationModel)
            .where(ReservationModel.id == reservation_id)
            .execution_options(synchronize_session=False)
        )
        # Detach the locked instances so the identity map does not outlive the rows
        self._session.expunge_all()

    @Logger.io
    async def delete_expired_holds(self, *, now: datetime) -> int:
        # reserved_seat rows go through ON DELETE CASCADE
        result = await self._session.execute(
            delete(ReservationModel)
            .where(
                ReservationModel.status == ReservationStatus.HOLD.value,
                ReservationModel.expires_at < now,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

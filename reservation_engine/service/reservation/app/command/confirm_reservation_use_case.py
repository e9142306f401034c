from datetime import datetime, timezone
from typing import Optional, Self
from uuid import UUID

from fastapi import Depends
from opentelemetry import trace

from reservation_engine.platform.database.unit_of_work import (
    AbstractUnitOfWork,
    get_unit_of_work,
)
from reservation_engine.platform.exception.exceptions import NotFoundError
from reservation_engine.platform.logging.loguru_io import Logger
from reservation_engine.platform.metrics.reservation_metrics import metrics
from reservation_engine.service.reservation.domain.entity.reservation_entity import Reservation


RESERVATION_NOT_FOUND = 'Reservation not found'


class ConfirmReservationUseCase:
    """
    Turn a HOLD into a CONFIRMED reservation.

    The reservation row is locked (SELECT ... FOR UPDATE) before its state is
    inspected, so a concurrent confirm, release or sweep serialises behind it.
    Seat coverage does not change, so the conflict check is not repeated.

    Any caller may confirm a hold by its id; `user_id` only tags the span.
    """

    def __init__(self, *, uow: AbstractUnitOfWork):
        self.uow = uow
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self,
        *,
        reservation_id: UUID,
        user_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Reservation:
        now = now or datetime.now(timezone.utc)
        with (
            self.tracer.start_as_current_span(
                'use_case.confirm_reservation',
                attributes={'reservation.id': str(reservation_id), 'user.id': user_id or ''},
            ),
            metrics.track_operation(operation='confirm'),
        ):
            async with self.uow:
                reservation = await self.uow.reservation_command_repo.get_for_update(
                    reservation_id=reservation_id
                )
                if not reservation:
                    raise NotFoundError(RESERVATION_NOT_FOUND)

                confirmed = reservation.confirm(now=now)
                await self.uow.reservation_command_repo.update_status(reservation=confirmed)
                await self.uow.commit()

        Logger.base.info(f'✅ [CONFIRM] Reservation {reservation_id} confirmed')
        return confirmed

from typing import Self
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


RESERVATION_NOT_FOUND = 'Reservation not found or user unauthorized'


class ReleaseReservationUseCase:
    """
    Give up a HOLD before it expires.

    Ownership doubles as the existence check: a reservation held by someone else is
    reported exactly like a missing one. Only HOLD reservations can be released;
    the reserved seats and the reservation are deleted in one transaction.
    """

    def __init__(self, *, uow: AbstractUnitOfWork):
        self.uow = uow
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, reservation_id: UUID, user_id: str) -> None:
        with (
            self.tracer.start_as_current_span(
                'use_case.release_reservation',
                attributes={'reservation.id': str(reservation_id), 'user.id': user_id},
            ),
            metrics.track_operation(operation='release'),
        ):
            async with self.uow:
                reservation = await self.uow.reservation_command_repo.get_for_update(
                    reservation_id=reservation_id, user_id=user_id
                )
                if not reservation:
                    raise NotFoundError(RESERVATION_NOT_FOUND)

                reservation.ensure_releasable()
                await self.uow.reservation_command_repo.delete(reservation_id=reservation_id)
                await self.uow.commit()

        Logger.base.info(f'🗑️ [RELEASE] Reservation {reservation_id} released')

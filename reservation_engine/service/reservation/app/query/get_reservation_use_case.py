from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from reservation_engine.platform.config.di import Container
from reservation_engine.platform.exception.exceptions import NotFoundError
from reservation_engine.platform.logging.loguru_io import Logger
from reservation_engine.service.reservation.app.interface.i_reservation_query_repo import (
    IReservationQueryRepo,
)
from reservation_engine.service.reservation.domain.entity.reservation_entity import Reservation


class GetReservationUseCase:
    def __init__(self, *, reservation_query_repo: IReservationQueryRepo):
        self.reservation_query_repo = reservation_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        reservation_query_repo: IReservationQueryRepo = Depends(
            Provide[Container.reservation_query_repo]
        ),
    ) -> Self:
        return cls(reservation_query_repo=reservation_query_repo)

    @Logger.io
    async def execute(self, *, reservation_id: UUID, user_id: str) -> Reservation:
        reservation = await self.reservation_query_repo.get_by_id(
            reservation_id=reservation_id, user_id=user_id
        )
        if not reservation:
            raise NotFoundError('Reservation not found or user unauthorized')
        return reservation

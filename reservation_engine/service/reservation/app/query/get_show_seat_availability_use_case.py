from datetime import datetime, timezone
from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from reservation_engine.platform.config.di import Container
from reservation_engine.platform.exception.exceptions import NotFoundError
from reservation_engine.platform.logging.loguru_io import Logger
from reservation_engine.service.reservation.app.interface.i_reservation_query_repo import (
    IReservationQueryRepo,
)
from reservation_engine.service.reservation.app.interface.i_show_catalog_query_repo import (
    IShowCatalogQueryRepo,
)
from reservation_engine.service.reservation.domain.entity.seat_availability_entity import (
    ShowSeatAvailability,
)


class GetShowSeatAvailabilityUseCase:
    """
    Every seat of the show's screen tagged AVAILABLE or RESERVED.

    Uses the same live predicate as the conflict check: expired holds that the
    sweeper has not deleted yet are reported as AVAILABLE.
    """

    def __init__(
        self,
        *,
        show_catalog_query_repo: IShowCatalogQueryRepo,
        reservation_query_repo: IReservationQueryRepo,
    ) -> None:
        self.show_catalog_query_repo = show_catalog_query_repo
        self.reservation_query_repo = reservation_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        show_catalog_query_repo: IShowCatalogQueryRepo = Depends(
            Provide[Container.show_catalog_query_repo]
        ),
        reservation_query_repo: IReservationQueryRepo = Depends(
            Provide[Container.reservation_query_repo]
        ),
    ) -> Self:
        return cls(
            show_catalog_query_repo=show_catalog_query_repo,
            reservation_query_repo=reservation_query_repo,
        )

    @Logger.io
    async def execute(
        self, *, show_id: UUID, now: Optional[datetime] = None
    ) -> ShowSeatAvailability:
        now = now or datetime.now(timezone.utc)
        show = await self.show_catalog_query_repo.get_show(show_id=show_id)
        if not show:
            raise NotFoundError(f'Show with ID {show_id} not found')

        seats = await self.show_catalog_query_repo.list_seats_of_screen(screen_id=show.screen_id)
        reserved_seat_ids = await self.reservation_query_repo.get_live_seat_ids(
            show_id=show_id, now=now
        )
        return ShowSeatAvailability.build(
            show=show, seats=seats, reserved_seat_ids=reserved_seat_ids
        )

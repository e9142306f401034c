from datetime import datetime, timedelta
from unittest.mock import AsyncMock
from uuid import UUID

import pytest

from reservation_engine.platform.exception.exceptions import NotFoundError
from reservation_engine.service.reservation.app.query.get_reservation_use_case import (
    GetReservationUseCase,
)
from reservation_engine.service.reservation.app.query.get_show_seat_availability_use_case import (
    GetShowSeatAvailabilityUseCase,
)
from reservation_engine.service.reservation.domain.entity.reservation_entity import Reservation
from reservation_engine.service.reservation.domain.entity.seat_availability_entity import (
    SeatAvailabilityStatus,
)
from reservation_engine.service.reservation.domain.entity.show_entity import Seat, Show


RESERVATION_ID = UUID('00000000-0000-0000-0000-0000000000d1')


@pytest.mark.unit
class TestGetShowSeatAvailability:
    @pytest.mark.asyncio
    async def test_availability_uses_live_seat_ids(
        self, show: Show, seat_a1: Seat, seat_a2: Seat, now: datetime
    ) -> None:
        show_repo = AsyncMock()
        show_repo.get_show = AsyncMock(return_value=show)
        show_repo.list_seats_of_screen = AsyncMock(return_value=[seat_a1, seat_a2])
        reservation_repo = AsyncMock()
        reservation_repo.get_live_seat_ids = AsyncMock(return_value={seat_a1.id})

        use_case = GetShowSeatAvailabilityUseCase(
            show_catalog_query_repo=show_repo, reservation_query_repo=reservation_repo
        )
        availability = await use_case.execute(show_id=show.id, now=now)

        reservation_repo.get_live_seat_ids.assert_awaited_once_with(show_id=show.id, now=now)
        show_repo.list_seats_of_screen.assert_awaited_once_with(screen_id=show.screen_id)
        assert [item.status for item in availability.seats] == [
            SeatAvailabilityStatus.RESERVED,
            SeatAvailabilityStatus.AVAILABLE,
        ]
        assert availability.available_seats == 1

    @pytest.mark.asyncio
    async def test_unknown_show_is_not_found(self, show: Show) -> None:
        show_repo = AsyncMock()
        show_repo.get_show = AsyncMock(return_value=None)
        reservation_repo = AsyncMock()

        use_case = GetShowSeatAvailabilityUseCase(
            show_catalog_query_repo=show_repo, reservation_query_repo=reservation_repo
        )
        with pytest.raises(NotFoundError, match='Show with ID'):
            await use_case.execute(show_id=show.id)

        reservation_repo.get_live_seat_ids.assert_not_called()


@pytest.mark.unit
class TestGetReservation:
    @pytest.mark.asyncio
    async def test_holder_sees_reservation(self, show: Show, seat_a1: Seat, now: datetime) -> None:
        reservation = Reservation.hold(
            id=RESERVATION_ID,
            user_id='user-1',
            show=show,
            seats=[seat_a1],
            now=now,
            hold_window=timedelta(minutes=10),
        )
        repo = AsyncMock()
        repo.get_by_id = AsyncMock(return_value=reservation)

        result = await GetReservationUseCase(reservation_query_repo=repo).execute(
            reservation_id=RESERVATION_ID, user_id='user-1'
        )

        assert result is reservation
        repo.get_by_id.assert_awaited_once_with(reservation_id=RESERVATION_ID, user_id='user-1')

    @pytest.mark.asyncio
    async def test_other_user_gets_not_found(self) -> None:
        repo = AsyncMock()
        repo.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError, match='not found or user unauthorized'):
            await GetReservationUseCase(reservation_query_repo=repo).execute(
                reservation_id=RESERVATION_ID, user_id='user-2'
            )

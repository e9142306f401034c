"""
Unit tests for the Reservation aggregate

Test Focus:
1. hold(): prices frozen per seat, total, deadline = now + hold window
2. confirm(): HOLD -> CONFIRMED, deadline cleared; expired or non-HOLD rejected
3. ensure_releasable(): only HOLD can be released
4. is_live(): CONFIRMED always, HOLD until its deadline
"""

from datetime import datetime, timedelta
from decimal import Decimal
from uuid import UUID

import attrs
import pytest

from reservation_engine.platform.exception.exceptions import DomainError, InvalidStateError
from reservation_engine.service.reservation.domain.entity.reservation_entity import (
    Reservation,
    ReservationStatus,
    generate_id,
)
from reservation_engine.service.reservation.domain.entity.show_entity import Seat, SeatType, Show


HOLD_WINDOW = timedelta(minutes=10)
RESERVATION_ID = UUID('00000000-0000-0000-0000-0000000000d1')


@pytest.mark.unit
class TestReservationHold:
    def test_hold_freezes_prices_and_sums_total(
        self, show: Show, seat_a1: Seat, seat_a2: Seat, now: datetime
    ) -> None:
        reservation = Reservation.hold(
            id=RESERVATION_ID,
            user_id='user-1',
            show=show,
            seats=[seat_a1, seat_a2],
            now=now,
            hold_window=HOLD_WINDOW,
        )

        assert reservation.status == ReservationStatus.HOLD
        assert reservation.show_id == show.id
        assert [item.price for item in reservation.reserved_seats] == [
            Decimal('10.00'),
            Decimal('15.00'),
        ]
        assert reservation.total_amount == Decimal('25.00')
        assert reservation.expires_at == now + HOLD_WINDOW
        assert reservation.created_at == now

    def test_hold_copies_seat_position_onto_line_items(
        self, show: Show, seat_a3: Seat, now: datetime
    ) -> None:
        reservation = Reservation.hold(
            id=RESERVATION_ID,
            user_id='user-1',
            show=show,
            seats=[seat_a3],
            now=now,
            hold_window=HOLD_WINDOW,
        )

        item = reservation.reserved_seats[0]
        assert item.seat_id == seat_a3.id
        assert (item.row, item.number, item.seat_type) == ('A', 3, SeatType.ACCESSIBLE)
        assert item.price == Decimal('12.00')

    def test_hold_without_seats_fails(self, show: Show, now: datetime) -> None:
        with pytest.raises(DomainError, match='At least one seat'):
            Reservation.hold(
                id=RESERVATION_ID,
                user_id='user-1',
                show=show,
                seats=[],
                now=now,
                hold_window=HOLD_WINDOW,
            )

    def test_hold_rejects_seat_of_another_screen(
        self, show: Show, seat_a1: Seat, now: datetime
    ) -> None:
        foreign_seat = attrs.evolve(seat_a1, screen_id=generate_id())

        with pytest.raises(DomainError, match='screen of the show'):
            Reservation.hold(
                id=RESERVATION_ID,
                user_id='user-1',
                show=show,
                seats=[foreign_seat],
                now=now,
                hold_window=HOLD_WINDOW,
            )


@pytest.mark.unit
class TestReservationLifecycle:
    @pytest.fixture
    def held(self, show: Show, seat_a1: Seat, now: datetime) -> Reservation:
        return Reservation.hold(
            id=RESERVATION_ID,
            user_id='user-1',
            show=show,
            seats=[seat_a1],
            now=now,
            hold_window=HOLD_WINDOW,
        )

    def test_confirm_clears_deadline(self, held: Reservation, now: datetime) -> None:
        confirmed = held.confirm(now=now + timedelta(minutes=5))

        assert confirmed.status == ReservationStatus.CONFIRMED
        assert confirmed.expires_at is None
        assert confirmed.total_amount == held.total_amount
        # The original HOLD value is untouched
        assert held.status == ReservationStatus.HOLD

    def test_confirm_twice_fails(self, held: Reservation, now: datetime) -> None:
        confirmed = held.confirm(now=now)

        with pytest.raises(InvalidStateError, match='not in HOLD state'):
            confirmed.confirm(now=now)

    def test_confirm_after_deadline_fails(self, held: Reservation, now: datetime) -> None:
        with pytest.raises(InvalidStateError, match='hold has expired'):
            held.confirm(now=now + HOLD_WINDOW + timedelta(seconds=1))

    def test_confirm_exactly_at_deadline_fails(self, held: Reservation, now: datetime) -> None:
        with pytest.raises(InvalidStateError, match='hold has expired'):
            held.confirm(now=now + HOLD_WINDOW)

    def test_release_of_hold_is_allowed(self, held: Reservation) -> None:
        held.ensure_releasable()

    def test_release_of_confirmed_fails(self, held: Reservation, now: datetime) -> None:
        confirmed = held.confirm(now=now)

        with pytest.raises(InvalidStateError, match='Only HOLD'):
            confirmed.ensure_releasable()

    def test_liveness(self, held: Reservation, now: datetime) -> None:
        assert held.is_live(now=now)
        assert held.is_live(now=now + HOLD_WINDOW - timedelta(seconds=1))
        assert not held.is_live(now=now + HOLD_WINDOW)

        confirmed = held.confirm(now=now)
        assert confirmed.is_live(now=now + timedelta(days=365))

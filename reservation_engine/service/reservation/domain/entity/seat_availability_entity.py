from decimal import Decimal
from enum import StrEnum
from typing import AbstractSet, List
from uuid import UUID

import attrs

from reservation_engine.service.reservation.domain.entity.show_entity import Seat, Show
from reservation_engine.service.reservation.domain.seat_pricing import calculate_seat_price


class SeatAvailabilityStatus(StrEnum):
    AVAILABLE = 'AVAILABLE'
    RESERVED = 'RESERVED'


@attrs.define(frozen=True)
class SeatAvailability:
    seat: Seat
    price: Decimal
    status: SeatAvailabilityStatus


@attrs.define(frozen=True)
class ShowSeatAvailability:
    show: Show
    seats: List[SeatAvailability]

    @classmethod
    def build(
        cls, *, show: Show, seats: List[Seat], reserved_seat_ids: AbstractSet[UUID]
    ) -> 'ShowSeatAvailability':
        ordered = sorted(seats, key=lambda seat: (seat.row, seat.number))
        return cls(
            show=show,
            seats=[
                SeatAvailability(
                    seat=seat,
                    price=calculate_seat_price(
                        base_price=show.base_price, seat_type=seat.seat_type
                    ),
                    status=(
                        SeatAvailabilityStatus.RESERVED
                        if seat.id in reserved_seat_ids
                        else SeatAvailabilityStatus.AVAILABLE
                    ),
                )
                for seat in ordered
            ],
        )

    @property
    def total_seats(self) -> int:
        return len(self.seats)

    @property
    def reserved_seats(self) -> int:
        return sum(1 for seat in self.seats if seat.status == SeatAvailabilityStatus.RESERVED)

    @property
    def available_seats(self) -> int:
        return self.total_seats - self.reserved_seats

from datetime import datetime, timedelta
from decimal import Decimal
from enum import StrEnum
from typing import List, Optional
from uuid import UUID

import attrs
import uuid_utils

from reservation_engine.platform.exception.exceptions import DomainError, InvalidStateError
from reservation_engine.platform.logging.loguru_io import Logger
from reservation_engine.service.reservation.domain.entity.show_entity import (
    Seat,
    SeatType,
    Show,
)
from reservation_engine.service.reservation.domain.seat_pricing import (
    calculate_seat_price,
    calculate_total,
)


class ReservationStatus(StrEnum):
    HOLD = 'HOLD'
    CONFIRMED = 'CONFIRMED'


def generate_id() -> UUID:
    """UUID7 as a stdlib UUID (what SQLAlchemy's PG_UUID(as_uuid=True) expects)"""
    return UUID(str(uuid_utils.uuid7()))


@attrs.define
class ReservedSeat:
    id: UUID
    seat_id: UUID
    price: Decimal
    row: Optional[str] = None
    number: Optional[int] = None
    seat_type: Optional[SeatType] = None


@attrs.define
class Reservation:
    id: UUID
    user_id: str
    show_id: UUID
    total_amount: Decimal
    status: ReservationStatus = ReservationStatus.HOLD
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    reserved_seats: List[ReservedSeat] = attrs.field(factory=list)
    show: Optional[Show] = None

    @classmethod
    @Logger.io
    def hold(
        cls,
        *,
        id: UUID,
        user_id: str,
        show: Show,
        seats: List[Seat],
        now: datetime,
        hold_window: timedelta,
    ) -> 'Reservation':
        if not seats:
            raise DomainError('At least one seat must be reserved')
        # Create already loads seats by screen; this guards callers that build holds directly
        if any(seat.screen_id != show.screen_id for seat in seats):
            raise DomainError('Seats must belong to the screen of the show')

        reserved_seats = [
            ReservedSeat(
                id=generate_id(),
                seat_id=seat.id,
                price=calculate_seat_price(base_price=show.base_price, seat_type=seat.seat_type),
                row=seat.row,
                number=seat.number,
                seat_type=seat.seat_type,
            )
            for seat in seats
        ]
        return cls(
            id=id,
            user_id=user_id,
            show_id=show.id,
            total_amount=calculate_total([reserved.price for reserved in reserved_seats]),
            status=ReservationStatus.HOLD,
            expires_at=now + hold_window,
            created_at=now,
            reserved_seats=reserved_seats,
            show=show,
        )

    def is_live(self, *, now: datetime) -> bool:
        """A reservation blocks its seats while confirmed or while its hold has not expired"""
        if self.status == ReservationStatus.CONFIRMED:
            return True
        return self.expires_at is not None and self.expires_at > now

    @Logger.io
    def confirm(self, *, now: datetime) -> 'Reservation':
        if self.status != ReservationStatus.HOLD:
            raise InvalidStateError('Reservation is not in HOLD state')
        if not self.is_live(now=now):
            raise InvalidStateError('Reservation hold has expired')
        return attrs.evolve(self, status=ReservationStatus.CONFIRMED, expires_at=None)

    def ensure_releasable(self) -> None:
        if self.status != ReservationStatus.HOLD:
            raise InvalidStateError('Only HOLD reservations can be released')

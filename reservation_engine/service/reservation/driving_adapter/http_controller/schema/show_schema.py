from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel

from reservation_engine.service.reservation.domain.entity.seat_availability_entity import (
    ShowSeatAvailability,
)
from reservation_engine.service.reservation.driving_adapter.http_controller.schema.money import (
    Money,
)


class SeatAvailabilityResponse(BaseModel):
    id: UUID
    row: str
    number: int
    seat_type: str
    price: Money
    status: str  # AVAILABLE / RESERVED


class ShowSeatAvailabilityResponse(BaseModel):
    show_id: UUID
    movie_title: str
    screen_name: str
    start_time: datetime
    base_price: Money
    total_seats: int
    reserved_seats: int
    available_seats: int
    seats: List[SeatAvailabilityResponse]

    @classmethod
    def from_entity(cls, availability: ShowSeatAvailability) -> 'ShowSeatAvailabilityResponse':
        show = availability.show
        return cls(
            show_id=show.id,
            movie_title=show.movie.title if show.movie else '',
            screen_name=show.screen.name if show.screen else '',
            start_time=show.start_time,
            base_price=show.base_price,
            total_seats=availability.total_seats,
            reserved_seats=availability.reserved_seats,
            available_seats=availability.available_seats,
            seats=[
                SeatAvailabilityResponse(
                    id=item.seat.id,
                    row=item.seat.row,
                    number=item.seat.number,
                    seat_type=item.seat.seat_type.value,
                    price=item.price,
                    status=item.status.value,
                )
                for item in availability.seats
            ],
        )

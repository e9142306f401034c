from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from reservation_engine.service.reservation.domain.entity.reservation_entity import (
    Reservation,
    ReservedSeat,
)
from reservation_engine.service.reservation.domain.entity.show_entity import Show
from reservation_engine.service.reservation.driving_adapter.http_controller.schema.money import (
    Money,
)


class ReservationCreateRequest(BaseModel):
    show_id: UUID
    seat_ids: List[UUID] = Field(..., min_length=1, max_length=50)

    @field_validator('seat_ids')
    @classmethod
    def seat_ids_must_be_unique(cls, v: List[UUID]) -> List[UUID]:
        if len(set(v)) != len(v):
            raise ValueError('seat_ids must not contain duplicates')
        return v

    model_config = {
        'json_schema_extra': {
            'example': {
                'show_id': '019a1af7-0000-7003-0000-000000000001',
                'seat_ids': [
                    '019a1af7-0000-7004-0000-000000000001',
                    '019a1af7-0000-7004-0000-000000000002',
                ],
            }
        }
    }


class MovieResponse(BaseModel):
    id: UUID
    title: str
    duration: int


class ScreenResponse(BaseModel):
    id: UUID
    name: str


class ShowResponse(BaseModel):
    id: UUID
    start_time: datetime
    duration: int
    base_price: Money
    movie: Optional[MovieResponse] = None
    screen: Optional[ScreenResponse] = None

    @classmethod
    def from_entity(cls, show: Show) -> 'ShowResponse':
        return cls(
            id=show.id,
            start_time=show.start_time,
            duration=show.duration,
            base_price=show.base_price,
            movie=(
                MovieResponse(id=show.movie.id, title=show.movie.title, duration=show.movie.duration)
                if show.movie
                else None
            ),
            screen=ScreenResponse(id=show.screen.id, name=show.screen.name) if show.screen else None,
        )


class ReservedSeatResponse(BaseModel):
    id: UUID
    seat_id: UUID
    row: Optional[str] = None
    number: Optional[int] = None
    seat_type: Optional[str] = None
    price: Money

    @classmethod
    def from_entity(cls, reserved_seat: ReservedSeat) -> 'ReservedSeatResponse':
        return cls(
            id=reserved_seat.id,
            seat_id=reserved_seat.seat_id,
            row=reserved_seat.row,
            number=reserved_seat.number,
            seat_type=reserved_seat.seat_type.value if reserved_seat.seat_type else None,
            price=reserved_seat.price,
        )


class ReservationResponse(BaseModel):
    id: UUID
    user_id: str
    show_id: UUID
    status: str
    total_amount: Money
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    show: Optional[ShowResponse] = None
    reserved_seats: List[ReservedSeatResponse]

    @classmethod
    def from_entity(cls, reservation: Reservation) -> 'ReservationResponse':
        return cls(
            id=reservation.id,
            user_id=reservation.user_id,
            show_id=reservation.show_id,
            status=reservation.status.value,
            total_amount=reservation.total_amount,
            expires_at=reservation.expires_at,
            created_at=reservation.created_at,
            show=ShowResponse.from_entity(reservation.show) if reservation.show else None,
            reserved_seats=[
                ReservedSeatResponse.from_entity(item) for item in reservation.reserved_seats
            ],
        )

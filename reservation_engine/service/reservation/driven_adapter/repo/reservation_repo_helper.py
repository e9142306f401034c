"""
Shared pieces of the reservation repositories: the live-reservation predicate and
model → entity conversion.

The live predicate is the single definition used by the conflict check, the
availability query and (in Python) by Reservation.is_live.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ColumnElement, and_, or_
from sqlalchemy.orm import selectinload

from reservation_engine.service.reservation.domain.entity.reservation_entity import (
    Reservation,
    ReservationStatus,
    ReservedSeat,
)
from reservation_engine.service.reservation.domain.entity.show_entity import (
    MovieSummary,
    ScreenSummary,
    Seat,
    SeatType,
    Show,
)
from reservation_engine.service.reservation.driven_adapter.model.catalog_model import (
    SeatModel,
    ShowModel,
)
from reservation_engine.service.reservation.driven_adapter.model.reservation_model import (
    ReservationModel,
    ReservedSeatModel,
)


def live_reservation_clause(now: datetime) -> ColumnElement[bool]:
    return or_(
        ReservationModel.status == ReservationStatus.CONFIRMED.value,
        and_(
            ReservationModel.status == ReservationStatus.HOLD.value,
            ReservationModel.expires_at > now,
        ),
    )


# Eager-load options for the denormalised reservation view
RESERVATION_DETAIL_OPTIONS = (
    selectinload(ReservationModel.show),
    selectinload(ReservationModel.reserved_seats).selectinload(ReservedSeatModel.seat),
)


def to_seat_entity(db_seat: SeatModel) -> Seat:
    return Seat(
        id=db_seat.id,
        screen_id=db_seat.screen_id,
        row=db_seat.row,
        number=db_seat.number,
        seat_type=SeatType(db_seat.seat_type),
    )


def to_show_entity(db_show: ShowModel) -> Show:
    # movie / screen are lazy='selectin' so they are always populated
    return Show(
        id=db_show.id,
        screen_id=db_show.screen_id,
        start_time=db_show.start_time,
        duration=db_show.duration,
        base_price=Decimal(db_show.base_price),
        movie=MovieSummary(
            id=db_show.movie.id, title=db_show.movie.title, duration=db_show.movie.duration
        ),
        screen=ScreenSummary(id=db_show.screen.id, name=db_show.screen.name),
    )


def to_reserved_seat_entity(db_reserved_seat: ReservedSeatModel) -> ReservedSeat:
    db_seat = db_reserved_seat.seat
    return ReservedSeat(
        id=db_reserved_seat.id,
        seat_id=db_reserved_seat.seat_id,
        price=Decimal(db_reserved_seat.price),
        row=db_seat.row,
        number=db_seat.number,
        seat_type=SeatType(db_seat.seat_type),
    )


def to_reservation_entity(db_reservation: ReservationModel) -> Reservation:
    """Requires RESERVATION_DETAIL_OPTIONS to have been applied on the query"""
    reserved_seats = sorted(
        (to_reserved_seat_entity(item) for item in db_reservation.reserved_seats),
        key=lambda item: (item.row or '', item.number or 0),
    )
    return Reservation(
        id=UUID(str(db_reservation.id)),
        user_id=db_reservation.user_id,
        show_id=db_reservation.show_id,
        status=ReservationStatus(db_reservation.status),
        total_amount=Decimal(db_reservation.total_amount),
        expires_at=db_reservation.expires_at,
        created_at=db_reservation.created_at,
        reserved_seats=reserved_seats,
        show=to_show_entity(db_reservation.show),
    )

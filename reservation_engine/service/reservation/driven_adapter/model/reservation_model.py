from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from reservation_engine.platform.database.orm_db_setting import Base
from reservation_engine.service.reservation.driven_adapter.model.catalog_model import (
    SeatModel,
    ShowModel,
)


class ReservationModel(Base):
    __tablename__ = 'reservation'
    __table_args__ = (
        Index('ix_reservation_show_id_status', 'show_id', 'status'),
        Index('ix_reservation_status_expires_at', 'status', 'expires_at'),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)  # UUID7
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    show_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('show.id'), nullable=False
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='HOLD')
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    show: Mapped[ShowModel] = relationship(ShowModel, lazy='raise', viewonly=True)
    reserved_seats: Mapped[List['ReservedSeatModel']] = relationship(
        'ReservedSeatModel',
        back_populates='reservation',
        cascade='all, delete-orphan',
        passive_deletes=True,
        lazy='raise',
    )


class ReservedSeatModel(Base):
    __tablename__ = 'reserved_seat'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    reservation_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey('reservation.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    seat_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('seat.id'), nullable=False, index=True
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    reservation: Mapped['ReservationModel'] = relationship(
        'ReservationModel', back_populates='reserved_seats', lazy='raise'
    )
    seat: Mapped[SeatModel] = relationship(SeatModel, lazy='raise', viewonly=True)

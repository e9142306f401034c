from datetime import datetime
from decimal import Decimal
from typing import List
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reservation_engine.platform.database.orm_db_setting import Base


class MovieModel(Base):
    __tablename__ = 'movie'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes


class ScreenModel(Base):
    __tablename__ = 'screen'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    seats: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    seat_list: Mapped[List['SeatModel']] = relationship(
        'SeatModel', back_populates='screen', lazy='raise'
    )


class SeatModel(Base):
    __tablename__ = 'seat'
    __table_args__ = (UniqueConstraint('screen_id', 'row', 'number', name='uq_seat_position'),)

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    screen_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('screen.id', ondelete='CASCADE'), nullable=False
    )
    row: Mapped[str] = mapped_column(String(5), nullable=False)
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    seat_type: Mapped[str] = mapped_column(String(20), nullable=False, default='STANDARD')

    screen: Mapped['ScreenModel'] = relationship(
        'ScreenModel', back_populates='seat_list', lazy='raise'
    )


class ShowModel(Base):
    __tablename__ = 'show'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    movie_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('movie.id'), nullable=False
    )
    screen_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('screen.id'), nullable=False, index=True
    )
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes
    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    movie: Mapped['MovieModel'] = relationship('MovieModel', lazy='selectin')
    screen: Mapped['ScreenModel'] = relationship('ScreenModel', lazy='selectin')

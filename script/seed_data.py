#!/usr/bin/env python3
"""
Database Seed Script
Populate a small cinema catalog

Features:
1. Create Movies - two movies
2. Create Screens - each with a seat grid (front row ACCESSIBLE, back row PREMIUM)
3. Create Shows - one show per screen starting tomorrow

Environment:
- ROWS / SEATS_PER_ROW: grid size per screen (default 3 x 10)
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
import os
import string

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from reservation_engine.platform.database.orm_db_setting import dispose_engine, new_session
from reservation_engine.service.reservation.domain.entity.reservation_entity import generate_id
from reservation_engine.service.reservation.domain.entity.show_entity import SeatType
from reservation_engine.service.reservation.driven_adapter.model.catalog_model import (
    MovieModel,
    ScreenModel,
    SeatModel,
    ShowModel,
)


@dataclass
class ShowConfig:
    """Show seed configuration"""

    movie_title: str
    movie_duration: int
    screen_name: str
    base_price: Decimal
    start_offset: timedelta


SHOWS = [
    ShowConfig(
        movie_title='The Long Intermission',
        movie_duration=128,
        screen_name='Screen 1',
        base_price=Decimal('10.00'),
        start_offset=timedelta(days=1, hours=19),
    ),
    ShowConfig(
        movie_title='Popcorn Protocol',
        movie_duration=95,
        screen_name='Screen 2',
        base_price=Decimal('12.50'),
        start_offset=timedelta(days=1, hours=21),
    ),
]


def _seat_type_for_row(row_index: int, row_count: int) -> SeatType:
    if row_index == 0:
        return SeatType.ACCESSIBLE
    if row_index == row_count - 1:
        return SeatType.PREMIUM
    return SeatType.STANDARD


def _build_seats(screen_id, rows: int, seats_per_row: int) -> list[SeatModel]:
    return [
        SeatModel(
            id=generate_id(),
            screen_id=screen_id,
            row=string.ascii_uppercase[row_index],
            number=number,
            seat_type=_seat_type_for_row(row_index, rows).value,
        )
        for row_index in range(rows)
        for number in range(1, seats_per_row + 1)
    ]


async def create_catalog(session: AsyncSession) -> None:
    rows = int(os.getenv('ROWS', '3'))
    seats_per_row = int(os.getenv('SEATS_PER_ROW', '10'))
    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)

    print(f'🎬 Creating {len(SHOWS)} shows ({rows} x {seats_per_row} seats per screen)...')

    for config in SHOWS:
        movie = MovieModel(
            id=generate_id(),
            title=config.movie_title,
            description='',
            duration=config.movie_duration,
        )
        screen = ScreenModel(id=generate_id(), name=config.screen_name, seats=rows * seats_per_row)
        session.add_all([movie, screen])
        await session.flush()

        session.add_all(_build_seats(screen.id, rows, seats_per_row))

        show = ShowModel(
            id=generate_id(),
            movie_id=movie.id,
            screen_id=screen.id,
            start_time=today + config.start_offset,
            duration=config.movie_duration,
            base_price=config.base_price,
        )
        session.add(show)
        await session.flush()

        print(f'   ✅ Show {show.id}: {movie.title} @ {screen.name}, base price {show.base_price}')

    await session.commit()


async def verify_data() -> None:
    print('🔍 Verifying seeded data...')

    async with new_session() as session:
        for table in ['movie', 'screen', 'seat', 'show']:
            result = await session.execute(text(f'SELECT COUNT(*) FROM "{table}"'))
            print(f'   {table.capitalize()} count: {result.scalar()}')


async def main() -> None:
    print('🌱 Starting data seeding...')
    try:
        async with new_session() as session:
            await create_catalog(session)
        await verify_data()
        print('🎉 Data seeding completed!')
    finally:
        await dispose_engine()


if __name__ == '__main__':
    asyncio.run(main())

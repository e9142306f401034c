from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Optional
from uuid import UUID

import attrs


class SeatType(StrEnum):
    STANDARD = 'STANDARD'
    PREMIUM = 'PREMIUM'
    ACCESSIBLE = 'ACCESSIBLE'


@attrs.define(frozen=True)
class Seat:
    id: UUID
    screen_id: UUID
    row: str
    number: int
    seat_type: SeatType = SeatType.STANDARD


@attrs.define(frozen=True)
class MovieSummary:
    id: UUID
    title: str
    duration: int


@attrs.define(frozen=True)
class ScreenSummary:
    id: UUID
    name: str


@attrs.define(frozen=True)
class Show:
    """A scheduled showtime; catalog-owned, read-only for the reservation engine"""

    id: UUID
    screen_id: UUID
    start_time: datetime
    duration: int  # minutes
    base_price: Decimal
    movie: Optional[MovieSummary] = None
    screen: Optional[ScreenSummary] = None

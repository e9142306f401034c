"""
Seat pricing

A seat's price is the show's base price scaled by the multiplier of its seat type.
Prices are frozen on the reserved seat when a hold is created, so later changes to
the show's base price never touch existing reservations.
"""

from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Mapping

from reservation_engine.service.reservation.domain.entity.show_entity import SeatType


SEAT_PRICE_MULTIPLIERS: Mapping[SeatType, Decimal] = MappingProxyType(
    {
        SeatType.STANDARD: Decimal('1.0'),
        SeatType.PREMIUM: Decimal('1.5'),
        SeatType.ACCESSIBLE: Decimal('1.2'),
    }
)

PRICE_QUANTUM = Decimal('0.01')


def quantize_price(amount: Decimal) -> Decimal:
    return amount.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


def calculate_seat_price(*, base_price: Decimal, seat_type: SeatType) -> Decimal:
    return quantize_price(Decimal(base_price) * SEAT_PRICE_MULTIPLIERS[SeatType(seat_type)])


def calculate_total(prices: list[Decimal]) -> Decimal:
    return quantize_price(sum(prices, Decimal('0')))

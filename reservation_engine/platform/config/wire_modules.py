"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from reservation_engine.service.reservation.app.query import (
    get_reservation_use_case,
    get_show_seat_availability_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    get_reservation_use_case,
    get_show_seat_availability_use_case,
]

"""
Conftest for pure unit tests - no external dependencies.

Overrides the infrastructure fixtures from the root conftest and provides
in-memory catalog entities plus a mocked unit of work.
"""

from collections.abc import AsyncGenerator, Generator
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

from fastapi.testclient import TestClient
import pytest

from reservation_engine.service.reservation.domain.entity.show_entity import (
    MovieSummary,
    ScreenSummary,
    Seat,
    SeatType,
    Show,
)


SCREEN_ID = UUID('00000000-0000-0000-0000-0000000000a1')
OTHER_SCREEN_ID = UUID('00000000-0000-0000-0000-0000000000a2')
SHOW_ID = UUID('00000000-0000-0000-0000-0000000000b1')
SEAT_A1_ID = UUID('00000000-0000-0000-0000-0000000000c1')
SEAT_A2_ID = UUID('00000000-0000-0000-0000-0000000000c2')
SEAT_A3_ID = UUID('00000000-0000-0000-0000-0000000000c3')
RESERVATION_ID = UUID('00000000-0000-0000-0000-0000000000d1')
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True, scope='function')
async def clean_database() -> AsyncGenerator[None, None]:
    """No-op override for unit tests - no real database needed"""
    yield


@pytest.fixture(scope='session')
def client() -> Generator[MagicMock, None, None]:
    """Mock client for unit tests - prevents TestClient/lifespan from being created"""
    yield MagicMock(spec=TestClient)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def show() -> Show:
    return Show(
        id=SHOW_ID,
        screen_id=SCREEN_ID,
        start_time=datetime(2026, 10, 20, 19, 30, tzinfo=timezone.utc),
        duration=120,
        base_price=Decimal('10.00'),
        movie=MovieSummary(
            id=UUID('00000000-0000-0000-0000-0000000000e1'), title='Test Movie', duration=120
        ),
        screen=ScreenSummary(id=SCREEN_ID, name='Screen 1'),
    )


@pytest.fixture
def seat_a1() -> Seat:
    return Seat(id=SEAT_A1_ID, screen_id=SCREEN_ID, row='A', number=1, seat_type=SeatType.STANDARD)


@pytest.fixture
def seat_a2() -> Seat:
    return Seat(id=SEAT_A2_ID, screen_id=SCREEN_ID, row='A', number=2, seat_type=SeatType.PREMIUM)


@pytest.fixture
def seat_a3() -> Seat:
    return Seat(
        id=SEAT_A3_ID, screen_id=SCREEN_ID, row='A', number=3, seat_type=SeatType.ACCESSIBLE
    )


@pytest.fixture
def uow() -> MagicMock:
    """Unit of work whose repositories are AsyncMocks; rollback-on-exit is a no-op"""
    mock_uow = MagicMock()
    mock_uow.__aenter__ = AsyncMock(return_value=mock_uow)
    mock_uow.__aexit__ = AsyncMock(return_value=False)
    mock_uow.commit = AsyncMock()
    mock_uow.rollback = AsyncMock()
    mock_uow.reservation_command_repo = AsyncMock()
    mock_uow.show_catalog_query_repo = AsyncMock()
    return mock_uow

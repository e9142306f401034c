from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Set
from uuid import UUID

from reservation_engine.service.reservation.domain.entity.reservation_entity import Reservation


class IReservationQueryRepo(ABC):
    """Repository interface for reservation read operations"""

    @abstractmethod
    async def get_by_id(self, *, reservation_id: UUID, user_id: str) -> Optional[Reservation]:
        """Reservation with show, movie, screen and seat details, scoped to its holder"""
        pass

    @abstractmethod
    async def get_live_seat_ids(self, *, show_id: UUID, now: datetime) -> Set[UUID]:
        """Seat ids of the show covered by live reservations at `now`"""
        pass

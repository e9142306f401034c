from abc import ABC, abstractmethod
from typing import Collection, List, Optional
from uuid import UUID

from reservation_engine.service.reservation.domain.entity.show_entity import Seat, Show


class IShowCatalogQueryRepo(ABC):
    """Read-only access to the show catalog (shows, screens, seats)"""

    @abstractmethod
    async def get_show(self, *, show_id: UUID) -> Optional[Show]:
        """Show with its movie and screen summaries"""
        pass

    @abstractmethod
    async def get_seats_of_screen(
        self, *, screen_id: UUID, seat_ids: Collection[UUID]
    ) -> List[Seat]:
        """Seats among `seat_ids` that belong to the screen; foreign or unknown ids are skipped"""
        pass

    @abstractmethod
    async def list_seats_of_screen(self, *, screen_id: UUID) -> List[Seat]:
        pass
